"""Tests for the scoped workspace directory."""

from pathlib import Path

import pytest

from vidscribe.utils.workspace import Workspace


def test_created_on_enter_and_removed_on_exit(tmp_path):
    with Workspace(parent_dir=str(tmp_path)) as workspace:
        path = workspace.path
        assert path.is_dir()
        assert path.parent == tmp_path
        (path / "artifact.bin").write_bytes(b"x")

    assert not path.exists()
    assert not workspace.is_open


def test_removed_when_body_raises(tmp_path):
    with pytest.raises(RuntimeError, match="boom"):
        with Workspace(parent_dir=str(tmp_path)) as workspace:
            path = workspace.path
            workspace.task_dir(1, Path("a.mp4")).joinpath("audio.mp3").write_bytes(b"x")
            raise RuntimeError("boom")

    assert not path.exists()


def test_removed_on_keyboard_interrupt(tmp_path):
    with pytest.raises(KeyboardInterrupt):
        with Workspace(parent_dir=str(tmp_path)) as workspace:
            path = workspace.path
            raise KeyboardInterrupt

    assert not path.exists()


def test_unique_per_instance(tmp_path):
    with Workspace(parent_dir=str(tmp_path)) as first, Workspace(parent_dir=str(tmp_path)) as second:
        assert first.path != second.path


def test_task_dirs_are_namespaced(tmp_path):
    with Workspace(parent_dir=str(tmp_path)) as workspace:
        one = workspace.task_dir(1, Path("dir_a/clip.mp4"))
        two = workspace.task_dir(2, Path("dir_b/clip.mp4"))

        assert one != two
        assert one.name == "0001_clip.mp4"
        assert two.name == "0002_clip.mp4"
        assert one.is_dir() and two.is_dir()
        # Idempotent for the same task
        assert workspace.task_dir(1, Path("dir_a/clip.mp4")) == one


def test_path_outside_scope_raises():
    workspace = Workspace()
    with pytest.raises(RuntimeError):
        _ = workspace.path


def test_creates_missing_parent(tmp_path):
    parent = tmp_path / "does" / "not" / "exist"
    with Workspace(parent_dir=str(parent)) as workspace:
        assert workspace.path.parent == parent
