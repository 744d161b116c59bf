"""Tests for resolving the input path into a batch of videos.

Validates that:
- A single supported file resolves to a one-element job
- Unsupported single files are rejected with UnsupportedFormatError
- Directories are walked recursively with a case-insensitive extension filter
- Results come back in lexical path order
- Missing paths raise PathError
- The extension allow-list is configurable
"""

import os
import sys
from pathlib import Path

import pytest

from vidscribe.errors import PathError, SetupError, UnsupportedFormatError
from vidscribe.modules.media_discovery import MediaDiscovery


class TestSingleFile:

    def test_supported_file(self, tmp_path):
        video = tmp_path / "talk.mp4"
        video.write_bytes(b"x")

        job = MediaDiscovery().resolve(video)

        assert job.sources == (video,)
        assert job.root == video
        assert not job.is_directory

    def test_extension_is_case_insensitive(self, tmp_path):
        video = tmp_path / "TALK.MKV"
        video.write_bytes(b"x")
        assert MediaDiscovery().resolve(video).sources == (video,)

    def test_unsupported_file_raises(self, tmp_path):
        document = tmp_path / "notes.txt"
        document.write_text("hi")

        with pytest.raises(UnsupportedFormatError) as exc_info:
            MediaDiscovery().resolve(document)

        assert isinstance(exc_info.value, SetupError)
        assert "notes.txt" in str(exc_info.value)

    def test_missing_path_raises(self, tmp_path):
        with pytest.raises(PathError):
            MediaDiscovery().resolve(tmp_path / "nope.mp4")


class TestDirectory:

    def test_recursive_walk_filters_extensions(self, video_tree):
        job = MediaDiscovery().resolve(video_tree)

        names = [p.name for p in job.sources]
        assert job.is_directory
        assert sorted(names) == ["a.mp4", "b.MOV", "c.mkv"]

    def test_lexical_order(self, video_tree):
        job = MediaDiscovery().resolve(video_tree)
        as_strings = [str(p) for p in job.sources]
        assert as_strings == sorted(as_strings)

    def test_resolution_is_reproducible(self, video_tree):
        discovery = MediaDiscovery()
        assert discovery.resolve(video_tree).sources == discovery.resolve(video_tree).sources

    def test_empty_directory_is_valid(self, tmp_path):
        empty = tmp_path / "empty"
        empty.mkdir()
        (empty / "readme.md").write_text("nothing here")

        job = MediaDiscovery().resolve(empty)

        assert job.sources == ()
        assert len(job) == 0

    def test_directory_named_like_video_is_skipped(self, tmp_path):
        root = tmp_path / "root"
        (root / "folder.mp4").mkdir(parents=True)
        (root / "folder.mp4" / "real.avi").write_bytes(b"x")

        job = MediaDiscovery().resolve(root)

        assert [p.name for p in job.sources] == ["real.avi"]

    def test_earlier_outputs_are_not_sources(self, video_tree):
        (video_tree / "transcribed_a.mp4").write_bytes(b"burned")
        (video_tree / "nested" / "transcribed_c.mkv").write_bytes(b"burned")

        names = sorted(p.name for p in MediaDiscovery().resolve(video_tree).sources)

        assert names == ["a.mp4", "b.MOV", "c.mkv"]

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="permission bits are not enforced here")
    def test_unreadable_directory_raises(self, tmp_path):
        root = tmp_path / "root"
        locked = root / "locked"
        locked.mkdir(parents=True)
        locked.chmod(0)
        try:
            with pytest.raises(PathError):
                MediaDiscovery().resolve(root)
        finally:
            locked.chmod(0o755)


class TestExtensionFilter:

    @pytest.mark.parametrize("name,included", [
        ("a.mp4", True), ("a.MP4", True), ("a.mov", True), ("a.mkv", True),
        ("a.webm", True), ("a.avi", True), ("a.Avi", True),
        ("a.wmv", False), ("a.mp3", False), ("a.srt", False), ("mp4", False),
        ("a.mp4.bak", False),
    ])
    def test_default_allow_list(self, name, included):
        assert MediaDiscovery().is_supported(Path(name)) is included

    def test_custom_allow_list(self, video_tree):
        discovery = MediaDiscovery(supported_extensions={"txt", ".MKV"})

        names = sorted(p.name for p in discovery.resolve(video_tree).sources)

        assert names == ["c.mkv", "notes.txt"]
