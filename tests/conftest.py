"""
Pytest configuration for VidScribe tests.

Registers custom markers and provides in-process fakes for the external
stages (ffmpeg and Gemini) so pipeline and batch behaviour can be tested
without either installed.
"""

import shutil
import threading
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

from vidscribe.errors import BurnError, ExtractionError, TranscriptionError
from vidscribe.modules.subtitle_burner import output_name_for
from vidscribe.modules.transcript import Segment, Transcript


def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line(
        "markers", "integration: marks tests that run the whole batch through main.run"
    )


SAMPLE_TRANSCRIPT = Transcript(
    language="en",
    segments=[
        Segment(start=0.0, end=1.5, text="Hello there."),
        Segment(start=1.5, end=186.4, text="General Kenobi."),
    ],
)


class FakeExtractor:
    """Writes a placeholder audio file; fails for listed source names."""

    def __init__(self, fail_for: Iterable[str] = ()):
        self.fail_for = set(fail_for)
        self.calls = []
        self._lock = threading.Lock()

    def extract(self, source: Path, task_dir: Path) -> Path:
        with self._lock:
            self.calls.append(Path(source).name)
        if Path(source).name in self.fail_for:
            raise ExtractionError(f"error while converting {Path(source).name} to audio format")
        audio = Path(task_dir) / f"{Path(source).name}_audio.mp3"
        audio.write_bytes(b"audio:" + Path(source).read_bytes())
        return audio


class FakeTranscriber:
    """Returns a canned transcript; fails for listed source names."""

    def __init__(self, fail_for: Iterable[str] = (), fatal: bool = False,
                 transcripts: Optional[Dict[str, Transcript]] = None):
        self.fail_for = set(fail_for)
        self.fatal = fatal
        self.transcripts = transcripts or {}
        self.calls = []
        self._lock = threading.Lock()

    def transcribe(self, audio_path: Path) -> Transcript:
        source_name = Path(audio_path).name[:-len("_audio.mp3")]
        with self._lock:
            self.calls.append(source_name)
        if source_name in self.fail_for:
            raise TranscriptionError(f"error while generating transcript for {source_name}", fatal=self.fatal)
        return self.transcripts.get(source_name, SAMPLE_TRANSCRIPT)


class FakeBurner:
    """Concatenates the source bytes and subtitle text into the output artifact."""

    def __init__(self, fail_for: Iterable[str] = ()):
        self.fail_for = set(fail_for)
        self.calls = []
        self._lock = threading.Lock()

    def burn(self, source: Path, subtitle_file, task_dir: Path) -> Path:
        with self._lock:
            self.calls.append(Path(source).name)
        if Path(source).name in self.fail_for:
            raise BurnError(f"error while adding subtitles to {Path(source).name}")
        output = Path(task_dir) / output_name_for(source)
        output.write_bytes(Path(source).read_bytes() + b"\n--subs--\n" + subtitle_file.content.encode("utf-8"))
        return output


@pytest.fixture
def fake_stages():
    """Factory for a dict of stage overrides accepted by VideoPipeline."""

    def _make(extract_fail=(), transcribe_fail=(), burn_fail=(), fatal=False):
        return {
            "audio_extractor": FakeExtractor(extract_fail),
            "transcriber": FakeTranscriber(transcribe_fail, fatal=fatal),
            "burner": FakeBurner(burn_fail),
        }

    return _make


@pytest.fixture
def video_tree(tmp_path):
    """Create a small directory of videos and non-videos.

    Structure:
        videos/
            a.mp4
            b.MOV
            notes.txt
            nested/
                c.mkv
                d.webm.part
    """
    root = tmp_path / "videos"
    nested = root / "nested"
    nested.mkdir(parents=True)
    (root / "a.mp4").write_bytes(b"video-a")
    (root / "b.MOV").write_bytes(b"video-b")
    (root / "notes.txt").write_text("not a video")
    (nested / "c.mkv").write_bytes(b"video-c")
    (nested / "d.webm.part").write_bytes(b"partial download")
    return root


@pytest.fixture
def no_workspace_leaks(tmp_path):
    """Parent dir for workspaces; asserts nothing is left behind afterwards."""
    parent = tmp_path / "workspaces"
    parent.mkdir()
    yield parent
    leftovers = list(parent.iterdir())
    shutil.rmtree(parent, ignore_errors=True)
    assert leftovers == [], f"workspace not cleaned up: {leftovers}"
