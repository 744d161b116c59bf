"""
Exception hierarchy for VidScribe.

Two families matter to callers:

- Run-level errors (SetupError, PathError) abort before any video is touched.
- Stage errors (ExtractionError ... PlacementError) belong to a single video.
  The pipeline wraps them in TaskFailedError together with the failing stage
  and source path, and the batch collects them instead of propagating.
"""

from pathlib import Path
from typing import Optional


class VidScribeError(Exception):
    """Base exception for all VidScribe errors."""
    pass


class SetupError(VidScribeError):
    """Raised when the environment or the input cannot support a run at all.

    Missing ffmpeg, a missing API key, invalid settings and unsupported
    input files all end up here.
    """
    pass


class UnsupportedFormatError(SetupError):
    """Raised when a single input file has an extension outside the allow-list."""

    def __init__(self, path: Path, supported):
        self.path = Path(path)
        self.supported = sorted(supported)
        super().__init__(
            f"Unsupported video format: '{self.path.name}'. "
            f"Supported extensions: {', '.join(self.supported)}"
        )


class PathError(VidScribeError):
    """Raised when the input root does not exist or cannot be traversed."""
    pass


class StageError(VidScribeError):
    """
    Base class for failures confined to one video.

    ``fatal`` marks failures that make every other task pointless too
    (for example a rejected API key); the batch cancels the remaining work
    when it sees one.
    """

    def __init__(self, message: str, fatal: bool = False):
        self.fatal = fatal
        super().__init__(message)


class ExtractionError(StageError):
    """ffmpeg could not extract the audio track."""
    pass


class TranscriptionError(StageError):
    """Upload, remote generation or response parsing failed."""
    pass


class FormatError(StageError):
    """The transcript could not be rendered or written as a subtitle file."""
    pass


class BurnError(StageError):
    """ffmpeg could not render the subtitles into the video."""
    pass


class PlacementError(StageError):
    """The finished video could not be moved to its destination."""
    pass


class TaskCancelledError(StageError):
    """The batch was cancelled before this stage could start."""
    pass


class TaskFailedError(VidScribeError):
    """
    A stage failure wrapped with the identity of the task that hit it.

    The message is self-describing: it names the stage and the source file,
    so a summary built from these errors needs no log lookups.
    """

    def __init__(self, source: Path, stage, cause: BaseException):
        self.source = Path(source)
        self.stage = stage
        self.cause = cause
        super().__init__(f"{self.stage_name} failed for '{self.source}': {cause}")

    @property
    def stage_name(self) -> str:
        return getattr(self.stage, "label", str(self.stage))

    @property
    def fatal(self) -> bool:
        return bool(getattr(self.cause, "fatal", False))


def describe_exception(error: Optional[BaseException]) -> str:
    """One-line description of an exception, including its type for unexpected ones."""
    if error is None:
        return ""
    if isinstance(error, VidScribeError):
        return str(error)
    return f"{type(error).__name__}: {error}"
