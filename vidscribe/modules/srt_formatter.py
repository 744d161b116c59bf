#!/usr/bin/env python3
"""
SRT formatting stage.

Renders a Transcript as numbered cues:

    1
    00:00:01,200 --> 00:00:03,900
    - first line of speech

and prepares the file path for use inside an ffmpeg filter expression.
"""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import List

from vidscribe.errors import FormatError
from vidscribe.modules.transcript import Transcript
from vidscribe.utils.logger import logger


@dataclass(frozen=True)
class SubtitleFile:
    """A written subtitle file plus the form of its path the burn filter expects."""
    path: Path
    content: str
    escaped_path: str
    cue_count: int


def format_timestamp(seconds: float) -> str:
    """
    Format seconds as ``HH:MM:SS,mmm``.

    Fractional milliseconds are truncated, never rounded up. The product is
    first snapped to six decimals so binary float noise (186.4 is stored as
    186.39999...) does not lose a millisecond. Hours are not capped.

    >>> format_timestamp(186.4)
    '00:03:06,400'
    >>> format_timestamp(2.9996)
    '00:00:02,999'
    """
    if seconds is None or not math.isfinite(seconds) or seconds < 0:
        raise FormatError(f"invalid timestamp: {seconds!r}")

    total_ms = math.floor(round(seconds * 1000, 6))
    hours = total_ms // 3_600_000
    minutes = (total_ms // 60_000) % 60
    secs = (total_ms // 1000) % 60
    millis = total_ms % 1000
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def escape_filter_path(path) -> str:
    """
    Escape a path for ffmpeg's filtergraph syntax.

    Backslashes are doubled first, then colons are prefixed with a
    backslash. Doing colons first would double-escape the backslashes the
    colon pass introduces.
    """
    escaped = str(path).replace("\\", "\\\\")
    return escaped.replace(":", "\\:")


def render_cues(transcript: Transcript) -> str:
    """Render all segments, in the order given, as cue text."""
    blocks: List[str] = []
    for index, segment in enumerate(transcript.segments, start=1):
        blocks.append(
            f"{index}\n"
            f"{format_timestamp(segment.start)} --> {format_timestamp(segment.end)}\n"
            f"- {segment.text}\n"
        )
    return "\n".join(blocks)


class SRTFormatter:
    """Writes the subtitle file for one task into its workspace directory."""

    def output_path_for(self, source: Path, task_dir: Path) -> Path:
        return Path(task_dir) / f"{Path(source).name}_subs.srt"

    def write(self, transcript: Transcript, source: Path, task_dir: Path) -> SubtitleFile:
        """
        Raises:
            FormatError: If a segment has an unusable time or the file cannot be written
        """
        content = render_cues(transcript)
        output_path = self.output_path_for(source, task_dir)

        try:
            output_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise FormatError(f"could not write subtitle file {output_path}: {e}") from e

        logger.debug(f"Wrote {len(transcript.segments)} cues to {output_path}")
        return SubtitleFile(
            path=output_path,
            content=content,
            escaped_path=escape_filter_path(output_path),
            cue_count=len(transcript.segments),
        )
