#!/usr/bin/env python3
"""Audio extraction stage: pulls the soundtrack out of a video with ffmpeg."""

from pathlib import Path

import ffmpeg

from vidscribe.errors import ExtractionError
from vidscribe.utils.logger import logger


def ffmpeg_stderr_tail(error: ffmpeg.Error, lines: int = 5) -> str:
    """Last few lines of ffmpeg's stderr, which is where the actual reason lives."""
    stderr = error.stderr or b""
    if isinstance(stderr, bytes):
        stderr = stderr.decode("utf-8", errors="replace")
    tail = [line for line in stderr.strip().splitlines() if line.strip()][-lines:]
    return " | ".join(tail) if tail else "no output from ffmpeg"


class AudioExtractor:
    """Extracts an mp3 audio track for upload to the transcription service."""

    def __init__(self, audio_format: str = "mp3"):
        self.audio_format = audio_format

    def output_path_for(self, source: Path, task_dir: Path) -> Path:
        return Path(task_dir) / f"{Path(source).name}_audio.{self.audio_format}"

    def extract(self, source: Path, task_dir: Path) -> Path:
        """
        Extract audio from ``source`` into ``task_dir``.

        An existing artifact at the target path is overwritten, so a rerun
        after a failure needs no cleanup.

        Returns:
            Path to the extracted audio file

        Raises:
            ExtractionError: If ffmpeg exits non-zero or cannot be started
        """
        output_path = self.output_path_for(source, task_dir)
        stream = ffmpeg.input(str(source)).output(str(output_path), vn=None)

        logger.debug(f"Extracting audio: {source} -> {output_path}")
        try:
            ffmpeg.run(stream, overwrite_output=True, quiet=True)
        except ffmpeg.Error as e:
            raise ExtractionError(
                f"error while converting {Path(source).name} to audio format: {ffmpeg_stderr_tail(e)}"
            ) from e
        except OSError as e:
            raise ExtractionError(f"could not start ffmpeg: {e}") from e

        return output_path
