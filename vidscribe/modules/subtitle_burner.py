#!/usr/bin/env python3
"""Subtitle burn-in stage: renders an SRT file into the video frames with ffmpeg."""

from pathlib import Path

import ffmpeg

from vidscribe.config.settings import OUTPUT_PREFIX
from vidscribe.errors import BurnError
from vidscribe.modules.audio_extraction import ffmpeg_stderr_tail
from vidscribe.modules.srt_formatter import SubtitleFile
from vidscribe.utils.logger import logger


def output_name_for(source: Path) -> str:
    return f"{OUTPUT_PREFIX}{Path(source).name}"


class SubtitleBurner:
    """Produces a new video in the task directory with hard-coded subtitles."""

    def build_stream(self, source: Path, subtitle_file: SubtitleFile, output_path: Path):
        # The path was escaped for the filter syntax by the formatter; quote it
        # so spaces and commas stay inside the filter argument.
        video_filter = f"subtitles='{subtitle_file.escaped_path}'"
        return ffmpeg.input(str(source)).output(str(output_path), vf=video_filter)

    def burn(self, source: Path, subtitle_file: SubtitleFile, task_dir: Path) -> Path:
        """
        Burn ``subtitle_file`` into ``source``.

        Returns:
            Path of the rendered video inside ``task_dir``

        Raises:
            BurnError: If ffmpeg exits non-zero or cannot be started
        """
        output_path = Path(task_dir) / output_name_for(source)
        stream = self.build_stream(source, subtitle_file, output_path)

        logger.debug(f"Burning subtitles into {Path(source).name} -> {output_path}")
        try:
            ffmpeg.run(stream, overwrite_output=True, quiet=True)
        except ffmpeg.Error as e:
            raise BurnError(
                f"error while adding subtitles to {Path(source).name}: {ffmpeg_stderr_tail(e)}"
            ) from e
        except OSError as e:
            raise BurnError(f"could not start ffmpeg: {e}") from e

        return output_path
