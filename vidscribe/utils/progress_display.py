#!/usr/bin/env python3
"""Progress display for VidScribe batches."""

import sys
import threading
from pathlib import Path

from tqdm import tqdm

from vidscribe.utils.logger import logger


class ProgressDisplay:
    """Overall "N of M completed" bar, updated from worker threads."""

    def __init__(self, total_files: int, enabled: bool = True):
        self.enabled = enabled
        self.total_files = total_files
        self._lock = threading.Lock()
        self._completed = 0

        if not self.enabled:
            return

        self.overall_pbar = tqdm(
            total=total_files,
            desc="Overall Progress",
            bar_format='{desc}: |{bar}| {n_fmt}/{total_fmt} files [{elapsed}<{remaining}]',
            file=sys.stderr,
            leave=True,
            ncols=100
        )

    @property
    def completed(self) -> int:
        with self._lock:
            return self._completed

    def file_complete(self, filename: str, success: bool, completed: int):
        """Advance the bar to ``completed`` (never backwards)."""
        with self._lock:
            if completed <= self._completed:
                return
            increment = completed - self._completed
            self._completed = completed

            short_name = Path(filename).name
            if len(short_name) > 40:
                short_name = short_name[:37] + "..."
            status = "done" if success else "failed"

            if self.enabled:
                self.overall_pbar.set_postfix_str(f"{short_name}: {status}")
                self.overall_pbar.update(increment)
            else:
                logger.info(f"[{completed}/{self.total_files}] {short_name}: {status}")

    def close(self):
        if self.enabled:
            self.overall_pbar.close()


class DummyProgress:
    """Progress sink used when display is disabled and nothing should be printed."""

    def __init__(self, *args, **kwargs):
        self.completed = 0

    def file_complete(self, filename: str, success: bool, completed: int):
        self.completed = max(self.completed, completed)

    def close(self):
        pass
