#!/usr/bin/env python3
"""Scoped temporary workspace for intermediate artifacts of one run."""

import shutil
import tempfile
from pathlib import Path
from typing import Optional

from vidscribe.utils.logger import logger


class Workspace:
    """
    Exclusively owned temporary directory, removed on every exit path.

    All tasks of a run share one workspace. Each task writes into its own
    subdirectory from ``task_dir`` so concurrently running tasks never touch
    each other's files, even when two sources share a basename.

    Usage:
        with Workspace() as workspace:
            audio_dir = workspace.task_dir(1, Path("clip.mp4"))
    """

    def __init__(self, parent_dir: Optional[str] = None, prefix: str = "vidscribe_"):
        self.parent_dir = Path(parent_dir) if parent_dir else None
        self.prefix = prefix
        self._path: Optional[Path] = None

    @property
    def path(self) -> Path:
        if self._path is None:
            raise RuntimeError("Workspace is not open")
        return self._path

    @property
    def is_open(self) -> bool:
        return self._path is not None

    def open(self) -> Path:
        if self._path is not None:
            raise RuntimeError(f"Workspace already open at {self._path}")
        if self.parent_dir is not None:
            self.parent_dir.mkdir(parents=True, exist_ok=True)
        self._path = Path(tempfile.mkdtemp(prefix=self.prefix, dir=self.parent_dir))
        logger.debug(f"Created workspace: {self._path}")
        return self._path

    def close(self):
        if self._path is None:
            return
        path, self._path = self._path, None
        shutil.rmtree(path, ignore_errors=True)
        if path.exists():
            logger.warning(f"Workspace could not be fully removed: {path}")
        else:
            logger.debug(f"Removed workspace: {path}")

    def task_dir(self, index: int, source: Path) -> Path:
        """Create (if needed) and return the private directory for one task."""
        task_path = self.path / f"{index:04d}_{Path(source).name}"
        task_path.mkdir(parents=True, exist_ok=True)
        return task_path

    def __enter__(self) -> "Workspace":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False  # Don't suppress exceptions
