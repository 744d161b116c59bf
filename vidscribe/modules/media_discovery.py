#!/usr/bin/env python3
"""Media discovery module: turns the CLI input path into the list of videos to process."""

import os
from pathlib import Path
from typing import Iterable, List, Optional

from vidscribe.config.settings import DEFAULT_VIDEO_EXTENSIONS, OUTPUT_PREFIX
from vidscribe.errors import PathError, UnsupportedFormatError
from vidscribe.pipelines.task import BatchJob
from vidscribe.utils.logger import logger


class MediaDiscovery:
    """Resolves a file or directory into an ordered BatchJob of supported videos."""

    def __init__(self, supported_extensions: Optional[Iterable[str]] = None):
        """
        Args:
            supported_extensions: Allow-list of extensions such as {'.mp4', '.mkv'}.
                Matching is case-insensitive; a missing leading dot is added.
        """
        extensions = supported_extensions if supported_extensions is not None else DEFAULT_VIDEO_EXTENSIONS
        self.supported_extensions = frozenset(
            ext.lower() if ext.startswith('.') else f'.{ext.lower()}'
            for ext in extensions
        )

    def is_supported(self, path: Path) -> bool:
        return Path(path).suffix.lower() in self.supported_extensions

    def resolve(self, input_path) -> BatchJob:
        """
        Resolve a single input path.

        Args:
            input_path: A video file or a directory to search recursively

        Returns:
            BatchJob with sources in lexical path order

        Raises:
            PathError: If the path does not exist or a directory cannot be read
            UnsupportedFormatError: If a file input has an unsupported extension
        """
        root = Path(input_path).expanduser()

        if not root.exists():
            raise PathError(f"{root} does not exist")

        if root.is_dir():
            sources = self._walk(root)
            if not sources:
                logger.warning(f"No supported video files found in {root}")
            else:
                logger.info(f"Found {len(sources)} video file(s) in {root}")
            return BatchJob(root=root, sources=tuple(sources), is_directory=True)

        if not root.is_file():
            raise PathError(f"{root} is neither a regular file nor a directory")

        if not self.is_supported(root):
            raise UnsupportedFormatError(root, self.supported_extensions)

        return BatchJob(root=root, sources=(root,), is_directory=False)

    def _walk(self, root: Path) -> List[Path]:
        """Recursively collect supported files under root.

        Files named ``transcribed_*`` are results of an earlier run placed
        next to their sources; they are never picked up as new sources.
        """

        def _raise(error: OSError):
            raise PathError(f"Cannot read directory {error.filename or root}: {error.strerror or error}") from error

        found = []
        for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
            dirnames.sort()
            for filename in filenames:
                candidate = Path(dirpath) / filename
                if not candidate.is_file():
                    continue
                if filename.startswith(OUTPUT_PREFIX):
                    logger.debug(f"Skipping earlier output: {candidate}")
                    continue
                if self.is_supported(candidate):
                    found.append(candidate)
                else:
                    logger.debug(f"Skipping unsupported file: {candidate}")

        return sorted(found, key=lambda p: str(p))
