#!/usr/bin/env python3
"""Placement stage: moves a finished video from the workspace to its final location."""

import shutil
from pathlib import Path
from typing import Optional

from vidscribe.config.settings import OUTPUT_TO_SOURCE
from vidscribe.errors import PlacementError
from vidscribe.modules.subtitle_burner import output_name_for
from vidscribe.utils.logger import logger


class OutputPlacer:
    """
    Decides where ``transcribed_<name>`` goes and moves it there.

    With ``output_dir='source'`` the result lands next to its source video.
    Otherwise it lands in ``output_dir``; for directory jobs the source's
    path relative to the job root is mirrored so same-named videos from
    different folders do not collide.
    """

    def __init__(self, output_dir: str = OUTPUT_TO_SOURCE):
        self.output_dir = output_dir

    @property
    def output_to_source(self) -> bool:
        return str(self.output_dir).lower().strip() == OUTPUT_TO_SOURCE

    def destination_for(self, source: Path, job_root: Optional[Path] = None) -> Path:
        source = Path(source)
        name = output_name_for(source)
        if self.output_to_source:
            return source.parent / name

        base = Path(self.output_dir).expanduser()
        if job_root is not None and Path(job_root).is_dir():
            try:
                relative_parent = source.parent.relative_to(job_root)
            except ValueError:
                relative_parent = Path()
            return base / relative_parent / name
        return base / name

    def place(self, artifact: Path, source: Path, job_root: Optional[Path] = None) -> Path:
        """
        Move ``artifact`` to the destination for ``source``, replacing a
        previous result of the same name.

        Raises:
            PlacementError: If the destination is blocked or cannot be written
        """
        destination = self.destination_for(source, job_root)
        try:
            if destination.is_dir():
                raise PlacementError(f"cannot place {destination.name}: a directory with that name exists")
            if Path(source).resolve() == destination.resolve():
                raise PlacementError(f"refusing to overwrite the source video {source}")
            destination.parent.mkdir(parents=True, exist_ok=True)
            if destination.exists() or destination.is_symlink():
                logger.debug(f"Replacing existing output: {destination}")
                destination.unlink()
            shutil.move(str(artifact), str(destination))
        except OSError as e:
            raise PlacementError(f"could not move result to {destination}: {e}") from e

        logger.debug(f"Placed output: {destination}")
        return destination
