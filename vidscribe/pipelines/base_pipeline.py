#!/usr/bin/env python3
"""Base pipeline class for VidScribe."""

from abc import ABC, abstractmethod
from pathlib import Path

from vidscribe.pipelines.task import VideoTask
from vidscribe.utils.logger import logger


class BasePipeline(ABC):
    """Abstract base class for per-video pipelines."""

    def __init__(self, **kwargs):
        # Log any unused kwargs to help with debugging, but don't crash
        if kwargs:
            logger.debug(f"{self.__class__.__name__} received unused arguments: {list(kwargs.keys())}")

    @abstractmethod
    def get_mode_name(self) -> str:
        """Return the name of this pipeline mode."""
        pass

    @abstractmethod
    def run(self, task: VideoTask) -> VideoTask:
        """
        Drive one task to a terminal state.

        Implementations must not raise for failures of the task itself;
        the returned task carries either the output path or the error.
        """
        pass

    def cleanup(self):
        """Release resources held by the pipeline. Nothing to release by default."""
        logger.debug(f"{self.__class__.__name__} cleanup complete")

    def __enter__(self):
        """Context manager entry - returns self for use in with statement."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            self.cleanup()
        except Exception as cleanup_error:
            logger.error(f"Error during pipeline cleanup: {cleanup_error}")
        return False  # Don't suppress exceptions
