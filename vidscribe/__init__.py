"""VidScribe - transcribe videos with Gemini and burn the subtitles in."""

from vidscribe.__version__ import __version__, __version_info__

# Public API exports
from vidscribe.modules.media_discovery import MediaDiscovery
from vidscribe.pipelines.video_pipeline import VideoPipeline
from vidscribe.utils.async_processor import BatchCoordinator
from vidscribe.utils.logger import setup_logger
from vidscribe.utils.workspace import Workspace

__all__ = [
    "BatchCoordinator",
    "MediaDiscovery",
    "VideoPipeline",
    "Workspace",
    "setup_logger",
]
