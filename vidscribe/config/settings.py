"""
Run configuration for VidScribe.

PipelineSettings is the single validated object that the CLI builds and
every component reads from:

- model_variant: which Gemini model family transcribes the audio
- output_dir: 'source' (next to each video) or a dedicated directory
- max_workers: size of the worker pool in the batch coordinator
- temp_dir: optional parent directory for the per-run workspace
- video_extensions: allow-list handed to MediaDiscovery
"""

import os
from pathlib import Path
from typing import FrozenSet, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from vidscribe.errors import SetupError
from vidscribe.utils.logger import logger

MODEL_VARIANTS = ("flash", "pro")
DEFAULT_MODEL_VARIANT = "flash"

# Sentinel for --output-dir: write results next to each source video
OUTPUT_TO_SOURCE = "source"

# Name prefix of finished videos; directory walks skip files carrying it
OUTPUT_PREFIX = "transcribed_"

DEFAULT_VIDEO_EXTENSIONS: FrozenSet[str] = frozenset({".mp4", ".mov", ".mkv", ".webm", ".avi"})

API_KEY_ENV_VAR = "GOOGLE_API_KEY"

API_KEY_HELP = (
    f"{API_KEY_ENV_VAR} is not set.\n\n"
    "Create an API key:\n"
    "  1. Go to https://ai.google.dev\n"
    "  2. Create a project (or select an existing one)\n"
    "  3. Generate an API key\n\n"
    f"Then export {API_KEY_ENV_VAR} or put it in a .env file in the current directory."
)


class PipelineSettings(BaseModel):
    """Validated settings for one VidScribe run."""

    model_config = ConfigDict(
        extra="forbid",           # Catch typos immediately
        validate_assignment=True, # Re-validate on attribute change
    )

    model_variant: str = DEFAULT_MODEL_VARIANT
    output_dir: str = OUTPUT_TO_SOURCE
    max_workers: int = Field(default=4, ge=1)
    temp_dir: Optional[str] = None
    video_extensions: FrozenSet[str] = DEFAULT_VIDEO_EXTENSIONS
    show_progress: bool = True

    @field_validator("model_variant")
    @classmethod
    def _check_variant(cls, value: str) -> str:
        if value not in MODEL_VARIANTS:
            raise ValueError(f"{value} is not a valid model (choose from {', '.join(MODEL_VARIANTS)})")
        return value

    @field_validator("video_extensions")
    @classmethod
    def _normalise_extensions(cls, value) -> FrozenSet[str]:
        normalised = set()
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            normalised.add(ext if ext.startswith(".") else f".{ext}")
        if not normalised:
            raise ValueError("at least one video extension is required")
        return frozenset(normalised)

    @classmethod
    def build(cls, **values) -> "PipelineSettings":
        """Create settings, turning validation problems into a SetupError."""
        try:
            return cls(**values)
        except ValidationError as e:
            raise SetupError(f"Invalid configuration: {e}") from e


def resolve_api_key(api_key: Optional[str] = None, dotenv_path: Optional[Path] = None) -> str:
    """
    Resolve the Gemini API key.

    Precedence: explicit value > process environment > .env file in the
    current directory (or ``dotenv_path``). A missing .env file is fine;
    a missing key is not.

    Raises:
        SetupError: If no key is found
    """
    if api_key:
        return api_key

    loaded = load_dotenv(dotenv_path=dotenv_path or Path.cwd() / ".env", override=False)
    if loaded:
        logger.debug("Loaded environment from .env file")

    key = os.getenv(API_KEY_ENV_VAR, "").strip()
    if not key:
        raise SetupError(API_KEY_HELP)
    return key
