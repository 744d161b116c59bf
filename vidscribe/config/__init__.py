"""Configuration for VidScribe runs."""

from vidscribe.config.settings import (
    DEFAULT_MODEL_VARIANT,
    MODEL_VARIANTS,
    OUTPUT_TO_SOURCE,
    PipelineSettings,
    resolve_api_key,
)

__all__ = [
    "DEFAULT_MODEL_VARIANT",
    "MODEL_VARIANTS",
    "OUTPUT_TO_SOURCE",
    "PipelineSettings",
    "resolve_api_key",
]
