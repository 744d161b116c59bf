"""
Transcript data model.

These models double as the response schema sent to Gemini and as the
validator for what comes back, so the wire format and the in-memory type
cannot drift apart.
"""

from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class Segment(BaseModel):
    """One transcribed unit of speech, times in seconds from the start of the audio."""

    model_config = ConfigDict(extra="ignore")

    start: float = Field(ge=0)
    end: float = Field(ge=0)
    text: str

    @model_validator(mode="after")
    def _check_order(self) -> "Segment":
        if self.start > self.end:
            raise ValueError(f"segment starts after it ends ({self.start} > {self.end})")
        return self


class Transcript(BaseModel):
    """Language tag plus segments in presentation order (not re-sorted)."""

    model_config = ConfigDict(extra="ignore")

    language: str
    segments: List[Segment]
