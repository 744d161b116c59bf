#!/usr/bin/env python3
"""
Transcription stage backed by the Gemini API.

The audio is uploaded through the Files API and transcribed with a
structured-output request whose response schema is the Transcript model.
Failures are reported immediately; nothing here retries.
"""

import time
from pathlib import Path
from typing import Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types
from pydantic import ValidationError

from vidscribe.config.settings import DEFAULT_MODEL_VARIANT, MODEL_VARIANTS
from vidscribe.errors import TranscriptionError
from vidscribe.modules.transcript import Transcript
from vidscribe.utils.logger import logger

TRANSCRIPT_PROMPT = "Generate a transcript of the audio."

# HTTP codes that mean every other request will fail the same way
FATAL_STATUS_CODES = {401, 403}


def model_name_for(variant: str) -> str:
    if variant not in MODEL_VARIANTS:
        raise ValueError(f"{variant} is not a valid model (choose from {', '.join(MODEL_VARIANTS)})")
    return f"gemini-3-{variant}-preview"


class GeminiTranscriber:
    """Uploads an audio file and returns the parsed Transcript."""

    def __init__(self,
                 api_key: Optional[str] = None,
                 model_variant: str = DEFAULT_MODEL_VARIANT,
                 client=None,
                 poll_interval: float = 2.0,
                 processing_timeout: float = 300.0,
                 delete_uploads: bool = True):
        """
        Args:
            api_key: Gemini API key (ignored when ``client`` is given)
            model_variant: 'flash' (default, cheaper) or 'pro'
            client: Pre-built genai.Client, mainly for tests
            poll_interval: Seconds between checks while an upload is processing
            processing_timeout: Give up if an upload is not ACTIVE after this long
            delete_uploads: Remove the uploaded audio from the Files API afterwards
        """
        self.model_variant = model_variant
        self.model_name = model_name_for(model_variant)
        self.poll_interval = poll_interval
        self.processing_timeout = processing_timeout
        self.delete_uploads = delete_uploads

        if client is None:
            if not api_key:
                raise ValueError("api_key is required when no client is provided")
            client = genai.Client(api_key=api_key)
        self.client = client

    def transcribe(self, audio_path: Path) -> Transcript:
        """
        Raises:
            TranscriptionError: On upload failure, remote failure or a response
                that does not match the transcript schema
        """
        audio_path = Path(audio_path)
        uploaded = self._upload(audio_path)
        try:
            uploaded = self._wait_until_active(uploaded, audio_path)
            response_text = self._generate(uploaded, audio_path)
        finally:
            self._delete(uploaded)

        return self.parse_response(response_text)

    @staticmethod
    def parse_response(response_text: Optional[str]) -> Transcript:
        if not response_text or not response_text.strip():
            raise TranscriptionError("Gemini returned an empty response")
        try:
            return Transcript.model_validate_json(response_text)
        except ValidationError as e:
            raise TranscriptionError(f"error while parsing Gemini response into a transcript: {e}") from e

    def _upload(self, audio_path: Path):
        logger.debug(f"Uploading {audio_path.name} to Gemini")
        try:
            return self.client.files.upload(file=str(audio_path))
        except genai_errors.APIError as e:
            raise self._api_failure("uploading audio clip", audio_path, e) from e
        except httpx.HTTPError as e:
            raise self._transport_failure("uploading audio clip", audio_path, e) from e
        except OSError as e:
            raise TranscriptionError(f"error while uploading {audio_path.name}: {e}") from e

    def _wait_until_active(self, uploaded, audio_path: Path):
        deadline = time.monotonic() + self.processing_timeout
        while uploaded.state == types.FileState.PROCESSING:
            if time.monotonic() > deadline:
                raise TranscriptionError(
                    f"upload of {audio_path.name} still processing after {self.processing_timeout:.0f}s"
                )
            time.sleep(self.poll_interval)
            try:
                uploaded = self.client.files.get(name=uploaded.name)
            except genai_errors.APIError as e:
                raise self._api_failure("checking upload status", audio_path, e) from e
            except httpx.HTTPError as e:
                raise self._transport_failure("checking upload status", audio_path, e) from e

        if uploaded.state == types.FileState.FAILED:
            raise TranscriptionError(f"Gemini could not process the uploaded audio for {audio_path.name}")
        return uploaded

    def _generate(self, uploaded, audio_path: Path) -> Optional[str]:
        logger.debug(f"Requesting transcript of {audio_path.name} from {self.model_name}")
        try:
            response = self.client.models.generate_content(
                model=self.model_name,
                contents=[TRANSCRIPT_PROMPT, uploaded],
                config=types.GenerateContentConfig(
                    response_mime_type="application/json",
                    response_schema=Transcript,
                ),
            )
        except genai_errors.APIError as e:
            raise self._api_failure("generating transcript", audio_path, e) from e
        except httpx.HTTPError as e:
            raise self._transport_failure("generating transcript", audio_path, e) from e
        return response.text

    def _delete(self, uploaded):
        if not self.delete_uploads or uploaded is None:
            return
        try:
            self.client.files.delete(name=uploaded.name)
        except Exception as e:
            # Best effort: a leftover upload expires on its own
            logger.warning(f"Could not delete uploaded file {uploaded.name}: {e}")

    @staticmethod
    def _api_failure(action: str, audio_path: Path, error: genai_errors.APIError) -> TranscriptionError:
        code = getattr(error, "code", None)
        fatal = code in FATAL_STATUS_CODES
        return TranscriptionError(
            f"error while {action} for {audio_path.name} (HTTP {code}): {error}",
            fatal=fatal,
        )

    @staticmethod
    def _transport_failure(action: str, audio_path: Path, error: httpx.HTTPError) -> TranscriptionError:
        return TranscriptionError(
            f"network error while {action} for {audio_path.name}: {type(error).__name__}: {error}"
        )
