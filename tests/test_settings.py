"""Tests for run settings, API key resolution and the preflight gate."""

import os
from unittest.mock import patch

import pytest

from vidscribe.config.settings import (
    API_KEY_ENV_VAR,
    DEFAULT_VIDEO_EXTENSIONS,
    PipelineSettings,
    resolve_api_key,
)
from vidscribe.errors import SetupError
from vidscribe.utils import preflight_check
from vidscribe.utils.preflight_check import CheckStatus, PreflightChecker, ensure_ready


class TestPipelineSettings:

    def test_defaults(self):
        settings = PipelineSettings()
        assert settings.model_variant == "flash"
        assert settings.output_dir == "source"
        assert settings.max_workers == 4
        assert settings.video_extensions == DEFAULT_VIDEO_EXTENSIONS

    def test_pro_model(self):
        assert PipelineSettings(model_variant="pro").model_variant == "pro"

    def test_extensions_are_normalised(self):
        settings = PipelineSettings(video_extensions={"MP4", ".Mkv", " webm "})
        assert settings.video_extensions == frozenset({".mp4", ".mkv", ".webm"})

    @pytest.mark.parametrize("values", [
        {"model_variant": "ultra"},
        {"max_workers": 0},
        {"video_extensions": set()},
        {"unknown_option": True},
    ])
    def test_build_rejects_invalid_values(self, values):
        with pytest.raises(SetupError, match="Invalid configuration"):
            PipelineSettings.build(**values)

    def test_assignment_is_validated(self):
        settings = PipelineSettings()
        with pytest.raises(ValueError):
            settings.max_workers = -1


class TestResolveApiKey:

    def test_explicit_value_wins(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        assert resolve_api_key("explicit") == "explicit"

    def test_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        assert resolve_api_key(dotenv_path=tmp_path / "missing.env") == "from-env"

    def test_dotenv_file(self, monkeypatch, tmp_path):
        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text(f"{API_KEY_ENV_VAR}=from-dotenv\n")

        try:
            assert resolve_api_key(dotenv_path=env_file) == "from-dotenv"
        finally:
            # load_dotenv writes straight into os.environ
            os.environ.pop(API_KEY_ENV_VAR, None)

    def test_environment_beats_dotenv(self, monkeypatch, tmp_path):
        monkeypatch.setenv(API_KEY_ENV_VAR, "from-env")
        env_file = tmp_path / ".env"
        env_file.write_text(f"{API_KEY_ENV_VAR}=from-dotenv\n")

        assert resolve_api_key(dotenv_path=env_file) == "from-env"

    def test_missing_key_raises_with_instructions(self, monkeypatch, tmp_path):
        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)

        with pytest.raises(SetupError) as exc_info:
            resolve_api_key(dotenv_path=tmp_path / "missing.env")

        assert API_KEY_ENV_VAR in str(exc_info.value)
        assert "https://ai.google.dev" in str(exc_info.value)


class TestPreflight:

    def test_missing_ffmpeg_is_fatal(self, monkeypatch):
        monkeypatch.setenv(API_KEY_ENV_VAR, "key")
        with patch.object(preflight_check, "find_ffmpeg", return_value=None):
            with pytest.raises(SetupError, match="ffmpeg"):
                ensure_ready()

    def test_ready_returns_key(self):
        with patch.object(preflight_check, "find_ffmpeg", return_value="/usr/bin/ffmpeg"):
            assert ensure_ready("explicit-key") == "explicit-key"

    def test_missing_key_after_ffmpeg_found(self, monkeypatch, tmp_path):
        monkeypatch.delenv(API_KEY_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        with patch.object(preflight_check, "find_ffmpeg", return_value="/usr/bin/ffmpeg"):
            with pytest.raises(SetupError, match=API_KEY_ENV_VAR):
                ensure_ready()

    def test_checker_reports_missing_ffmpeg(self, monkeypatch, capsys):
        monkeypatch.setenv(API_KEY_ENV_VAR, "key")
        with patch.object(preflight_check, "find_ffmpeg", return_value=None):
            checker = PreflightChecker()
            ok = checker.run_all_checks()

        assert not ok
        ffmpeg_result = next(r for r in checker.results if r.name == "FFmpeg")
        assert ffmpeg_result.status is CheckStatus.FAIL
        assert "FFmpeg not found in PATH" in capsys.readouterr().out
