"""Tests for the CLI entry point exit codes and error logging."""

import logging
from unittest.mock import AsyncMock, patch

import pytest

from club_logos import main as main_module
from club_logos.config import get_pipeline_settings
from club_logos.errors import PollTimeoutError, UploadError


@pytest.fixture
def clean_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    get_pipeline_settings.cache_clear()
    yield monkeypatch
    get_pipeline_settings.cache_clear()


class TestMain:

    def test_missing_api_key_exits_nonzero(self, clean_settings):
        clean_settings.delenv("LEO_API_KEY", raising=False)
        with patch.object(main_module, "run_batch", new_callable=AsyncMock) as run_batch:
            assert main_module.main() == 1
        run_batch.assert_not_called()

    def test_success_exits_zero(self, clean_settings):
        clean_settings.setenv("LEO_API_KEY", "k")
        with patch.object(main_module, "run_batch", new_callable=AsyncMock) as run_batch:
            assert main_module.main() == 0
        run_batch.assert_awaited_once()


class TestRun:

    @pytest.mark.asyncio
    async def test_logs_remote_payload(self, settings, caplog):
        error = UploadError("Upload failed: 401", payload={"error": "Invalid API key"})
        with patch.object(main_module, "run_batch", new_callable=AsyncMock, side_effect=error):
            with caplog.at_level(logging.ERROR, logger="club_logos"):
                code = await main_module.run(settings)

        assert code == 1
        assert "Invalid API key" in caplog.text

    @pytest.mark.asyncio
    async def test_logs_message_without_payload(self, settings, caplog):
        error = PollTimeoutError("Timed out waiting for generation job-1")
        with patch.object(main_module, "run_batch", new_callable=AsyncMock, side_effect=error):
            with caplog.at_level(logging.ERROR, logger="club_logos"):
                code = await main_module.run(settings)

        assert code == 1
        assert "Timed out waiting for generation job-1" in caplog.text

    @pytest.mark.asyncio
    async def test_unexpected_error_is_logged_not_raised(self, settings, caplog):
        with patch.object(main_module, "run_batch", new_callable=AsyncMock,
                          side_effect=AttributeError("'list' object has no attribute 'get'")):
            with caplog.at_level(logging.ERROR, logger="club_logos"):
                code = await main_module.run(settings)

        assert code == 1
        assert "Error: 'list' object has no attribute 'get'" in caplog.text
