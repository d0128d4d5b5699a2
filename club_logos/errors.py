"""Errors raised by the logo pipeline.

Every error is fatal to a run. They carry the remote error payload when
the Leonardo API returned one, so the top level can log it.
"""

from typing import Any, Optional


class LogoPipelineError(Exception):
    """Base error for the logo pipeline."""

    def __init__(self, message: str, payload: Optional[Any] = None):
        super().__init__(message)
        self.payload = payload

    def describe(self) -> str:
        """Remote payload if present, else the message."""
        if self.payload:
            return str(self.payload)
        return str(self)


class ConfigError(LogoPipelineError):
    """Missing or invalid configuration (e.g. no API key)."""


class UploadError(LogoPipelineError):
    """Reference image upload failed or returned no identifier."""


class GenerationRequestError(LogoPipelineError):
    """Transport or API error talking to the generation endpoints."""


class GenerationFailedError(LogoPipelineError):
    """The remote job explicitly reported failure."""


class PollTimeoutError(LogoPipelineError):
    """Polling budget exhausted without a finished image."""


class DownloadError(LogoPipelineError):
    """Generated image could not be fetched or written."""


class RenderError(LogoPipelineError):
    """Text overlay could not decode the source or write the result."""
