"""Custom exceptions for the pipeline roles."""

from typing import Any


class PipelineError(Exception):
    """Base exception for the analytics pipeline."""

    def __init__(
        self,
        message: str,
        code: str = "error",
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(message)


class QueueConnectionError(PipelineError):
    """The queue service cannot be reached."""

    def __init__(self, url: str, message: str):
        super().__init__(
            message=f"Cannot connect to queue service at {url}: {message}",
            code="queue_connection_error",
            details={"url": url},
        )


class MalformedMessage(PipelineError):
    """A wire message could not be decoded."""

    def __init__(self, message: str, raw: str | None = None):
        details = {"raw": raw[:200]} if raw is not None else {}
        super().__init__(
            message=message,
            code="malformed_message",
            details=details,
        )


class ConfigError(PipelineError):
    """Invalid command line argument or setting."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(
            message=message,
            code="config_error",
            details=details,
        )
