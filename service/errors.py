"""Closed error taxonomy and explicit result type for remote AI calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class AIServiceError(str, Enum):
    """Every failure a remote call can report to the studio."""

    NETWORK_ERROR = "network_error"
    NO_DATA = "no_data"
    DECODING_ERROR = "decoding_error"
    API_ERROR = "api_error"
    UNKNOWN_ERROR = "unknown_error"
    IMAGE_DOWNLOAD_ERROR = "image_download_error"
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"

    @property
    def message(self) -> str:
        return _MESSAGES[self]


_MESSAGES: dict[AIServiceError, str] = {
    AIServiceError.NETWORK_ERROR: "Network error while contacting the AI service.",
    AIServiceError.NO_DATA: "No data received from the server.",
    AIServiceError.DECODING_ERROR: "Error decoding response from the server.",
    AIServiceError.API_ERROR: "API error reported by the server.",
    AIServiceError.UNKNOWN_ERROR: "An unknown error occurred.",
    AIServiceError.IMAGE_DOWNLOAD_ERROR: "Error downloading generated images.",
    AIServiceError.RATE_LIMIT_EXCEEDED: "Rate limit exceeded. Please try again later.",
}


def embedded_error(response: object) -> object | None:
    """Return the ``error`` member of a parsed SDK response body, if any.

    Some OpenAI-compatible endpoints answer 200 with an ``error`` object next
    to the payload; the SDK keeps such unknown keys in ``model_extra``.
    """
    extra = getattr(response, "model_extra", None)
    if isinstance(extra, dict):
        return extra.get("error") or None
    return None


class GenerationCancelled(Exception):
    """Raised when a caller cancels while waiting for a request slot."""


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Success payload XOR one error kind."""

    value: T | None = None
    error: AIServiceError | None = None
    detail: str = ""

    @classmethod
    def success(cls, value: T) -> ServiceResult[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: AIServiceError, detail: str = "") -> ServiceResult[T]:
        return cls(error=error, detail=detail)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def message(self) -> str:
        """Human-readable description of the failure, empty on success."""
        if self.error is None:
            return ""
        if self.detail:
            return f"{self.error.message} ({self.detail})"
        return self.error.message
