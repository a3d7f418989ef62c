"""Base vision provider abstractions."""

from __future__ import annotations

from abc import ABC, abstractmethod

from service.errors import ServiceResult


class BaseVisionProvider(ABC):
    """Abstract interface for providers that read app names off a screenshot."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if provider is available in current environment."""

    @abstractmethod
    def extract_app_names(self, image_bytes: bytes) -> ServiceResult[list[str]]:
        """Return the app names visible in a home-screen screenshot."""

    def close(self) -> None:
        """Release network clients; providers without any keep this no-op."""
