"""Base icon generator interface."""

from __future__ import annotations

from abc import ABC, abstractmethod

from service.errors import ServiceResult


class BaseImageGenerator(ABC):
    """Abstract text-to-icon provider interface."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return True if provider is available in current environment."""

    @abstractmethod
    def generate_icon(self, app_name: str, theme: str) -> ServiceResult[bytes]:
        """Return raw image bytes for one themed app icon."""

    def close(self) -> None:
        """Release network clients; providers without any keep this no-op."""
