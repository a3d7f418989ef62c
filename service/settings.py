"""Validated settings for the remote AI service."""

from __future__ import annotations

import os
from typing import Any

from pydantic import BaseModel, Field


class ServiceSettings(BaseModel):
    """Endpoint, model and pacing settings shared by both providers."""

    active_provider: str = "openai"
    base_url: str = "https://api.openai.com/v1/"
    api_key_env: str = "OPENAI_API_KEY"
    vision_model: str = "gpt-4-turbo"
    image_model: str = "dall-e-3"
    image_size: str = "1024x1024"
    image_quality: str = "standard"
    max_tokens: int = Field(default=300, gt=0)
    resize_width: int = Field(default=800, gt=0)
    resize_height: int = Field(default=800, gt=0)
    min_request_interval_seconds: float = Field(default=12.0, ge=0)
    max_rate_limit_retries: int | None = Field(default=None, ge=0)
    request_timeout_seconds: float = Field(default=60.0, gt=0)
    mock_app_names: str = "Mail, Maps, Notes"

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ServiceSettings:
        """Read the ``models.service`` section of the effective config."""
        section = config.get("models", {}).get("service", {}) or {}
        return cls(**section)

    def api_key(self) -> str | None:
        return os.getenv(self.api_key_env) or None
