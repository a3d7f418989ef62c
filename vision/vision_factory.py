"""Vision provider factory."""

from __future__ import annotations

import logging

from service.settings import ServiceSettings
from vision.base_vision import BaseVisionProvider
from vision.vlm.mock_vlm_provider import MockVLMProvider
from vision.vlm.openai_vision_provider import OpenAIVisionProvider

logger = logging.getLogger("ig.vision")


def build_vision_provider(settings: ServiceSettings) -> BaseVisionProvider:
    """Build the configured name extractor, falling back to mock when unusable."""
    if settings.active_provider == "openai":
        provider = OpenAIVisionProvider(settings)
        if provider.is_available():
            logger.info("OpenAIVisionProvider active (model=%s)", provider.model)
            return provider
        logger.warning(
            "OpenAIVisionProvider not available (missing %s or openai). "
            "Falling back to MockVLMProvider.",
            settings.api_key_env,
        )
    return MockVLMProvider(reply=settings.mock_app_names)
