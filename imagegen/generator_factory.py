"""Icon generator factory."""

from __future__ import annotations

import logging

from imagegen.base_generator import BaseImageGenerator
from imagegen.providers.mock_image_provider import MockImageProvider
from imagegen.providers.openai_image_provider import OpenAIImageProvider
from service.settings import ServiceSettings

logger = logging.getLogger("ig.imagegen")


def build_image_generator(settings: ServiceSettings) -> BaseImageGenerator:
    """Build the configured icon generator, defaulting safely to mock."""
    if settings.active_provider == "openai":
        provider = OpenAIImageProvider(settings)
        if provider.is_available():
            logger.info("OpenAIImageProvider active (model=%s)", provider.model)
            return provider
        logger.warning(
            "OpenAIImageProvider not available (missing %s or openai). "
            "Falling back to MockImageProvider.",
            settings.api_key_env,
        )
    return MockImageProvider()
