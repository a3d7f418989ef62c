"""OpenAI-compatible vision provider that lists app names on a screenshot.

The screenshot is resized to a bounded JPEG, sent as a base64 data URI in a
two-part user message, and the comma-separated reply is split into names.
Any failure on this path is reported as a network error.
"""

from __future__ import annotations

import logging
from typing import Any

from service.errors import AIServiceError, ServiceResult, embedded_error
from service.settings import ServiceSettings
from vision.base_vision import BaseVisionProvider
from vision.image_prep import parse_app_names, prepare_screenshot, to_data_uri

logger = logging.getLogger("ig.vision.openai")

_SYSTEM_PROMPT = "You are an AI assistant that extracts app names from home screen images."

_USER_PROMPT = (
    "Please list all the app names you can see in these home screen images. "
    "Provide the names in a comma-separated list, without any additional text or explanation."
)


class OpenAIVisionProvider(BaseVisionProvider):
    """Vision-capable chat completion adapter."""

    def __init__(self, settings: ServiceSettings, client: Any | None = None) -> None:
        self.settings = settings
        self.model = settings.vision_model
        self._client = client
        self._owns_client = client is None

    def close(self) -> None:
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None

    def is_available(self) -> bool:
        if self._client is not None:
            return True
        if not self.settings.api_key():
            return False
        try:
            import openai  # noqa: F401
            return True
        except ImportError:
            return False

    def _get_client(self) -> Any:
        if self._client is None:
            from openai import OpenAI

            self._client = OpenAI(
                api_key=self.settings.api_key(),
                base_url=self.settings.base_url,
                timeout=self.settings.request_timeout_seconds,
                max_retries=0,
            )
        return self._client

    def build_messages(self, image_bytes: bytes) -> list[dict[str, Any]]:
        jpeg = prepare_screenshot(
            image_bytes, self.settings.resize_width, self.settings.resize_height
        )
        return [
            {"role": "system", "content": _SYSTEM_PROMPT},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": _USER_PROMPT},
                    {"type": "image_url", "image_url": {"url": to_data_uri(jpeg)}},
                ],
            },
        ]

    def extract_app_names(self, image_bytes: bytes) -> ServiceResult[list[str]]:
        try:
            messages = self.build_messages(image_bytes)
            response = self._get_client().chat.completions.create(
                model=self.model,
                messages=messages,
                max_tokens=self.settings.max_tokens,
            )
            error = embedded_error(response)
            if error is not None:
                raise ValueError(f"response carried an error: {error}")
            content = response.choices[0].message.content
            if content is None:
                raise ValueError("response carried no message content")
        except Exception as exc:
            logger.error("App name extraction failed: %s", exc)
            return ServiceResult.failure(AIServiceError.NETWORK_ERROR, str(exc))

        names = parse_app_names(content)
        logger.info("Extracted %d app names", len(names))
        return ServiceResult.success(names)
