"""OpenAI image-generation provider.

Two round trips per icon: ``images.generate`` returns a short-lived URL and a
plain HTTP GET fetches the bytes. SDK exceptions are folded into the
``AIServiceError`` taxonomy so the generation loop can tell rate limiting
apart from everything else.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from imagegen.base_generator import BaseImageGenerator
from imagegen.prompt import build_icon_prompt
from service.errors import AIServiceError, ServiceResult, embedded_error
from service.settings import ServiceSettings

logger = logging.getLogger("ig.imagegen.openai")


def classify_openai_error(exc: Exception) -> AIServiceError:
    """Map an ``openai`` SDK exception onto the service error taxonomy."""
    import openai

    if isinstance(exc, openai.RateLimitError):
        return AIServiceError.RATE_LIMIT_EXCEEDED
    if isinstance(exc, openai.APIStatusError):
        if exc.status_code == 429:
            return AIServiceError.RATE_LIMIT_EXCEEDED
        return AIServiceError.API_ERROR
    if isinstance(exc, openai.APIConnectionError):
        return AIServiceError.NETWORK_ERROR
    if isinstance(exc, openai.APIResponseValidationError):
        return AIServiceError.DECODING_ERROR
    if isinstance(exc, openai.OpenAIError):
        return AIServiceError.API_ERROR
    return AIServiceError.UNKNOWN_ERROR


class OpenAIImageProvider(BaseImageGenerator):
    """DALL-E style adapter that downloads the generated image."""

    def __init__(
        self,
        settings: ServiceSettings,
        client: Any | None = None,
        http_client: httpx.Client | None = None,
    ) -> None:
        self.settings = settings
        self.model = settings.image_model
        self._client = client
        self._http = http_client
        self._owns_client = client is None
        self._owns_http = http_client is None

    def close(self) -> None:
        """Close the SDK and download clients this provider created."""
        if self._owns_client and self._client is not None:
            self._client.close()
            self._client = None
        if self._owns_http and self._http is not None:
            self._http.close()
            self._http = None

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

    def _get_http(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(
                timeout=self.settings.request_timeout_seconds, follow_redirects=True
            )
        return self._http

    def generate_icon(self, app_name: str, theme: str) -> ServiceResult[bytes]:
        prompt = build_icon_prompt(app_name, theme)
        try:
            response = self._get_client().images.generate(
                model=self.model,
                prompt=prompt,
                n=1,
                size=self.settings.image_size,
                quality=self.settings.image_quality,
            )
        except Exception as exc:
            kind = classify_openai_error(exc)
            logger.warning("Icon generation for %r failed (%s): %s", app_name, kind.value, exc)
            return ServiceResult.failure(kind, str(exc))

        error = embedded_error(response)
        if error is not None:
            logger.warning("Icon generation for %r returned an error body: %s", app_name, error)
            return ServiceResult.failure(AIServiceError.API_ERROR, str(error))

        data = getattr(response, "data", None) or []
        if not data:
            return ServiceResult.failure(AIServiceError.API_ERROR, "response contained no images")
        url = getattr(data[0], "url", None)
        if not url:
            return ServiceResult.failure(AIServiceError.DECODING_ERROR, "image entry has no url")
        return self.download(url)

    def download(self, url: str) -> ServiceResult[bytes]:
        """Fetch generated image bytes from the temporary URL."""
        try:
            response = self._get_http().get(url)
        except httpx.HTTPError as exc:
            logger.warning("Image download failed: %s", exc)
            return ServiceResult.failure(AIServiceError.IMAGE_DOWNLOAD_ERROR, str(exc))
        if response.status_code != 200:
            return ServiceResult.failure(
                AIServiceError.IMAGE_DOWNLOAD_ERROR, f"HTTP {response.status_code}"
            )
        if not response.content:
            return ServiceResult.failure(AIServiceError.NO_DATA, "empty image body")
        return ServiceResult.success(response.content)
