"""Local fallback vision provider returning configured app names."""

from __future__ import annotations

import io

from PIL import Image, UnidentifiedImageError

from service.errors import AIServiceError, ServiceResult
from vision.base_vision import BaseVisionProvider
from vision.image_prep import parse_app_names


class MockVLMProvider(BaseVisionProvider):
    """Always-available offline provider; still rejects unreadable images."""

    def __init__(self, reply: str = "Mail, Maps, Notes") -> None:
        self.reply = reply

    def is_available(self) -> bool:
        return True

    def extract_app_names(self, image_bytes: bytes) -> ServiceResult[list[str]]:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.verify()
        except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
            return ServiceResult.failure(AIServiceError.NETWORK_ERROR, str(exc))
        return ServiceResult.success(parse_app_names(self.reply))
