"""Deterministic offline icon provider that draws placeholder icons."""

from __future__ import annotations

import hashlib
import io

from PIL import Image, ImageDraw

from imagegen.base_generator import BaseImageGenerator
from imagegen.prompt import build_icon_prompt
from service.errors import ServiceResult


class MockImageProvider(BaseImageGenerator):
    """Renders a rounded square tinted from the prompt, with the name's initial."""

    def __init__(self, size: int = 256) -> None:
        self.size = size

    def is_available(self) -> bool:
        return True

    @staticmethod
    def _colors(prompt: str) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
        digest = hashlib.sha256(prompt.encode("utf-8")).digest()
        bg = (digest[0], digest[1], digest[2])
        fg = (255 - bg[0], 255 - bg[1], 255 - bg[2])
        return bg, fg

    def generate_icon(self, app_name: str, theme: str) -> ServiceResult[bytes]:
        bg, fg = self._colors(build_icon_prompt(app_name, theme))
        size = self.size
        image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
        draw = ImageDraw.Draw(image)
        draw.rounded_rectangle([0, 0, size - 1, size - 1], radius=max(size // 6, 4), fill=bg)
        initial = app_name.strip()[:1].upper()
        if initial:
            left, top, right, bottom = draw.textbbox((0, 0), initial)
            origin = ((size - (right - left)) // 2 - left, (size - (bottom - top)) // 2 - top)
            draw.text(origin, initial, fill=fg)
        buffer = io.BytesIO()
        image.save(buffer, format="PNG")
        return ServiceResult.success(buffer.getvalue())
