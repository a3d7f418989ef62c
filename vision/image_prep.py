"""Screenshot preprocessing before it is sent to a vision model."""

from __future__ import annotations

import base64
import io

from PIL import Image


def prepare_screenshot(image_bytes: bytes, width: int = 800, height: int = 800) -> bytes:
    """Decode any Pillow-readable image, resize to ``width`` x ``height`` and re-encode as JPEG."""
    with Image.open(io.BytesIO(image_bytes)) as image:
        resized = image.convert("RGB").resize((width, height))
    buffer = io.BytesIO()
    resized.save(buffer, format="JPEG")
    return buffer.getvalue()


def to_data_uri(jpeg_bytes: bytes) -> str:
    encoded = base64.b64encode(jpeg_bytes).decode("utf-8")
    return f"data:image/jpeg;base64,{encoded}"


def parse_app_names(content: str) -> list[str]:
    """Split a comma-separated model reply into trimmed names, order kept."""
    return [token.strip() for token in content.split(",")]
