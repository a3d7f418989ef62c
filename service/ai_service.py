"""Remote service client: name extraction and paced icon generation.

The client is built explicitly and handed to the studio. It owns the
``RequestClock`` so every generation request made through one instance is
spaced by the minimum interval, across batches as well as within one.
"""

from __future__ import annotations

import logging
import threading

from governance.request_log import RequestLog
from imagegen.base_generator import BaseImageGenerator
from service.errors import GenerationCancelled, ServiceResult
from service.request_clock import RequestClock
from vision.base_vision import BaseVisionProvider

logger = logging.getLogger("ig.service")


class AIService:
    """Typed facade over the vision provider and the icon generator."""

    def __init__(
        self,
        vision_provider: BaseVisionProvider,
        image_generator: BaseImageGenerator,
        clock: RequestClock | None = None,
        request_log: RequestLog | None = None,
    ) -> None:
        self.vision_provider = vision_provider
        self.image_generator = image_generator
        self.clock = clock or RequestClock()
        self.request_log = request_log

    def extract_app_names(self, image_bytes: bytes) -> ServiceResult[list[str]]:
        """Ask the vision model which apps are on a screenshot."""
        logger.info("Starting app name extraction (%d bytes)", len(image_bytes))
        return self.vision_provider.extract_app_names(image_bytes)

    def generate_icon(
        self,
        app_name: str,
        theme: str,
        cancel_event: threading.Event | None = None,
    ) -> ServiceResult[bytes]:
        """Generate one icon, waiting first if the last request was too recent.

        Raises:
            GenerationCancelled: ``cancel_event`` was set while waiting.
        """
        waited = self.clock.remaining()
        with self.clock.turn(cancel_event) as ready:
            if not ready:
                raise GenerationCancelled(f"Cancelled before generating {app_name!r}")
            logger.info("Requesting icon for %r", app_name)
            result = self.image_generator.generate_icon(app_name, theme)

        if self.request_log is not None:
            self.request_log.record(
                app_name=app_name,
                theme=theme,
                outcome="success" if result.ok else "failed",
                error=result.error.value if result.error else None,
                waited_seconds=waited,
            )
        return result

    def close(self) -> None:
        """Close both providers' network clients."""
        self.vision_provider.close()
        self.image_generator.close()
