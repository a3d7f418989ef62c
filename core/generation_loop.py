"""Sequential, rate-limited icon generation over an ordered list of app names.

One request at a time, in input order. A rate-limit reply keeps the loop on
the same name: it waits one full minimum interval and retries. Any other
error halts the batch; icons already produced stay in the result mapping and
later names are not attempted.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from core.event_bus import (
    BATCH_COMPLETED,
    BATCH_HALTED,
    BATCH_STARTED,
    ICON_GENERATED,
    RATE_LIMITED,
    EventBus,
)
from service.ai_service import AIService
from service.errors import AIServiceError, GenerationCancelled

logger = logging.getLogger("ig.generation_loop")


@dataclass
class BatchResult:
    """Outcome of one generation batch."""

    theme: str
    generated: list[str] = field(default_factory=list)
    attempted: list[str] = field(default_factory=list)
    rate_limit_retries: int = 0
    halted_on: str | None = None
    error: AIServiceError | None = None
    message: str = ""
    cancelled: bool = False

    @property
    def completed(self) -> bool:
        return self.halted_on is None and not self.cancelled


class GenerationLoop:
    """Drives ``AIService.generate_icon`` once per name, strictly in order."""

    def __init__(
        self,
        service: AIService,
        event_bus: EventBus | None = None,
        max_rate_limit_retries: int | None = None,
    ) -> None:
        self.service = service
        self.event_bus = event_bus or EventBus()
        self.max_rate_limit_retries = max_rate_limit_retries

    def run(
        self,
        app_names: list[str],
        theme: str,
        results: dict[str, bytes] | None = None,
        cancel_event: threading.Event | None = None,
    ) -> BatchResult:
        """Generate an icon per name into ``results`` (overwriting earlier entries)."""
        results = results if results is not None else {}
        batch = BatchResult(theme=theme)
        if not app_names:
            return batch
        if not theme.strip():
            raise ValueError("Theme must be a non-empty string.")

        self.event_bus.emit(BATCH_STARTED, {"app_names": list(app_names), "theme": theme})
        logger.info("Generating %d icons with theme %r", len(app_names), theme)

        index = 0
        retries_here = 0
        while index < len(app_names):
            name = app_names[index]
            if cancel_event is not None and cancel_event.is_set():
                return self._cancel(batch, name)
            if retries_here == 0:
                batch.attempted.append(name)

            try:
                result = self.service.generate_icon(name, theme, cancel_event)
            except GenerationCancelled:
                return self._cancel(batch, name)

            if result.ok:
                results[name] = result.value or b""
                batch.generated.append(name)
                self.event_bus.emit(
                    ICON_GENERATED, {"app_name": name, "index": index, "size": len(results[name])}
                )
                index += 1
                retries_here = 0
                continue

            if result.error is AIServiceError.RATE_LIMIT_EXCEEDED and self._may_retry(retries_here):
                retries_here += 1
                batch.rate_limit_retries += 1
                interval = self.service.clock.min_interval
                logger.warning(
                    "Rate limit hit for %r (retry %d). Waiting %.1fs.", name, retries_here, interval
                )
                self.event_bus.emit(
                    RATE_LIMITED, {"app_name": name, "retry": retries_here, "wait_seconds": interval}
                )
                if not self.service.clock.pause(interval, cancel_event):
                    return self._cancel(batch, name)
                continue

            batch.halted_on = name
            batch.error = result.error
            batch.message = result.message
            logger.error("Generation halted at %r: %s", name, batch.message)
            error_value = result.error.value if result.error else None
            self.event_bus.emit(
                BATCH_HALTED, {"app_name": name, "error": error_value, "message": batch.message}
            )
            return batch

        self.event_bus.emit(BATCH_COMPLETED, {"generated": list(batch.generated)})
        logger.info("Generated %d icons", len(batch.generated))
        return batch

    def _may_retry(self, retries_so_far: int) -> bool:
        if self.max_rate_limit_retries is None:
            return True
        return retries_so_far < self.max_rate_limit_retries

    def _cancel(self, batch: BatchResult, name: str) -> BatchResult:
        batch.cancelled = True
        batch.halted_on = name
        batch.message = f"Generation cancelled before {name!r}."
        logger.info(batch.message)
        self.event_bus.emit(BATCH_HALTED, {"app_name": name, "error": None, "message": batch.message})
        return batch
