"""Top-level application wiring."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from core.event_bus import EventBus
from core.policy_runtime import ensure_runtime_dirs, load_effective_config
from core.studio import IconStudio
from governance.permission_engine import PermissionEngine
from governance.request_log import RequestLog
from imagegen.generator_factory import build_image_generator
from service.ai_service import AIService
from service.request_clock import RequestClock
from service.settings import ServiceSettings
from storage.icon_store import IconStore
from vision.vision_factory import build_vision_provider


@dataclass
class RuntimeBundle:
    """Holds initialized runtime components."""

    config: dict[str, Any]
    settings: ServiceSettings
    service: AIService
    studio: IconStudio
    event_bus: EventBus
    paths: dict[str, Path]


class Orchestrator:
    """Creates and wires runtime components for CLI use."""

    def __init__(self, root: Path | None = None, overrides: dict[str, Any] | None = None) -> None:
        default_root = Path(__file__).resolve().parents[1]
        self.root = (root or default_root).resolve()
        self.overrides = overrides or {}

    def build(self) -> RuntimeBundle:
        config = load_effective_config(self.root, self.overrides)
        paths = ensure_runtime_dirs(self.root, config)
        settings = ServiceSettings.from_config(config)

        service = AIService(
            vision_provider=build_vision_provider(settings),
            image_generator=build_image_generator(settings),
            clock=RequestClock(settings.min_request_interval_seconds),
            request_log=RequestLog(paths["request_log_path"]),
        )
        event_bus = EventBus()
        permissions = PermissionEngine(config=self._permissions(config))
        studio = IconStudio(
            service=service,
            output_dir=paths["output_dir"],
            event_bus=event_bus,
            store=IconStore(paths["output_dir"], permissions),
            max_rate_limit_retries=settings.max_rate_limit_retries,
        )
        return RuntimeBundle(
            config=config,
            settings=settings,
            service=service,
            studio=studio,
            event_bus=event_bus,
            paths=paths,
        )

    @staticmethod
    def _permissions(config: dict[str, Any]) -> dict[str, Any]:
        return dict(config.get("permissions", {}))
