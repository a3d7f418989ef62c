"""Shared fakes: a manual clock and a scripted icon generator."""

from __future__ import annotations

import io
from collections import deque
from collections.abc import Iterable

import pytest
from PIL import Image

from imagegen.base_generator import BaseImageGenerator
from imagegen.prompt import build_icon_prompt
from service.ai_service import AIService
from service.errors import AIServiceError, ServiceResult
from service.request_clock import RequestClock


class FakeClock:
    """Wall clock that only moves when slept on or advanced."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class ScriptedGenerator(BaseImageGenerator):
    """Returns queued outcomes per app name and records every call."""

    def __init__(self, clock: FakeClock, duration: float = 2.0) -> None:
        self.clock = clock
        self.duration = duration
        self.calls: list[dict[str, object]] = []
        self._script: dict[str, deque[AIServiceError | bytes]] = {}

    def script(self, app_name: str, outcomes: Iterable[AIServiceError | bytes]) -> None:
        self._script[app_name] = deque(outcomes)

    def is_available(self) -> bool:
        return True

    def generate_icon(self, app_name: str, theme: str) -> ServiceResult[bytes]:
        started = self.clock.now
        self.clock.now += self.duration
        self.calls.append(
            {
                "app_name": app_name,
                "prompt": build_icon_prompt(app_name, theme),
                "started": started,
                "finished": self.clock.now,
            }
        )
        queue = self._script.get(app_name)
        outcome = queue.popleft() if queue else f"icon:{app_name}".encode()
        if isinstance(outcome, AIServiceError):
            return ServiceResult.failure(outcome, "scripted")
        return ServiceResult.success(outcome)


@pytest.fixture()
def screenshot_bytes() -> bytes:
    """A phone-sized RGBA PNG, like a real home-screen capture."""
    buffer = io.BytesIO()
    Image.new("RGBA", (1170, 2532), (20, 30, 90, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture()
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def generator(fake_clock: FakeClock) -> ScriptedGenerator:
    return ScriptedGenerator(fake_clock)


@pytest.fixture()
def request_clock(fake_clock: FakeClock) -> RequestClock:
    return RequestClock(12.0, clock=fake_clock.time, sleeper=fake_clock.sleep)


@pytest.fixture()
def service(generator: ScriptedGenerator, request_clock: RequestClock) -> AIService:
    from vision.vlm.mock_vlm_provider import MockVLMProvider

    return AIService(
        vision_provider=MockVLMProvider(),
        image_generator=generator,
        clock=request_clock,
    )
