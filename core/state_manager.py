"""Session state container with an explicit phase machine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from core.event_bus import PHASE_CHANGED, EventBus


class SessionPhase(str, Enum):
    IDLE = "idle"
    EXTRACTING = "extracting"
    READY = "ready"
    GENERATING = "generating"
    SAVING = "saving"
    ERROR = "error"


_BUSY = {SessionPhase.EXTRACTING, SessionPhase.GENERATING, SessionPhase.SAVING}

_TRANSITIONS: dict[SessionPhase, set[SessionPhase]] = {
    SessionPhase.IDLE: {SessionPhase.EXTRACTING, SessionPhase.GENERATING, SessionPhase.SAVING},
    SessionPhase.READY: {SessionPhase.EXTRACTING, SessionPhase.GENERATING, SessionPhase.SAVING},
    SessionPhase.ERROR: {SessionPhase.EXTRACTING, SessionPhase.GENERATING, SessionPhase.SAVING},
    SessionPhase.EXTRACTING: {SessionPhase.READY, SessionPhase.ERROR},
    SessionPhase.GENERATING: {SessionPhase.READY, SessionPhase.ERROR},
    SessionPhase.SAVING: {SessionPhase.READY, SessionPhase.ERROR},
}


class InvalidTransition(RuntimeError):
    """Raised when the session is asked to move to an unreachable phase."""


@dataclass
class SessionState:
    """Mutable in-memory state for one studio session."""

    screenshot_path: Path | None = None
    screenshot: bytes | None = None
    app_names: list[str] = field(default_factory=list)
    theme: str = ""
    generated_icons: dict[str, bytes] = field(default_factory=dict)
    phase: SessionPhase = SessionPhase.IDLE
    last_error: str | None = None
    saved_to: Path | None = None


class StateManager:
    """Wraps session state and guards phase transitions."""

    def __init__(self, event_bus: EventBus | None = None) -> None:
        self.state = SessionState()
        self.event_bus = event_bus

    @property
    def is_busy(self) -> bool:
        return self.state.phase in _BUSY

    def transition(self, phase: SessionPhase, error: str | None = None) -> None:
        current = self.state.phase
        if phase not in _TRANSITIONS[current]:
            raise InvalidTransition(f"Cannot move from {current.value} to {phase.value}")
        self.state.phase = phase
        self.state.last_error = error if phase is SessionPhase.ERROR else None
        if self.event_bus is not None:
            self.event_bus.emit(
                PHASE_CHANGED,
                {"from": current.value, "to": phase.value, "error": self.state.last_error},
            )

    def set_screenshot(self, path: Path, data: bytes) -> None:
        self.state.screenshot_path = path
        self.state.screenshot = data

    def set_app_names(self, names: list[str]) -> None:
        self.state.app_names = list(names)

    def set_theme(self, theme: str) -> None:
        self.state.theme = theme.strip()
