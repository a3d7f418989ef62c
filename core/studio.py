"""Studio session: screenshot → app names → themed icons → files on disk."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from core.event_bus import ICONS_SAVED, EventBus
from core.generation_loop import BatchResult, GenerationLoop
from core.state_manager import SessionPhase, SessionState, StateManager
from service.ai_service import AIService
from storage.icon_store import IconStore, InvalidIconNameError, StoragePermissionError

logger = logging.getLogger("ig.studio")


class StudioError(RuntimeError):
    """Raised when an operation is called in a state that cannot serve it."""


class IconStudio:
    """Holds session state and drives the icon pipeline against one service."""

    def __init__(
        self,
        service: AIService,
        output_dir: Path,
        event_bus: EventBus | None = None,
        store: IconStore | None = None,
        max_rate_limit_retries: int | None = None,
    ) -> None:
        self.service = service
        self.event_bus = event_bus or EventBus()
        self.output_dir = output_dir
        self.store = store or IconStore(output_dir)
        self.state_manager = StateManager(event_bus=self.event_bus)
        self.loop = GenerationLoop(
            service=service,
            event_bus=self.event_bus,
            max_rate_limit_retries=max_rate_limit_retries,
        )

    @property
    def state(self) -> SessionState:
        return self.state_manager.state

    def _fail(self, exc: Exception) -> None:
        logger.exception("Session step failed: %s", exc)
        self.state_manager.transition(SessionPhase.ERROR, str(exc) or type(exc).__name__)

    def load_screenshot(self, path: Path) -> None:
        data = Path(path).read_bytes()
        self.state_manager.set_screenshot(Path(path), data)
        logger.info("Screenshot loaded: %s (%d bytes)", path, len(data))

    def extract_app_names(self) -> list[str]:
        """Extract names from the loaded screenshot; keeps old names on failure."""
        if self.state.screenshot is None:
            raise StudioError("No screenshot loaded.")
        self.state_manager.transition(SessionPhase.EXTRACTING)
        try:
            result = self.service.extract_app_names(self.state.screenshot)
        except Exception as exc:
            self._fail(exc)
            raise
        if not result.ok:
            logger.error("Failed to extract app names: %s", result.message)
            self.state_manager.transition(SessionPhase.ERROR, result.message)
            return list(self.state.app_names)

        names = result.value or []
        self.state_manager.set_app_names(names)
        logger.info("Successfully extracted app names: %s", names)
        self.state_manager.transition(SessionPhase.READY)
        return names

    def set_app_names(self, names: list[str]) -> None:
        self.state_manager.set_app_names(names)

    def set_theme(self, theme: str) -> None:
        self.state_manager.set_theme(theme)

    def generate_icons(self, cancel_event: threading.Event | None = None) -> BatchResult:
        """Run one generation batch over the current names and theme."""
        if not self.state.app_names:
            raise StudioError("No app names to generate icons for.")
        if not self.state.theme:
            raise StudioError("Enter a theme before generating icons.")

        self.state_manager.transition(SessionPhase.GENERATING)
        try:
            batch = self.loop.run(
                self.state.app_names,
                self.state.theme,
                results=self.state.generated_icons,
                cancel_event=cancel_event,
            )
        except Exception as exc:
            self._fail(exc)
            raise
        if batch.error is not None:
            self.state_manager.transition(SessionPhase.ERROR, batch.message)
        else:
            self.state_manager.transition(SessionPhase.READY)
        return batch

    def save_icons(self, directory: Path | None = None) -> list[Path]:
        """Persist generated icons; failures become the session error message.

        Raises:
            StoragePermissionError: the directory may not be written.
            OSError: a write failed part-way.
        """
        store = self.store if directory is None else IconStore(
            directory, self.store.permission_engine
        )
        self.state_manager.transition(SessionPhase.SAVING)
        try:
            written = store.save(self.state.generated_icons)
        except StoragePermissionError as exc:
            self.state_manager.transition(SessionPhase.ERROR, f"Storage permission denied: {exc}")
            raise
        except (OSError, InvalidIconNameError) as exc:
            self.state_manager.transition(SessionPhase.ERROR, f"Error saving icons: {exc}")
            raise

        self.state.saved_to = store.directory
        self.state_manager.transition(SessionPhase.READY)
        self.event_bus.emit(
            ICONS_SAVED, {"directory": str(store.directory), "count": len(written)}
        )
        return written

    def status_message(self) -> str:
        phase = self.state.phase
        if phase is SessionPhase.ERROR:
            return self.state.last_error or "An unknown error occurred."
        if phase is SessionPhase.EXTRACTING:
            return "Extracting app names..."
        if phase is SessionPhase.GENERATING:
            return "Generating icons..."
        if phase is SessionPhase.SAVING:
            return "Saving icons..."
        if self.state.saved_to is not None:
            return f"Icons saved to {self.state.saved_to}"
        if self.state.generated_icons:
            return f"{len(self.state.generated_icons)} icons generated."
        if self.state.app_names:
            return f"{len(self.state.app_names)} app names extracted."
        return "No screenshot uploaded yet."
