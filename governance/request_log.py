"""Structured JSONL log of outbound generation requests."""

from __future__ import annotations

import hashlib
import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any


class RequestLog:
    """Appends one JSON line per icon generation attempt."""

    def __init__(self, log_path: Path) -> None:
        self.log_path = log_path
        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self.logger = logging.getLogger("ig.requests")

    @staticmethod
    def _hash_inputs(inputs: dict[str, Any]) -> str:
        payload = json.dumps(inputs, sort_keys=True, default=str).encode("utf-8")
        return hashlib.sha256(payload).hexdigest()

    def record(
        self,
        *,
        app_name: str,
        theme: str,
        outcome: str,
        error: str | None = None,
        waited_seconds: float = 0.0,
    ) -> dict[str, Any]:
        """Append one request event and return it."""
        event = {
            "timestamp": datetime.now(UTC).isoformat(),
            "app_name": app_name,
            "inputs_hash": self._hash_inputs({"app_name": app_name, "theme": theme}),
            "outcome": outcome,
            "error": error,
            "waited_seconds": round(waited_seconds, 3),
        }
        with self.log_path.open("a", encoding="utf-8") as fh:
            fh.write(json.dumps(event, ensure_ascii=True) + "\n")
        self.logger.debug(json.dumps(event, ensure_ascii=True))
        return event

    def read(self) -> list[dict[str, Any]]:
        if not self.log_path.exists():
            return []
        lines = self.log_path.read_text(encoding="utf-8").splitlines()
        return [json.loads(line) for line in lines if line.strip()]
