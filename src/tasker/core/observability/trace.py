from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class Trace:
    message: str
    turn_id: str | None = None
    correlation_id: str | None = None
    events: list[dict[str, Any]] = field(default_factory=list)

    def emit(self, name: str, payload: dict[str, Any]) -> None:
        enriched_payload = dict(payload)
        if self.turn_id:
            enriched_payload.setdefault("turn_id", self.turn_id)
        if self.correlation_id:
            enriched_payload.setdefault("correlation_id", self.correlation_id)
        self.events.append({"event": name, "payload": enriched_payload})
