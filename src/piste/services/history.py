from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping


@dataclass
class HistoryService:
    """Appends match events to a JSON-lines file, one record per event."""

    path: Path

    def record(self, events: Iterable[Mapping[str, object]]) -> int:
        lines = []
        ts = datetime.now(tz=timezone.utc).isoformat()
        for ev in events:
            lines.append(json.dumps({"ts": ts, **ev}, ensure_ascii=False))
        if not lines:
            return 0
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write("\n".join(lines) + "\n")
        return len(lines)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.record([{"type": event_type, "severity": "info", **payload}])
