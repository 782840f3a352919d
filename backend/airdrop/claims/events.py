"""
Notification log for state changes.

Events are appended in emission order and numbered from 0. They are only
emitted after the state change they describe has been committed.

The log is held in memory only. The state it describes is persisted by the
ledger, but a restarted process starts with an empty log.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirdropEvent:
    name: str
    args: Dict[str, Any]
    sequence: int
    emitted_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class EventLog:
    """Ordered, per-instance event log."""

    def __init__(self):
        self._events: List[AirdropEvent] = []

    def emit(self, name: str, **args: Any) -> AirdropEvent:
        event = AirdropEvent(name=name, args=dict(args), sequence=len(self._events))
        self._events.append(event)
        logger.info(f"event {event.sequence} {name}: {args}")
        return event

    def events(self, name: Optional[str] = None) -> List[AirdropEvent]:
        if name is None:
            return list(self._events)
        return [e for e in self._events if e.name == name]

    def __len__(self) -> int:
        return len(self._events)
