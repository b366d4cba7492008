"""Event types and the time-ordered event queue for the discrete-event loop."""

from __future__ import annotations

import heapq
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class EventType(str, Enum):
    ARRIVAL = "arrival"
    DEPARTURE = "departure"


@dataclass(order=True)
class Event:
    """Single event for the DES. Ordered by (time, sequence).

    There is no per-type rank: events at an identical timestamp are processed
    in the order they were scheduled.
    """

    time: float
    sequence: int = field(compare=True, default=0)
    event_type: EventType = field(compare=False, default=EventType.ARRIVAL)
    payload: dict[str, Any] = field(compare=False, default_factory=dict)

    @classmethod
    def arrival(cls, time: float, client_id: int) -> Event:
        return cls(time=time, event_type=EventType.ARRIVAL, payload={"client_id": client_id})

    @classmethod
    def departure(cls, time: float, server_id: int) -> Event:
        return cls(time=time, event_type=EventType.DEPARTURE, payload={"server_id": server_id})


class EventScheduler:
    """Min-heap of events; the single authority for what happens next."""

    def __init__(self) -> None:
        self._heap: list[Event] = []
        self._next_sequence = 0
        self.processed = 0

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)

    def push(self, ev: Event) -> Event:
        self._next_sequence += 1
        ev.sequence = self._next_sequence
        heapq.heappush(self._heap, ev)
        return ev

    def pop(self) -> Event:
        ev = heapq.heappop(self._heap)
        self.processed += 1
        return ev

    def peek_time(self) -> float | None:
        return self._heap[0].time if self._heap else None
