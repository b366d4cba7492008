"""Simulator entities: Client, ServedRecord, ServerState, SystemState."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from enum import Enum

# Priority classes
CLASS_REGULAR = "regular"
CLASS_VIP = "vip"


class PriorityClass(str, Enum):
    REGULAR = CLASS_REGULAR
    VIP = CLASS_VIP

    @property
    def label(self) -> str:
        return "VIP" if self is PriorityClass.VIP else "Regular"


@dataclass(frozen=True)
class Client:
    """A client as generated before the event loop starts."""

    id: int
    arrival_time: float
    service_duration: float  # drawn once, independent of server/queue position
    priority_class: PriorityClass = PriorityClass.REGULAR

    @property
    def is_vip(self) -> bool:
        return self.priority_class is PriorityClass.VIP


@dataclass(frozen=True)
class ServedRecord:
    """A client plus its service outcome. Created once, when a server accepts it."""

    client: Client
    server_id: int
    service_start: float
    service_end: float

    @property
    def id(self) -> int:
        return self.client.id

    @property
    def priority_class(self) -> PriorityClass:
        return self.client.priority_class

    @property
    def is_vip(self) -> bool:
        return self.client.is_vip

    @property
    def arrival_time(self) -> float:
        return self.client.arrival_time

    @property
    def service_duration(self) -> float:
        return self.client.service_duration

    @property
    def wait_time(self) -> float:
        return self.service_start - self.client.arrival_time

    @property
    def satisfaction(self) -> float:
        """service / (service + wait); 1.0 whenever the client did not wait."""
        total = self.client.service_duration + self.wait_time
        if total <= 0:
            return 1.0
        return self.client.service_duration / total

    def rounded(self) -> dict[str, float]:
        """One-decimal view used by tables and export."""
        return {
            "arrival": round(self.arrival_time, 1),
            "service": round(self.service_duration, 1),
            "start": round(self.service_start, 1),
            "end": round(self.service_end, 1),
            "wait": round(self.wait_time, 1),
        }


@dataclass
class ServerState:
    """One server (attraction). Idle at time t iff busy_until <= t."""

    id: int  # 1-based
    busy_until: float = 0.0

    def is_idle(self, now: float) -> bool:
        return self.busy_until <= now


@dataclass
class SystemState:
    """Mutable state owned by a single run."""

    servers: list[ServerState] = field(default_factory=list)
    vip_queue: deque[Client] = field(default_factory=deque)
    regular_queue: deque[Client] = field(default_factory=deque)
    served: list[ServedRecord] = field(default_factory=list)
    current_time: float = 0.0

    @classmethod
    def with_servers(cls, server_count: int) -> SystemState:
        return cls(servers=[ServerState(id=i + 1) for i in range(server_count)])

    def add_to_queue(self, client: Client, vip_lane: bool = False) -> None:
        if vip_lane:
            self.vip_queue.append(client)
        else:
            self.regular_queue.append(client)

    @property
    def queue_length(self) -> int:
        return len(self.vip_queue) + len(self.regular_queue)

    def idle_servers(self) -> list[ServerState]:
        return [s for s in self.servers if s.is_idle(self.current_time)]

    def assign_client(self, server: ServerState, client: Client) -> ServedRecord:
        start = self.current_time
        end = start + client.service_duration
        server.busy_until = end
        record = ServedRecord(
            client=client, server_id=server.id, service_start=start, service_end=end
        )
        self.served.append(record)
        return record
