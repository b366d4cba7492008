"""Dispatch policy: which waiting client starts on which idle server."""

from __future__ import annotations

from sim.entities import Client, ServedRecord, SystemState
from sim.errors import InvariantViolation
from sim.events import Event, EventScheduler

RULE_FIFO = "fifo"
RULE_VIP_PRIORITY = "vip_priority"


def select_next_client(state: SystemState) -> Client | None:
    """VIP queue head, else regular queue head, else nobody."""
    if state.vip_queue:
        return state.vip_queue.popleft()
    if state.regular_queue:
        return state.regular_queue.popleft()
    return None


class DispatchPolicy:
    """
    Fills idle servers from the queues. Runs after every event, not only after
    departures, so an arrival finds a server that was already idle.
    """

    def __init__(self, use_vip: bool = False) -> None:
        self.rule = RULE_VIP_PRIORITY if use_vip else RULE_FIFO

    def admit(self, state: SystemState, client: Client) -> None:
        """Queue an arriving client. Under FIFO the VIP class is ignored."""
        state.add_to_queue(client, vip_lane=self.rule == RULE_VIP_PRIORITY and client.is_vip)

    def sweep(self, state: SystemState, scheduler: EventScheduler) -> list[ServedRecord]:
        started: list[ServedRecord] = []
        for server in state.servers:
            if not server.is_idle(state.current_time):
                continue
            client = select_next_client(state)
            if client is None:
                break
            if client.service_duration < 0:
                raise InvariantViolation(
                    f"client {client.id} reached dispatch with negative service duration "
                    f"{client.service_duration}"
                )
            if state.current_time < client.arrival_time:
                raise InvariantViolation(
                    f"client {client.id} dispatched at {state.current_time} "
                    f"before its arrival at {client.arrival_time}"
                )
            record = state.assign_client(server, client)
            scheduler.push(Event.departure(record.service_end, server.id))
            started.append(record)
        return started
