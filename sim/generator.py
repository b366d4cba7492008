"""Client generation: arrival timestamps, service durations and priority classes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Sequence

from sim.entities import Client, PriorityClass
from sim.events import Event
from sim.processes import (
    UNIFORMS_PER_SAMPLE,
    draw_uniforms,
    exponential_from_uniform,
    service_from_uniforms,
)

if TYPE_CHECKING:
    import numpy as np

    from sim.config import Configuration, SampleSet

NEUTRAL_SAMPLE = 0.5


@dataclass
class GeneratedClients:
    clients: list[Client] = field(default_factory=list)
    events: list[Event] = field(default_factory=list)  # one ARRIVAL per client
    warnings: list[str] = field(default_factory=list)


def fit_samples(
    values: Sequence[float] | None, length: int, fill: float = NEUTRAL_SAMPLE
) -> tuple[list[float], int]:
    """Truncate or pad to exactly `length`. Returns (samples, number padded)."""
    out = list(values or [])[:length]
    padded = length - len(out)
    out.extend([fill] * padded)
    return out, padded


def _axis_samples(
    name: str,
    supplied: Sequence[float] | None,
    length: int,
    warnings: list[str],
    rng: np.random.Generator | None = None,
) -> list[float]:
    if supplied is None:
        return draw_uniforms(length, rng)
    samples, padded = fit_samples(supplied, length)
    if padded:
        warnings.append(
            f"{name} samples: {len(supplied)} supplied, {length} required; "
            f"padded {padded} with {NEUTRAL_SAMPLE}"
        )
    elif len(supplied) > length:
        warnings.append(
            f"{name} samples: {len(supplied)} supplied, {length} required; "
            f"ignored the last {len(supplied) - length}"
        )
    return samples


def generate_clients(
    config: Configuration,
    samples: SampleSet,
    rng: np.random.Generator | None = None,
) -> GeneratedClients:
    """
    Build the ordered client list and one ARRIVAL event per client.

    Sampled arrivals accumulate exponential inter-arrival times. Fixed arrivals
    start at fixed_initial_arrival for client 1 and add fixed_arrival_interval
    for every later client.
    """
    n = config.client_count
    out = GeneratedClients()

    u_arrivals = (
        _axis_samples("arrival", samples.arrivals, n, out.warnings, rng)
        if config.use_sampled_arrivals
        else None
    )
    per_service = UNIFORMS_PER_SAMPLE.get(config.service_distribution, 1)
    u_service = (
        _axis_samples("service", samples.service, n * per_service, out.warnings, rng)
        if config.use_sampled_service
        else None
    )
    u_vip = _axis_samples("vip", samples.vip, n, out.warnings, rng) if config.use_vip else None

    arrival = 0.0
    for i in range(n):
        if u_arrivals is not None:
            arrival += exponential_from_uniform(u_arrivals[i], config.arrival_mean)
        elif i == 0:
            arrival = float(config.fixed_initial_arrival)
        else:
            arrival += config.fixed_arrival_interval

        if u_service is not None:
            service = service_from_uniforms(
                u_service[i * per_service : (i + 1) * per_service],
                config.service_distribution,
                config.service_mean,
                config.service_stddev,
                config.service_min,
                config.service_max,
            )
        else:
            service = float(config.fixed_service_duration)

        vip = u_vip is not None and u_vip[i] < config.vip_fraction
        client = Client(
            id=i + 1,
            arrival_time=arrival,
            service_duration=service,
            priority_class=PriorityClass.VIP if vip else PriorityClass.REGULAR,
        )
        out.clients.append(client)
        out.events.append(Event.arrival(client.arrival_time, client.id))

    return out
