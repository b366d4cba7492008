"""Discrete-event simulator for a multi-server attraction queue."""

from sim.config import Configuration, SampleSet, validate_configuration
from sim.entities import Client, PriorityClass, ServedRecord, ServerState, SystemState
from sim.errors import ConfigurationError, InvariantViolation, SimulationError
from sim.events import Event, EventScheduler, EventType
from sim.runner import SimulationResult, simulate

__all__ = [
    "Configuration",
    "SampleSet",
    "validate_configuration",
    "Client",
    "PriorityClass",
    "ServedRecord",
    "ServerState",
    "SystemState",
    "ConfigurationError",
    "InvariantViolation",
    "SimulationError",
    "Event",
    "EventScheduler",
    "EventType",
    "SimulationResult",
    "simulate",
]
