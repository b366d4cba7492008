"""Error taxonomy for the queue simulator."""

from __future__ import annotations


class SimulationError(Exception):
    """Base class for every error raised by the simulator."""


class ConfigurationError(SimulationError):
    """Invalid configuration or sample values, detected before the event loop.

    Carries every violation found so the caller can fix them in one pass.
    """

    def __init__(self, errors: list[str] | str) -> None:
        if isinstance(errors, str):
            errors = [errors]
        self.errors: list[str] = list(errors)
        super().__init__(
            f"{len(self.errors)} configuration problem(s): " + "; ".join(self.errors)
        )


class InvariantViolation(SimulationError):
    """Internal consistency check failed; the run is aborted."""
