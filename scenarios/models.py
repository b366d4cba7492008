"""Pydantic models for scenario files (YAML/JSON shape and type checking)."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from sim.config import Configuration, SampleSet
from sim.errors import ConfigurationError


class ScenarioModel(BaseModel):
    """
    Shape of the `scenario:` block. Only types are enforced here; range checks
    live in sim.config.validate_configuration so every problem is reported
    together.
    """

    model_config = ConfigDict(extra="forbid")

    client_count: int = 20
    server_count: int = 2

    use_sampled_arrivals: bool = True
    arrival_mean: float = 2.0
    fixed_arrival_interval: float = 2.0
    fixed_initial_arrival: float = 2.0

    use_sampled_service: bool = True
    service_distribution: Literal["normal", "uniform", "exponential"] = "normal"
    service_mean: float = 10.0
    service_stddev: float = 2.0
    service_min: float = 2.0
    service_max: float = 6.0
    fixed_service_duration: float = 10.0

    use_vip: bool = True
    vip_fraction: float | None = Field(default=None, description="Fraction in [0, 1]")
    vip_percent: float | None = Field(default=None, description="Alternative to vip_fraction, in [0, 100]")
    seed: int | None = None

    def to_configuration(self) -> Configuration:
        d = self.model_dump(exclude={"vip_fraction", "vip_percent"})
        if self.vip_fraction is not None:
            d["vip_fraction"] = self.vip_fraction
        elif self.vip_percent is not None:
            d["vip_fraction"] = self.vip_percent / 100.0
        return Configuration.from_dict(d)


class SampleModel(BaseModel):
    """Shape of the optional `samples:` block. Values stay unchecked here."""

    model_config = ConfigDict(extra="forbid")

    arrivals: list[float] | None = None
    service: list[float] | None = None
    vip: list[float] | None = None

    def to_sample_set(self) -> SampleSet:
        return SampleSet.of(arrivals=self.arrivals, service=self.service, vip=self.vip)


class ScenarioFile(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = None
    scenario: ScenarioModel = Field(default_factory=ScenarioModel)
    samples: SampleModel = Field(default_factory=SampleModel)


def _format_error(err: dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in err.get("loc", ()))
    return f"{loc}: {err.get('msg', 'invalid value')}"


def parse_scenario(data: dict[str, Any] | None) -> tuple[Configuration, SampleSet]:
    """Parse a loaded scenario mapping. All type errors become one ConfigurationError."""
    try:
        parsed = ScenarioFile.model_validate(data or {})
    except ValidationError as e:
        raise ConfigurationError([_format_error(err) for err in e.errors()]) from e
    return parsed.scenario.to_configuration(), parsed.samples.to_sample_set()


def scenario_json_schema() -> dict[str, Any]:
    """JSON schema of the scenario file, for editors and documentation."""
    return ScenarioFile.model_json_schema()
