"""Scenario files: parsing and type checking of YAML/JSON run definitions."""

from scenarios.models import ScenarioFile, ScenarioModel, SampleModel, parse_scenario, scenario_json_schema

__all__ = [
    "ScenarioFile",
    "ScenarioModel",
    "SampleModel",
    "parse_scenario",
    "scenario_json_schema",
]
