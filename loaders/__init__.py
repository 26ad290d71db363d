"""Loaders module for real estate portfolio optimizer."""

from .scenario_loader import (
    Scenario,
    ScenarioLoader,
    ScenarioSourceLoader,
    default_scenario,
    load_scenario_with_fallback,
    parse_scenario
)

__all__ = [
    'Scenario',
    'ScenarioLoader',
    'ScenarioSourceLoader',
    'default_scenario',
    'load_scenario_with_fallback',
    'parse_scenario'
]
