"""
Scenario loader for JSON-based portfolio definitions.

A scenario file holds the global assumptions and the candidate projects:

    {
      "scenario_metadata": {"name": "...", "description": "..."},
      "global_params": {"budget": 50, "discount_rate": 0.08, "years": 5},
      "projects": [
        {"id": "1", "name": "Apt Type A", "cost": 4.0, "rent": 0.2,
         "growth_rate": 0.05, "max_units": 3, "color": "#3b82f6"}
      ]
    }

Personal scenarios live in data/user_scenario.json (git-ignored); when it is
absent the loader falls back to data/demo_scenario.json.
"""

import json
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from calculators.components import ProjectInput, GlobalParams
from calculators.validation import coerce_whole_number
from calculators.finance_constants import (
    PROJECT_COLORS, DEFAULT_SCENARIO_NAME, DEFAULT_SCENARIO_DESCRIPTION,
    default_params, demo_projects
)

REQUIRED_SECTIONS = ['scenario_metadata', 'global_params', 'projects']
REQUIRED_PARAM_FIELDS = ['budget', 'discount_rate', 'years']
REQUIRED_PROJECT_FIELDS = ['id', 'name', 'cost', 'rent', 'growth_rate', 'max_units']


@dataclass(frozen=True)
class Scenario:
    """A named set of projects with its global assumptions."""
    name: str
    description: str
    projects: Tuple[ProjectInput, ...]
    params: GlobalParams


class ScenarioLoader:
    """Load a portfolio scenario from a JSON file."""

    def __init__(self, scenario_path: str):
        """
        Initialize scenario loader.

        Args:
            scenario_path: Path to the scenario JSON file
        """
        self.scenario_path = Path(scenario_path)

    def load_scenario(self) -> Scenario:
        """
        Load and parse the scenario file.

        Returns:
            Scenario with projects and global parameters

        Raises:
            FileNotFoundError: If the scenario file does not exist
            ValueError: If the file is not valid JSON or misses required data
        """
        if not self.scenario_path.exists():
            raise FileNotFoundError(f"Scenario file not found: {self.scenario_path}")

        with open(self.scenario_path, 'r') as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Scenario file {self.scenario_path} is not valid JSON: {e}")

        return parse_scenario(data)


def parse_scenario(data: Dict[str, Any]) -> Scenario:
    """
    Build a Scenario from already decoded JSON data.

    Raises:
        ValueError: If a required section or field is missing or has the wrong shape
    """
    if not isinstance(data, dict):
        raise ValueError(f"Scenario must be a JSON object, got {type(data).__name__}")

    for section in REQUIRED_SECTIONS:
        if section not in data:
            raise ValueError(f"Scenario missing required section: '{section}'")
        expected = list if section == 'projects' else dict
        if not isinstance(data[section], expected):
            raise ValueError(
                f"Scenario section '{section}' must be a JSON "
                f"{'array' if expected is list else 'object'}, got {type(data[section]).__name__}"
            )

    metadata = data['scenario_metadata']
    params_data = data['global_params']
    for field in REQUIRED_PARAM_FIELDS:
        if field not in params_data:
            raise ValueError(f"global_params missing required field: '{field}'")

    params = GlobalParams(
        budget=_parse_number(params_data['budget'], "global_params.budget"),
        discount_rate=_parse_number(params_data['discount_rate'], "global_params.discount_rate"),
        years=coerce_whole_number(params_data['years'], "global_params.years")
    )

    projects = tuple(
        _parse_project(entry, position)
        for position, entry in enumerate(data['projects'])
    )

    return Scenario(
        name=metadata.get('name', 'Unnamed Scenario'),
        description=metadata.get('description', ''),
        projects=projects,
        params=params
    )


def _parse_number(value: Any, label: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{label} must be a number, got {value!r}")


def _parse_project(entry: Dict[str, Any], position: int) -> ProjectInput:
    """Build a ProjectInput from one entry of the projects list."""
    label = f"Project #{position + 1}"
    if not isinstance(entry, dict):
        raise ValueError(f"{label} must be a JSON object, got {type(entry).__name__}")

    for field in REQUIRED_PROJECT_FIELDS:
        if field not in entry:
            raise ValueError(
                f"{label} missing required field: '{field}'. "
                f"Each project needs {', '.join(REQUIRED_PROJECT_FIELDS)}."
            )

    # Color is display only; default to the palette slot for this position
    color = entry.get('color') or PROJECT_COLORS[position % len(PROJECT_COLORS)]

    return ProjectInput(
        id=str(entry['id']),
        name=str(entry['name']),
        cost=_parse_number(entry['cost'], f"{label} cost"),
        rent=_parse_number(entry['rent'], f"{label} rent"),
        growth_rate=_parse_number(entry['growth_rate'], f"{label} growth_rate"),
        max_units=coerce_whole_number(entry['max_units'], f"{label} max_units"),
        color=color
    )


def default_scenario() -> Scenario:
    """The built-in demo scenario, independent of any data file."""
    return Scenario(
        name=DEFAULT_SCENARIO_NAME,
        description=DEFAULT_SCENARIO_DESCRIPTION,
        projects=demo_projects(),
        params=default_params()
    )


class ScenarioSourceLoader:
    """Scenario loader with automatic fallback from user data to demo data."""

    # Standard scenario file paths relative to project root
    USER_SCENARIO_PATH = "data/user_scenario.json"
    DEMO_SCENARIO_PATH = "data/demo_scenario.json"

    def __init__(self, project_root: Optional[str] = None):
        """
        Args:
            project_root: Path to project root directory. If None, auto-detects.
        """
        if project_root is None:
            # Assumes this file is in the loaders/ subdirectory
            self.project_root = Path(__file__).parent.parent
        else:
            self.project_root = Path(project_root)

    def load(self, verbose: bool = True, force_demo: bool = False) -> Tuple[Scenario, bool]:
        """
        Load the user scenario, falling back to the demo scenario.

        Args:
            verbose: Whether to print status messages
            force_demo: Skip the user scenario even if it exists

        Returns:
            Tuple of (scenario, is_user_data)

        Raises:
            FileNotFoundError: If neither scenario file exists
            ValueError: If the demo scenario is invalid
        """
        if force_demo:
            if verbose:
                print("🧪 Forcing use of demo scenario from demo_scenario.json")
        else:
            user_path = self.project_root / self.USER_SCENARIO_PATH
            if user_path.exists():
                try:
                    scenario = ScenarioLoader(str(user_path)).load_scenario()
                    if verbose:
                        print(f"🔒 Using personal scenario from {self.USER_SCENARIO_PATH}")
                    return scenario, True
                except ValueError as e:
                    if verbose:
                        print(f"⚠️  Error loading {self.USER_SCENARIO_PATH}: {e}")
                        print("   Falling back to demo data...")

        demo_path = self.project_root / self.DEMO_SCENARIO_PATH
        if not demo_path.exists():
            raise FileNotFoundError(
                f"Neither {self.USER_SCENARIO_PATH} nor {self.DEMO_SCENARIO_PATH} found. "
                f"To get started, copy {self.DEMO_SCENARIO_PATH} to {self.USER_SCENARIO_PATH} "
                f"and edit the projects and global_params sections."
            )

        try:
            scenario = ScenarioLoader(str(demo_path)).load_scenario()
        except ValueError as e:
            raise ValueError(f"Error loading demo scenario: {e}")

        if verbose:
            print(f"🧪 Using demo scenario from {self.DEMO_SCENARIO_PATH}")
            print(f"   To use your own projects: copy it to {self.USER_SCENARIO_PATH}")

        return scenario, False


def load_scenario_with_fallback(project_root: Optional[str] = None, verbose: bool = True,
                                force_demo: bool = False) -> Tuple[Scenario, bool]:
    """Convenience wrapper around ScenarioSourceLoader.load()."""
    return ScenarioSourceLoader(project_root).load(verbose=verbose, force_demo=force_demo)
