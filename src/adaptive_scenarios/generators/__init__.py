"""
Generators for adaptive learning scenarios.

This module contains:
- Recency annotation of learner history
- The scenario generator with its result type and callbacks
"""

from adaptive_scenarios.generators.scenario_generator import (
    FailureKind,
    ScenarioGenerationError,
    ScenarioGenerator,
    ScenarioResult,
    generate_scenario,
)

__all__ = [
    "FailureKind",
    "ScenarioGenerationError",
    "ScenarioGenerator",
    "ScenarioResult",
    "generate_scenario",
]
