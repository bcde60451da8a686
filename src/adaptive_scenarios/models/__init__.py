"""Pydantic models for scenario generation."""

from adaptive_scenarios.models.schema import (
    CEFR_LABELS,
    CEFRLevel,
    GeneratedQuestion,
    GenerateScenarioInput,
    GenerateScenarioOutput,
    Question,
    QuestionRecency,
    ScenarioRecency,
    UserResponse,
    UserScenario,
)

__all__ = [
    "CEFR_LABELS",
    "CEFRLevel",
    "GeneratedQuestion",
    "GenerateScenarioInput",
    "GenerateScenarioOutput",
    "Question",
    "QuestionRecency",
    "ScenarioRecency",
    "UserResponse",
    "UserScenario",
]
