"""
Adaptive Language-Learning Scenario Generator

Builds a reading passage plus 2-4 comprehension questions for a learner from
their target language, CEFR level, native language and history of prior
scenarios, using a structured LLM call.

**Version**: 0.1.0
**Key Dependencies**: instructor, openai, pydantic, langfuse
"""

from adaptive_scenarios.generators.scenario_generator import (
    FailureKind,
    ScenarioGenerationError,
    ScenarioGenerator,
    ScenarioResult,
    generate_scenario,
)
from adaptive_scenarios.models.schema import (
    CEFRLevel,
    GeneratedQuestion,
    GenerateScenarioInput,
    GenerateScenarioOutput,
    Question,
    UserResponse,
    UserScenario,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CEFRLevel",
    "FailureKind",
    "GeneratedQuestion",
    "GenerateScenarioInput",
    "GenerateScenarioOutput",
    "Question",
    "ScenarioGenerationError",
    "ScenarioGenerator",
    "ScenarioResult",
    "UserResponse",
    "UserScenario",
    "generate_scenario",
]
