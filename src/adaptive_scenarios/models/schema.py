"""Pydantic models for scenario generation inputs and outputs.

External field names are camelCase (``scenarioContent``, ``questionText``, ...)
while attributes stay snake_case. Both spellings are accepted on input and
``model_dump(by_alias=True)`` produces the camelCase JSON shape.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================


class CEFRLevel(str, Enum):
    """CEFR (Common European Framework of Reference for Languages) proficiency level."""

    A1 = "A1"
    A2 = "A2"
    B1 = "B1"
    B2 = "B2"
    C1 = "C1"
    C2 = "C2"

    @property
    def label(self) -> str:
        """Human-readable band name, e.g. 'Elementary' for A2."""
        return CEFR_LABELS[self]

    @property
    def rank(self) -> int:
        """Zero-based position from A1 (lowest) to C2 (highest)."""
        return list(CEFRLevel).index(self)

    # str defines all four comparisons, so each is overridden to compare by rank
    def __lt__(self, other):
        if not isinstance(other, CEFRLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, CEFRLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, CEFRLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, CEFRLevel):
            return NotImplemented
        return self.rank >= other.rank


CEFR_LABELS = {
    CEFRLevel.A1: "Beginner",
    CEFRLevel.A2: "Elementary",
    CEFRLevel.B1: "Intermediate",
    CEFRLevel.B2: "Upper Intermediate",
    CEFRLevel.C1: "Advanced",
    CEFRLevel.C2: "Proficient",
}


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# ============================================================================
# Learner history (input)
# ============================================================================


class UserResponse(_CamelModel):
    """User's response to a language learning question."""

    response_content: str = Field(..., description="The user's response to the question")
    response_time_seconds: float = Field(
        ..., ge=0, description="Time taken by the user to respond, in seconds"
    )
    target_language_text_shown: bool = Field(
        ..., description="Whether the question text was shown in the target language"
    )
    native_language_text_shown: bool = Field(
        ..., description="Whether the question text was shown in the user's native language"
    )
    submitted_at: int = Field(
        ..., description="Timestamp of when the response was submitted (epoch milliseconds)"
    )


class Question(_CamelModel):
    """A question and the user's response to it."""

    question_text: str = Field(..., description="The text of the question posed to the user")
    user_response: UserResponse


class UserScenario(_CamelModel):
    """A complete scenario from the learner's history, including questions and responses."""

    scenario_content: str = Field(
        ..., description="The full text of the language learning scenario presented to the user"
    )
    questions: List[Question] = Field(
        ...,
        description="List of questions and responses related to this scenario",
    )
    seen_at: int = Field(
        ..., description="Timestamp of when the scenario was presented to the user (epoch milliseconds)"
    )


class GenerateScenarioInput(_CamelModel):
    """Input data for generating a language learning scenario."""

    language: str = Field(..., description="The target language for learning")
    current_level: CEFRLevel = Field(..., description="Learner's current CEFR level")
    native_language: str = Field(..., description="The user's native language")
    user_history: List[UserScenario] = Field(
        ..., description="History of user's previous scenarios, oldest first"
    )

    @field_validator("language", "native_language")
    @classmethod
    def validate_language_name(cls, v: str) -> str:
        """Language names must not be blank."""
        v = v.strip()
        if not v:
            raise ValueError("Language name must not be empty")
        return v


# ============================================================================
# Generated scenario (output contract)
# ============================================================================


class GeneratedQuestion(_CamelModel):
    """A generated question for language learning."""

    question_text: str = Field(
        ...,
        min_length=1,
        description="The text of a generated question for the learning scenario",
    )


class GenerateScenarioOutput(_CamelModel):
    """Output data from the language learning scenario generator."""

    model_config = ConfigDict(revalidate_instances="always")

    scenario_content: str = Field(
        ...,
        min_length=1,
        description="The full text of the generated language learning scenario",
    )
    questions: List[GeneratedQuestion] = Field(
        ...,
        min_length=2,
        max_length=4,
        description="List of 2-4 generated questions for this scenario",
    )

    @field_validator("scenario_content")
    @classmethod
    def validate_content_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Scenario content must not be blank")
        return v


# ============================================================================
# Recency-annotated history
# ============================================================================


class QuestionRecency(BaseModel):
    """Historical question annotated with days since the response was submitted."""

    model_config = ConfigDict(frozen=True)

    question: Question
    days_since_response: float


class ScenarioRecency(BaseModel):
    """Historical scenario annotated with days since it was seen."""

    model_config = ConfigDict(frozen=True)

    scenario: UserScenario
    days_since_seen: float
    questions: List[QuestionRecency]
