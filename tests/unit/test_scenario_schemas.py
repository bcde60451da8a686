"""Unit tests for scenario Pydantic models."""

import pytest
from pydantic import ValidationError

from adaptive_scenarios.models.schema import (
    CEFRLevel,
    GeneratedQuestion,
    GenerateScenarioInput,
    GenerateScenarioOutput,
    UserResponse,
)


class TestCEFRLevel:
    """Test CEFRLevel enum."""

    def test_six_levels_in_order(self):
        assert [level.value for level in CEFRLevel] == ["A1", "A2", "B1", "B2", "C1", "C2"]
        assert CEFRLevel.A1 < CEFRLevel.B2 < CEFRLevel.C2
        assert CEFRLevel.C1 > CEFRLevel.B2
        assert CEFRLevel.B1 <= CEFRLevel.B1 <= CEFRLevel.C2
        assert CEFRLevel.C2 >= CEFRLevel.A1
        assert max(CEFRLevel) == CEFRLevel.C2
        assert CEFRLevel.A1.rank == 0
        assert CEFRLevel.C2.rank == 5

    def test_labels(self):
        assert CEFRLevel.A2.label == "Elementary"
        assert CEFRLevel.C1.label == "Advanced"


class TestGenerateScenarioInput:
    """Test input validation."""

    def test_valid_input_with_camel_case_keys(self, beach_history_input):
        scenario_input = GenerateScenarioInput.model_validate(beach_history_input)
        assert scenario_input.current_level == CEFRLevel.B1
        assert len(scenario_input.user_history) == 1
        question = scenario_input.user_history[0].questions[1]
        assert question.user_response.response_time_seconds == 12.5
        assert question.user_response.target_language_text_shown is True

    def test_valid_input_with_snake_case_keys(self):
        scenario_input = GenerateScenarioInput(
            language="French",
            current_level="C1",
            native_language="English",
            user_history=[],
        )
        assert scenario_input.current_level == CEFRLevel.C1
        assert scenario_input.user_history == []

    def test_unknown_level_rejected(self, empty_history_input):
        empty_history_input["currentLevel"] = "D1"
        with pytest.raises(ValidationError) as exc_info:
            GenerateScenarioInput.model_validate(empty_history_input)
        assert "currentLevel" in str(exc_info.value)

    def test_history_is_required(self, empty_history_input):
        del empty_history_input["userHistory"]
        with pytest.raises(ValidationError):
            GenerateScenarioInput.model_validate(empty_history_input)

    def test_blank_language_rejected(self, empty_history_input):
        empty_history_input["language"] = "   "
        with pytest.raises(ValidationError) as exc_info:
            GenerateScenarioInput.model_validate(empty_history_input)
        assert "must not be empty" in str(exc_info.value)

    def test_negative_response_time_rejected(self):
        with pytest.raises(ValidationError):
            UserResponse(
                response_content="Sí",
                response_time_seconds=-1,
                target_language_text_shown=False,
                native_language_text_shown=False,
                submitted_at=0,
            )

    def test_input_is_immutable(self, empty_history_input):
        scenario_input = GenerateScenarioInput.model_validate(empty_history_input)
        with pytest.raises(ValidationError):
            scenario_input.language = "German"


class TestGenerateScenarioOutput:
    """Test output contract, especially the 2-4 question bound."""

    def _questions(self, n):
        return [{"questionText": f"Q{i}?"} for i in range(n)]

    @pytest.mark.parametrize("count", [2, 3, 4])
    def test_question_count_within_bounds(self, count):
        output = GenerateScenarioOutput.model_validate(
            {"scenarioContent": "Texto.", "questions": self._questions(count)}
        )
        assert len(output.questions) == count

    @pytest.mark.parametrize("count", [0, 1, 5])
    def test_question_count_out_of_bounds(self, count):
        with pytest.raises(ValidationError) as exc_info:
            GenerateScenarioOutput.model_validate(
                {"scenarioContent": "Texto.", "questions": self._questions(count)}
            )
        assert "questions" in str(exc_info.value)

    def test_empty_content_rejected(self):
        with pytest.raises(ValidationError):
            GenerateScenarioOutput.model_validate(
                {"scenarioContent": "  ", "questions": self._questions(2)}
            )

    def test_missing_question_text_rejected(self):
        with pytest.raises(ValidationError):
            GenerateScenarioOutput.model_validate(
                {"scenarioContent": "Texto.", "questions": [{"questionText": "Q?"}, {}]}
            )

    def test_serializes_to_camel_case(self):
        output = GenerateScenarioOutput(
            scenario_content="Texto.",
            questions=[GeneratedQuestion(question_text="A?"), GeneratedQuestion(question_text="B?")],
        )
        assert output.model_dump(by_alias=True) == {
            "scenarioContent": "Texto.",
            "questions": [{"questionText": "A?"}, {"questionText": "B?"}],
        }

    def test_unvalidated_instance_is_revalidated(self):
        bad = GenerateScenarioOutput.model_construct(
            scenario_content="Texto.",
            questions=[GeneratedQuestion(question_text="Only one?")],
        )
        with pytest.raises(ValidationError):
            GenerateScenarioOutput.model_validate(bad)

    def test_json_schema_uses_camel_case(self):
        schema = GenerateScenarioOutput.model_json_schema()
        assert set(schema["properties"]) == {"scenarioContent", "questions"}
        assert schema["properties"]["questions"]["minItems"] == 2
        assert schema["properties"]["questions"]["maxItems"] == 4
