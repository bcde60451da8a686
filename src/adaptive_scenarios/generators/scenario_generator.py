"""Adaptive scenario generator.

Generates a reading passage plus 2-4 comprehension questions for a learner in a
single structured LLM call:

1. Validate the input (CEFR level, language names, history shape)
2. Annotate history with days since each scenario and response
3. Render the prompt from composable sections
4. Call the structured generation client with ``GenerateScenarioOutput``
5. Re-validate the output and reject passages that echo prior scenarios

Every call returns a ``ScenarioResult`` holding either the output or a
``ScenarioGenerationError``. Optional ``on_finish`` / ``on_error`` callbacks are
driven from that result, so exactly one of them fires per call.
"""

import inspect
import logging
import re
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from adaptive_scenarios.generators.recency import compute_recency, now_ms
from adaptive_scenarios.models.schema import (
    GenerateScenarioInput,
    GenerateScenarioOutput,
    ScenarioRecency,
)
from adaptive_scenarios.prompts.scenario_prompts import build_scenario_prompt
from adaptive_scenarios.utils.llm_client import LLMClient, StructuredGenerationClient
from adaptive_scenarios.utils.logging_config import generation_stage_logger

logger = logging.getLogger(__name__)

# Prior texts shorter than this are too generic to count as an echo
MIN_ECHO_SENTENCE_WORDS = 5

_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?。！？])\s*")


# ============================================================================
# Result type
# ============================================================================


class FailureKind(str, Enum):
    """Why a generation call failed."""

    INVALID_INPUT = "invalid_input"
    GENERATION_FAILED = "generation_failed"


class ScenarioGenerationError(Exception):
    """Scenario generation failed; the underlying exception is ``__cause__``."""

    def __init__(self, kind: FailureKind, message: str):
        super().__init__(message)
        self.kind = kind


class ScenarioEchoError(ValueError):
    """Generated passage copies text from a prior scenario."""


class ScenarioResult(BaseModel):
    """Outcome of one generation call: an output or an error, never both."""

    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    output: Optional[GenerateScenarioOutput] = None
    error: Optional[ScenarioGenerationError] = None

    @model_validator(mode="after")
    def validate_output_xor_error(self) -> "ScenarioResult":
        if (self.output is None) == (self.error is None):
            raise ValueError("ScenarioResult needs exactly one of output or error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> GenerateScenarioOutput:
        """Return the output, or raise the failure."""
        if self.error is not None:
            raise self.error
        return self.output

    @classmethod
    def success(cls, output: GenerateScenarioOutput) -> "ScenarioResult":
        return cls(output=output)

    @classmethod
    def failure(
        cls, kind: FailureKind, message: str, cause: BaseException
    ) -> "ScenarioResult":
        error = ScenarioGenerationError(kind, message)
        error.__cause__ = cause
        return cls(error=error)


# ============================================================================
# Output checks
# ============================================================================


def _split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]


def find_echoed_text(
    scenario_content: str, history: Sequence[ScenarioRecency]
) -> Optional[str]:
    """Return the first prior scenario text copied verbatim into ``scenario_content``.

    A prior scenario counts as echoed when its whole content, or any of its
    sentences, appears in the new passage. Either must have at least
    ``MIN_ECHO_SENTENCE_WORDS`` words.
    """
    for entry in history:
        prior = entry.scenario.scenario_content.strip()
        if not prior:
            continue
        if len(prior.split()) >= MIN_ECHO_SENTENCE_WORDS and prior in scenario_content:
            return prior
        for sentence in _split_sentences(prior):
            if len(sentence.split()) >= MIN_ECHO_SENTENCE_WORDS and sentence in scenario_content:
                return sentence
    return None


# ============================================================================
# Scenario Generator
# ============================================================================


class ScenarioGenerator:
    """Generate adaptive reading scenarios from learner history.

    Holds only configuration and the default client; every ``generate`` call
    is independent.
    """

    def __init__(
        self,
        llm_client: Optional[StructuredGenerationClient] = None,
        clock: Callable[[], int] = now_ms,
    ):
        """Initialize scenario generator.

        Args:
            llm_client: Structured generation client (default: ``LLMClient`` built on first use)
            clock: Returns the current time in epoch ms (default: wall clock)
        """
        self.llm_client = llm_client
        self.clock = clock

    def _get_llm_client(self) -> StructuredGenerationClient:
        if self.llm_client is None:
            self.llm_client = LLMClient()
        return self.llm_client

    async def generate(
        self,
        scenario_input: Union[GenerateScenarioInput, Dict[str, Any]],
        on_finish: Optional[Callable[[GenerateScenarioOutput], None]] = None,
        on_error: Optional[Callable[[ScenarioGenerationError], None]] = None,
    ) -> ScenarioResult:
        """Generate a new scenario.

        Args:
            scenario_input: Input model, or a dict with camelCase or snake_case keys
            on_finish: Called once with the output on success; may be sync or async
            on_error: Called once with the ``ScenarioGenerationError`` on failure;
                may be sync or async

        Returns:
            ScenarioResult with either ``output`` or ``error`` set
        """
        result = await self._run(scenario_input)

        # Outside the guarded region: a raising callback propagates to the caller
        callback, value = (on_finish, result.output) if result.ok else (on_error, result.error)
        if callback is not None:
            returned = callback(value)
            if inspect.isawaitable(returned):
                await returned

        return result

    async def _run(
        self, scenario_input: Union[GenerateScenarioInput, Dict[str, Any]]
    ) -> ScenarioResult:
        try:
            validated = GenerateScenarioInput.model_validate(scenario_input)
        except ValidationError as e:
            logger.warning(f"Rejected scenario input: {e.error_count()} validation error(s)")
            return ScenarioResult.failure(
                FailureKind.INVALID_INPUT, f"Invalid scenario input: {e}", e
            )

        try:
            with generation_stage_logger(
                "scenario_generation",
                language=validated.language,
                level=validated.current_level.value,
                history_size=len(validated.user_history),
            ):
                output = await self._generate(validated)
        except Exception as e:
            return ScenarioResult.failure(
                FailureKind.GENERATION_FAILED, f"Scenario generation failed: {e}", e
            )

        return ScenarioResult.success(output)

    async def _generate(self, scenario_input: GenerateScenarioInput) -> GenerateScenarioOutput:
        history = compute_recency(scenario_input.user_history, self.clock())
        prompt = build_scenario_prompt(scenario_input, history)

        response = await self._get_llm_client().generate(prompt, GenerateScenarioOutput)

        output = GenerateScenarioOutput.model_validate(response)

        echoed = find_echoed_text(output.scenario_content, history)
        if echoed is not None:
            raise ScenarioEchoError(
                f"Generated scenario repeats prior scenario text: {echoed[:80]!r}"
            )

        logger.info(
            f"Generated scenario with {len(output.questions)} questions "
            f"({len(output.scenario_content)} chars)"
        )
        return output


async def generate_scenario(
    scenario_input: Union[GenerateScenarioInput, Dict[str, Any]],
    on_finish: Optional[Callable[[GenerateScenarioOutput], None]] = None,
    on_error: Optional[Callable[[ScenarioGenerationError], None]] = None,
    llm_client: Optional[StructuredGenerationClient] = None,
) -> ScenarioResult:
    """Generate a scenario with a one-off ``ScenarioGenerator``."""
    return await ScenarioGenerator(llm_client=llm_client).generate(
        scenario_input, on_finish=on_finish, on_error=on_error
    )
