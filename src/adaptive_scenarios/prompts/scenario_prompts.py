"""Prompt sections for adaptive scenario generation.

Each section is rendered by its own function so presence and ordering can be
checked without calling the model. ``build_scenario_prompt`` joins them in the
order the model should read them:

1. Role framing
2. Task statement (level, native language)
3. Recency of the last scenario
4. Passage instructions
5. Question instructions
6. History transcript + analysis directives (or a balanced-coverage directive)
7. Cultural references
8. Output language
"""

from typing import List, Sequence

from adaptive_scenarios.models.schema import CEFRLevel, GenerateScenarioInput, ScenarioRecency


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _seconds(value: float) -> str:
    return f"{value:g}"


def build_role_section(language: str) -> str:
    return f"You are a language learning content creator specializing in {language}."


def build_task_section(language: str, level: CEFRLevel, native_language: str) -> str:
    return (
        f"Your task is to create a {language} language learning scenario for a learner "
        f"at CEFR level {level.value} ({level.label}). "
        f"The learner's native language is {native_language}."
    )


def build_recency_section(history: Sequence[ScenarioRecency]) -> str:
    """State the gap since the most recent scenario, or that this is the first one."""
    if not history:
        return "This is the learner's first scenario."
    return f"Time since last scenario: {history[-1].days_since_seen:.2f} days."


def build_passage_instructions(language: str, level: CEFRLevel) -> str:
    return f"""Generate a continuous piece of text in {language} appropriate for CEFR level {level.value}. This should be a monologue or a prose passage (narrative), not a dialogue. The content should be 10-15 sentences long and include vocabulary and grammar structures typical for this level. Ensure the text has a clear theme, context, and flow.

Topics can include personal experiences, descriptions of events or places, explanations of concepts, or narratives. Ensure the content is engaging and relevant to learners at the {level.value} level."""


def build_question_instructions(language: str, level: CEFRLevel) -> str:
    return (
        f"After the scenario, generate 2-4 questions in {language} that test "
        f"comprehension and language skills at level {level.value}."
    )


def build_history_transcript(history: Sequence[ScenarioRecency]) -> str:
    """Render every historical scenario with its questions and the learner's responses."""
    blocks: List[str] = []
    for index, entry in enumerate(history, start=1):
        lines = [
            f"Scenario {index} ({entry.days_since_seen:.2f} days ago):",
            f"Content: {entry.scenario.scenario_content}",
        ]
        for q_index, q in enumerate(entry.questions, start=1):
            response = q.question.user_response
            lines.extend(
                [
                    f"  Question {q_index}: {q.question.question_text}",
                    f"  User Response: {response.response_content}",
                    f"  Response time: {_seconds(response.response_time_seconds)} seconds",
                    f"  Target language text shown: {_flag(response.target_language_text_shown)}",
                    f"  Native language text shown: {_flag(response.native_language_text_shown)}",
                    f"  Time since response: {q.days_since_response:.2f} days",
                ]
            )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


HISTORY_ANALYSIS_DIRECTIVES = """Analyze these scenarios to determine:
1. The user's learning style (e.g., if they often need text shown, or if they respond quickly)
2. Patterns in response content that might indicate areas of strength or weakness
3. Topics or grammatical structures the user seems comfortable or uncomfortable with

Adjust the difficulty, focus, and style of the content and questions based on this analysis, the time since each scenario was presented, and the time since each response. Give more weight to recent scenarios and responses.

Do not repeat or copy any previous scenario text; the new scenario must be newly written."""


def build_history_section(history: Sequence[ScenarioRecency], level: CEFRLevel) -> str:
    """History transcript plus analysis directives, or a balanced-coverage directive."""
    if not history:
        return (
            "As there is no user history, create a balanced set of content and questions "
            f"covering various aspects of language competency for level {level.value}."
        )
    return (
        "Consider the following user history when creating the content and questions:\n\n"
        f"{build_history_transcript(history)}\n\n"
        f"{HISTORY_ANALYSIS_DIRECTIVES}"
    )


def build_cultural_section(language: str, level: CEFRLevel) -> str:
    return (
        f"Incorporate cultural references, idiomatic expressions, or cultural practices "
        f"relevant to {language}-speaking regions, ensuring these elements are appropriate "
        f"for the {level.value} level of proficiency."
    )


def build_closing_section(language: str) -> str:
    return f"Provide the scenario content followed by the questions, all in {language}."


def build_scenario_prompt(
    scenario_input: GenerateScenarioInput, history: Sequence[ScenarioRecency]
) -> str:
    """Build the full generation prompt.

    Args:
        scenario_input: Validated generation input
        history: Recency-annotated history, oldest first

    Returns:
        Prompt string with all sections separated by blank lines
    """
    language = scenario_input.language
    level = scenario_input.current_level

    sections = [
        build_role_section(language),
        build_task_section(language, level, scenario_input.native_language),
        build_recency_section(history),
        build_passage_instructions(language, level),
        build_question_instructions(language, level),
        build_history_section(history, level),
        build_cultural_section(language, level),
        build_closing_section(language),
    ]
    return "\n\n".join(sections)
