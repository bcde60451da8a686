"""Recency metrics for learner history.

Annotates each historical scenario with the days elapsed since it was seen and
each answered question with the days elapsed since the response was submitted.
Timestamps in the future yield negative day counts; they are reported as-is.
"""

import logging
from datetime import UTC, datetime
from typing import List, Optional, Sequence

from adaptive_scenarios.constants import MS_PER_DAY
from adaptive_scenarios.models.schema import QuestionRecency, ScenarioRecency, UserScenario

logger = logging.getLogger(__name__)


def now_ms() -> int:
    """Current time as integer epoch milliseconds."""
    return int(datetime.now(UTC).timestamp() * 1000)


def days_between(earlier_ms: int, now: int) -> float:
    """Fractional days from ``earlier_ms`` to ``now`` (both epoch ms)."""
    return (now - earlier_ms) / MS_PER_DAY


def compute_recency(
    history: Sequence[UserScenario], now: Optional[int] = None
) -> List[ScenarioRecency]:
    """Annotate history with days-since-seen and days-since-response.

    History is stable-sorted by ``seen_at`` so the last element is always the
    most recent scenario; already chronological input keeps its order.

    Args:
        history: Learner's previous scenarios
        now: Reference instant in epoch ms (default: current time)

    Returns:
        Recency-annotated scenarios, oldest first
    """
    if now is None:
        now = now_ms()

    ordered = sorted(history, key=lambda s: s.seen_at)
    if list(history) != ordered:
        logger.warning(
            f"User history was not in chronological order; reordered {len(ordered)} scenarios by seenAt"
        )

    annotated = []
    for scenario in ordered:
        questions = [
            QuestionRecency(
                question=question,
                days_since_response=days_between(question.user_response.submitted_at, now),
            )
            for question in scenario.questions
        ]
        annotated.append(
            ScenarioRecency(
                scenario=scenario,
                days_since_seen=days_between(scenario.seen_at, now),
                questions=questions,
            )
        )

    return annotated
