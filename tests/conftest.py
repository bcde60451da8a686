"""Shared fixtures: deterministic generation client and sample learner histories."""

import os

# No live tracing or network traffic from unit tests
os.environ.setdefault("LANGFUSE_ENABLED", "false")
os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "false")

import pytest  # noqa: E402

from adaptive_scenarios.constants import MS_PER_DAY  # noqa: E402
from adaptive_scenarios.utils.llm_client import StructuredGenerationClient  # noqa: E402

NOW_MS = 1_760_000_000_000

BEACH_SCENARIO = (
    "El verano pasado, María fue de vacaciones a la playa con su familia. "
    "Nadaron en el mar y tomaron el sol todos los días."
)


class FakeGenerationClient(StructuredGenerationClient):
    """Returns a canned payload validated against the requested model, or raises."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.prompts = []
        self.response_models = []

    async def generate(self, prompt, response_model):
        self.prompts.append(prompt)
        self.response_models.append(response_model)
        if self.error is not None:
            raise self.error
        return response_model.model_validate(self.payload)


def make_payload(num_questions=3, content=None):
    return {
        "scenarioContent": content
        or (
            "Cada sábado, Lucía visita el mercado de su barrio. "
            "Allí compra frutas frescas y habla con los vendedores."
        ),
        "questions": [
            {"questionText": f"¿Pregunta número {i + 1}?"} for i in range(num_questions)
        ],
    }


def days_ago(days):
    return int(NOW_MS - days * MS_PER_DAY)


@pytest.fixture
def now_ms():
    return NOW_MS


@pytest.fixture
def empty_history_input():
    return {
        "language": "Spanish",
        "currentLevel": "A2",
        "nativeLanguage": "English",
        "userHistory": [],
    }


@pytest.fixture
def beach_history_input():
    """Spanish B1 learner who saw a beach vacation scenario 7 days ago."""
    return {
        "language": "Spanish",
        "currentLevel": "B1",
        "nativeLanguage": "English",
        "userHistory": [
            {
                "scenarioContent": BEACH_SCENARIO,
                "questions": [
                    {
                        "questionText": "¿Adónde fue María de vacaciones?",
                        "userResponse": {
                            "responseContent": "María fue de vacaciones a la playa.",
                            "responseTimeSeconds": 8,
                            "targetLanguageTextShown": False,
                            "nativeLanguageTextShown": False,
                            "submittedAt": days_ago(7),
                        },
                    },
                    {
                        "questionText": "¿Qué actividades hicieron en la playa?",
                        "userResponse": {
                            "responseContent": "Nadaron en el mar y tomaron el sol.",
                            "responseTimeSeconds": 12.5,
                            "targetLanguageTextShown": True,
                            "nativeLanguageTextShown": False,
                            "submittedAt": days_ago(6.5),
                        },
                    },
                ],
                "seenAt": days_ago(7),
            }
        ],
    }


@pytest.fixture
def fake_client():
    return FakeGenerationClient(payload=make_payload())


@pytest.fixture
def payload_factory():
    return make_payload


@pytest.fixture
def client_factory():
    return FakeGenerationClient
