"""
Shared utilities for scenario generation.

- llm_client.py: Structured generation interface and Instructor-wrapped OpenAI client
- logging_config.py: Structured JSON logging for generation stages
"""

__all__ = [
    "llm_client",
    "logging_config",
]
