# mypy: ignore-errors
"""Tests for slug derivation."""

import pytest

from mistake_tracker.models import AITool
from mistake_tracker.utils.slug import slugify


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("GPT-4 Turbo!!", "gpt-4-turbo"),
        ("Gemini Pro", "gemini-pro"),
        ("  --Claude 3.5 Sonnet--  ", "claude-3-5-sonnet"),
        ("PaLM-2", "palm-2"),
    ],
)
def test_slugify(name, expected) -> None:
    assert slugify(name) == expected


def test_slug_follows_name_assignment() -> None:
    tool = AITool(name="Llama 2 Chat", description="Chat tuned model.", provider="Meta")
    assert tool.slug == "llama-2-chat"

    tool.name = "Llama 3!"
    assert tool.slug == "llama-3"
