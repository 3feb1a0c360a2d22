"""Create the schema and seed the default AI tools.

Run with ``python -m mistake_tracker.init_db``. Seeding skips tools that
already exist, so the script can be re-run safely.
"""

import logging

from sqlalchemy.orm import Session

from mistake_tracker.db.session import SessionLocal, create_tables
from mistake_tracker.models import AITool
from mistake_tracker.models.enums import Capability, ToolCategory
from mistake_tracker.repositories.tool_repo import ToolRepository
from mistake_tracker.utils.slug import slugify

logger = logging.getLogger(__name__)

_TEXT = [
    Capability.text_generation.value,
    Capability.question_answering.value,
    Capability.summarization.value,
]

DEFAULT_TOOLS: list[dict[str, object]] = [
    {
        "name": "GPT-4",
        "provider": "OpenAI",
        "description": "OpenAI's flagship large language model.",
        "category": ToolCategory.multimodal.value,
        "capabilities": [*_TEXT, Capability.code_generation.value],
        "website": "https://openai.com",
    },
    {
        "name": "Claude-3",
        "provider": "Anthropic",
        "description": "Anthropic's Claude 3 family of assistant models.",
        "category": ToolCategory.multimodal.value,
        "capabilities": [*_TEXT, Capability.code_generation.value],
        "website": "https://www.anthropic.com",
    },
    {
        "name": "Gemini Pro",
        "provider": "Google",
        "description": "Google's Gemini Pro multimodal model.",
        "category": ToolCategory.multimodal.value,
        "capabilities": [*_TEXT, Capability.translation.value],
        "website": "https://deepmind.google",
    },
    {
        "name": "Llama-2",
        "provider": "Meta",
        "description": "Meta's openly available Llama 2 language model.",
        "category": ToolCategory.language_model.value,
        "capabilities": list(_TEXT),
        "website": "https://ai.meta.com",
    },
    {
        "name": "PaLM-2",
        "provider": "Google",
        "description": "Google's PaLM 2 language model.",
        "category": ToolCategory.language_model.value,
        "capabilities": [*_TEXT, Capability.translation.value],
        "website": "https://ai.google",
    },
    {
        "name": "Other",
        "provider": "Various",
        "description": "Catch-all for AI tools without their own entry.",
        "category": ToolCategory.other.value,
        "capabilities": [Capability.other.value],
        "website": "",
    },
]


def seed_tools(db: Session) -> int:
    """Insert any missing default tools; returns how many were added."""
    repo = ToolRepository(db)
    added = 0
    for entry in DEFAULT_TOOLS:
        name = str(entry["name"])
        if repo.find_clash(name, slugify(name)) is not None:
            continue
        db.add(AITool(**entry))
        added += 1
    db.commit()
    return added


def init_db() -> None:
    """Initialize the database by creating all tables and seeding tools."""
    create_tables()
    with SessionLocal() as db:
        added = seed_tools(db)
    logger.info("Database initialized; seeded %s AI tools", added)


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
    init_db()
