"""Enumerations shared by the ORM models and the API schemas."""

from enum import Enum


class AIToolName(str, Enum):
    """AI tools a mistake report can be filed against."""

    gpt_4 = "GPT-4"
    claude_3 = "Claude-3"
    gemini_pro = "Gemini Pro"
    llama_2 = "Llama-2"
    palm_2 = "PaLM-2"
    other = "Other"


class MistakeCategory(str, Enum):
    factual = "factual"
    logical = "logical"
    bias = "bias"
    context = "context"
    other = "other"


class Severity(str, Enum):
    low = "low"
    medium = "medium"
    high = "high"


class ReportStatus(str, Enum):
    """Moderation lifecycle of a mistake report."""

    pending = "pending"
    investigating = "investigating"
    verified = "verified"
    rejected = "rejected"


class VoteDirection(str, Enum):
    upvote = "upvote"
    downvote = "downvote"


class UserRole(str, Enum):
    user = "user"
    moderator = "moderator"
    admin = "admin"


class ToolCategory(str, Enum):
    language_model = "language-model"
    image_generation = "image-generation"
    code_generation = "code-generation"
    multimodal = "multimodal"
    other = "other"


class ToolStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    maintenance = "maintenance"
    deprecated = "deprecated"


class Capability(str, Enum):
    text_generation = "text-generation"
    image_generation = "image-generation"
    code_generation = "code-generation"
    translation = "translation"
    summarization = "summarization"
    question_answering = "question-answering"
    sentiment_analysis = "sentiment-analysis"
    other = "other"


def check_in(column: str, enum_cls: type[Enum]) -> str:
    """Render a SQL ``IN`` check for the values of ``enum_cls``."""
    values = ", ".join(f"'{member.value}'" for member in enum_cls)
    return f"{column} IN ({values})"
