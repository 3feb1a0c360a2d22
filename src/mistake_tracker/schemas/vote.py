# src/mistake_tracker/schemas/vote.py
"""Vote-related Pydantic schemas."""

from typing import Literal

from pydantic import BaseModel, Field


class VoteCreate(BaseModel):
    """Schema for casting a vote on a report."""

    vote: Literal["upvote", "downvote"] = Field(..., description="upvote or downvote")


class VoteResult(BaseModel):
    """Tallies returned after a vote change."""

    report_id: int
    upvotes: int
    downvotes: int
    total_votes: int
    vote_score: int
    user_vote: Literal["upvote", "downvote", "none"]


class MyVoteResponse(BaseModel):
    report_id: int
    vote: Literal["upvote", "downvote", "none"]
