# src/mistake_tracker/api/v1/endpoints/votes.py
"""Vote-related endpoints for the Mistake Tracker API."""

from fastapi import APIRouter

from mistake_tracker.core.errors import MistakeTrackerError
from mistake_tracker.models import MistakeReport
from mistake_tracker.schemas.vote import MyVoteResponse, VoteCreate, VoteResult
from mistake_tracker.services import votes as vote_service
from mistake_tracker.services.events import VOTE_UPDATE

from ..dependencies import CurrentUserDep, PrincipalDep, SessionDep, to_http_error
from .reports import BroadcasterDep

router = APIRouter(prefix="/votes", tags=["votes"])


def _result(report: MistakeReport, user_vote: str) -> VoteResult:
    return VoteResult(
        report_id=report.id,
        upvotes=report.upvotes,
        downvotes=report.downvotes,
        total_votes=report.total_votes,
        vote_score=report.vote_score,
        user_vote=user_vote,  # type: ignore[arg-type]
    )


@router.post("/{report_id}", response_model=VoteResult)
async def cast_vote(
    report_id: int,
    payload: VoteCreate,
    principal: PrincipalDep,
    db: SessionDep,
    broadcaster: BroadcasterDep,
) -> VoteResult:
    """Cast or replace the caller's vote on a report."""
    try:
        report = vote_service.add_vote(db, report_id, principal, payload.vote)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err

    result = _result(report, payload.vote)
    broadcaster.publish(VOTE_UPDATE, result.model_dump(exclude={"user_vote"}))
    return result


@router.delete("/{report_id}", response_model=VoteResult)
async def withdraw_vote(
    report_id: int,
    principal: PrincipalDep,
    db: SessionDep,
    broadcaster: BroadcasterDep,
) -> VoteResult:
    """Remove the caller's vote; succeeds even if they had not voted."""
    try:
        report = vote_service.remove_vote(db, report_id, principal)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err

    result = _result(report, vote_service.NO_VOTE)
    broadcaster.publish(VOTE_UPDATE, result.model_dump(exclude={"user_vote"}))
    return result


@router.get("/{report_id}/my-vote", response_model=MyVoteResponse)
async def my_vote(report_id: int, current_user: CurrentUserDep, db: SessionDep) -> MyVoteResponse:
    try:
        vote = vote_service.get_user_vote(db, report_id, current_user.id)
    except MistakeTrackerError as err:
        raise to_http_error(err) from err
    return MyVoteResponse(report_id=report_id, vote=vote)  # type: ignore[arg-type]
