"""
Administrative review workflow.

Authorization gate, submission listing and status transitions. Listings are
snapshots: each iteration re-reads the store, and concurrent status updates
are last-write-wins (no version token).
"""
from typing import Dict, Iterable, Iterator, Optional

from sqlalchemy.orm import Session

from simulafin.auth.models import User
from simulafin.auth.schemas import Actor
from simulafin.core.config import settings
from simulafin.core.exceptions import InvalidTransitionError, NotFoundError, UnauthorizedError
from simulafin.core.logger import logger, audit_log
from simulafin.core.utils import format_brl
from simulafin.propostas.models import (
    FinancingSubmission,
    SubmissionStatus,
    can_transition,
    parse_status,
)
from simulafin.propostas.repository import SubmissionRepository

ALL_STATUSES = "all"


def check_is_admin(db: Session, user_id: Optional[str]) -> bool:
    """
    Looks up the administrator flag of a user.
    Fails closed: any lookup error or missing user means not an admin.
    """
    if not user_id:
        return False

    try:
        user = db.query(User).filter(User.id == user_id).first()
        return bool(user and user.is_admin)
    except Exception as e:
        logger.error(f"Error checking admin flag for user {user_id}: {str(e)}")
        return False


def matches_search(submission: FinancingSubmission, term: str) -> bool:
    """Case-insensitive substring match over signer name, email, CPF and property value."""
    term = term.lower()
    haystack = (
        submission.user_name,
        submission.user_email,
        submission.user_cpf,
        format_brl(submission.property_value),
    )
    return any(term in (field or "").lower() for field in haystack)


class SubmissionListing:
    """
    Lazy, finite and restartable view over the submissions.

    Nothing is read until iteration starts and every new iteration re-reads
    the repository, so two passes with no writes in between yield the same
    elements in the same order.
    """

    def __init__(
        self,
        repo: SubmissionRepository,
        search_term: Optional[str] = None,
        status: Optional[SubmissionStatus] = None
    ):
        self.repo = repo
        self.search_term = (search_term or "").strip()
        self.status = status

    def __iter__(self) -> Iterator[FinancingSubmission]:
        for submission in self.repo.select():
            if self.search_term and not matches_search(submission, self.search_term):
                continue
            if self.status is not None and submission.status != self.status:
                continue
            yield submission


def list_submissions(
    repo: SubmissionRepository,
    search_term: Optional[str] = None,
    status: Optional[str] = None
) -> SubmissionListing:
    """
    Lists submissions newest first.
    `status` of None or 'all' disables the status filter; unknown values raise InvalidStatusError.
    """
    status_filter = None
    if status is not None and status.strip().lower() != ALL_STATUSES:
        status_filter = parse_status(status)
    return SubmissionListing(repo, search_term=search_term, status=status_filter)


def status_counts(submissions: Iterable[FinancingSubmission]) -> Dict[str, int]:
    counts = {status.value: 0 for status in SubmissionStatus}
    total = 0
    for submission in submissions:
        counts[submission.status.value] += 1
        total += 1
    return {"total": total, **counts}


def update_status(
    repo: SubmissionRepository,
    submission_id: str,
    new_status: str,
    actor: Actor,
    correlation_id: Optional[str] = None
) -> FinancingSubmission:
    """
    Moves a submission to a new review status.

    Only administrators may call it; the status must belong to the closed set.
    By default any status may be set at any time. With
    STRICT_STATUS_TRANSITIONS enabled only forward moves are accepted.
    Only the status field is written.
    """
    if not actor.is_admin:
        logger.warning(f"Status update denied for non-admin user {actor.user_id}")
        raise UnauthorizedError(user_id=actor.user_id)

    status = parse_status(new_status)

    submission = repo.get(submission_id)
    if submission is None:
        raise NotFoundError("Submission", submission_id)

    previous = submission.status
    if settings.STRICT_STATUS_TRANSITIONS and previous != status and not can_transition(previous, status):
        raise InvalidTransitionError(previous.value, status.value)

    updated = repo.update(submission_id, {"status": status})
    if updated is None:
        # Deleted between read and write
        raise NotFoundError("Submission", submission_id)

    audit_log(
        action="submission_status_updated",
        user=actor.user_id,
        resource=f"submission_id={submission_id}",
        details={
            "correlation_id": correlation_id,
            "from": previous.value,
            "to": status.value
        }
    )
    logger.info(f"Submission {submission_id} status: {previous.value} -> {status.value}")
    return updated
