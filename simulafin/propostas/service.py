"""
Business logic for creating and reading signed financing proposals.
"""
from datetime import datetime, timezone
from typing import List, Optional
from uuid import uuid4

from simulafin.auth.schemas import Actor
from simulafin.core.exceptions import NotAuthenticatedError, NotFoundError
from simulafin.core.logger import logger, audit_log
from simulafin.core.utils import mask_cpf
from simulafin.financiamento.engine import compute_sac
from simulafin.propostas.models import FinancingSubmission, SubmissionStatus
from simulafin.propostas.repository import SubmissionRepository
from simulafin.propostas.schemas import SubmissionCreateRequest


def create_submission(
    repo: SubmissionRepository,
    actor: Optional[Actor],
    data: SubmissionCreateRequest,
    correlation_id: str
) -> FinancingSubmission:
    """
    Creates a signed proposal in PENDING status.

    Financial figures are recomputed from the inputs instead of trusting
    client-side totals. The write is attempted once; a PersistenceError
    reaches the caller untouched and nothing is stored.
    """
    if actor is None:
        raise NotAuthenticatedError()

    result = compute_sac(data.property_value, data.down_payment_percentage, data.term_years)
    now = datetime.now(timezone.utc)

    submission = FinancingSubmission(
        id=str(uuid4()),
        user_id=actor.user_id,
        user_email=actor.email,
        user_name=data.name,
        user_cpf=data.cpf,
        property_value=result.property_value,
        down_payment=result.down_payment,
        down_payment_percentage=result.down_payment_percentage,
        financed_amount=result.financed_amount,
        monthly_payment=result.first_monthly_payment,
        total_amount=result.total_amount,
        total_interest=result.total_interest,
        term_years=result.term_years,
        signature_data=data.signature_data,
        status=SubmissionStatus.PENDING,
        signed_at=now,
        created_at=now,
        updated_at=now,
        correlation_id=correlation_id
    )

    submission = repo.insert(submission)

    audit_log(
        action="submission_created",
        user=actor.user_id,
        resource=f"submission_id={submission.id}",
        details={
            "correlation_id": correlation_id,
            "cpf": mask_cpf(data.cpf),
            "financed_amount": result.financed_amount
        }
    )
    logger.info(f"Submission created: id={submission.id}, user={actor.user_id}")
    return submission


def list_user_submissions(repo: SubmissionRepository, actor: Actor) -> List[FinancingSubmission]:
    return repo.select(user_id=actor.user_id)


def get_visible_submission(repo: SubmissionRepository, submission_id: str, actor: Actor) -> FinancingSubmission:
    """Fetches a submission the actor owns, or any submission for admins."""
    submission = repo.get(submission_id)
    if submission is None or (submission.user_id != actor.user_id and not actor.is_admin):
        raise NotFoundError("Submission", submission_id)
    return submission
