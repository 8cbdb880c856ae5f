"""
FastAPI Router for the administrative review panel.
"""
from typing import Dict, List, Optional
from uuid import uuid4

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from simulafin.admin.service import check_is_admin, list_submissions, status_counts, update_status
from simulafin.auth.dependencies import get_current_actor, get_current_user, require_admin
from simulafin.auth.models import User
from simulafin.auth.schemas import Actor
from simulafin.core.database import get_db
from simulafin.core.logger import get_logger_with_correlation
from simulafin.propostas.repository import SubmissionRepository, get_submission_repository
from simulafin.propostas.schemas import StatusSummary, StatusUpdateRequest, SubmissionResponse

router = APIRouter(tags=["Admin"])


@router.get("/check", response_model=Dict[str, bool])
def admin_check(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user)
) -> Dict[str, bool]:
    """Tells the frontend whether to show the admin panel."""
    return {"is_admin": check_is_admin(db, current_user.id)}


@router.get("/submissoes", response_model=List[SubmissionResponse])
def admin_list_submissions(
    search: Optional[str] = None,
    status: Optional[str] = None,
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(require_admin)
):
    """
    Lists all submissions, newest first.

    - **search**: substring of signer name, e-mail, CPF or property value
    - **status**: pending, review, approved, rejected or all
    """
    return list(list_submissions(repo, search_term=search, status=status))


@router.get("/submissoes/resumo", response_model=StatusSummary)
def admin_summary(
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(require_admin)
) -> StatusSummary:
    return StatusSummary(**status_counts(list_submissions(repo)))


@router.patch("/submissoes/{submission_id}/status", response_model=SubmissionResponse)
def admin_update_status(
    submission_id: str,
    data: StatusUpdateRequest,
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(get_current_actor),
    x_correlation_id: str = Header(default=None)
):
    """
    Sets the review status of a submission. Administrators only.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)
    logger.info(f"Status update requested: submission={submission_id}, status={data.status}")

    return update_status(repo, submission_id, data.status, actor, correlation_id)
