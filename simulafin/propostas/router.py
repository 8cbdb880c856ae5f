"""
FastAPI Router for signed proposal submissions.
"""
from typing import List
from uuid import uuid4

from fastapi import APIRouter, Depends, Header

from simulafin.auth.dependencies import get_current_actor
from simulafin.auth.schemas import Actor
from simulafin.core.logger import get_logger_with_correlation
from simulafin.propostas.document import build_proposal_document
from simulafin.propostas.repository import SubmissionRepository, get_submission_repository
from simulafin.propostas.schemas import ProposalDocument, SubmissionCreateRequest, SubmissionResponse
from simulafin.propostas.service import create_submission, list_user_submissions, get_visible_submission

router = APIRouter(tags=["Proposals"])


@router.post("", response_model=SubmissionResponse, status_code=201)
def submit_proposal(
    data: SubmissionCreateRequest,
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(get_current_actor),
    x_correlation_id: str = Header(default=None)
):
    """
    **Accept and sign a financing proposal**

    Recomputes the SAC simulation from the inputs, stores the signed proposal
    with status `pending` and returns it. The signer CPF must have 11 digits.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)
    logger.info(f"Submitting proposal for user {actor.user_id}")

    return create_submission(repo, actor, data, correlation_id)


@router.get("/minhas", response_model=List[SubmissionResponse])
def my_submissions(
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(get_current_actor)
):
    return list_user_submissions(repo, actor)


@router.get("/{submission_id}/documento", response_model=ProposalDocument)
def proposal_document(
    submission_id: str,
    repo: SubmissionRepository = Depends(get_submission_repository),
    actor: Actor = Depends(get_current_actor)
) -> ProposalDocument:
    """Proposal data for the document renderer. Available to the owner and to admins."""
    submission = get_visible_submission(repo, submission_id, actor)
    return build_proposal_document(submission)
