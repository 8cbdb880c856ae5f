"""
Persistence contract for proposal submissions and its SQLAlchemy implementation.

The workflow only talks to SubmissionRepository, so tests can swap in an
in-memory store. Every call is a single unit of work: it either commits fully
or rolls back and raises PersistenceError. Nothing is retried.
"""
from typing import Any, Dict, List, Optional, Protocol

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from simulafin.core.database import get_db
from simulafin.core.exceptions import InvalidInputError, PersistenceError
from simulafin.core.logger import logger
from simulafin.propostas.models import FinancingSubmission

# Everything else is frozen once the proposal is signed
MUTABLE_FIELDS = frozenset({"status"})


class SubmissionRepository(Protocol):
    def insert(self, submission: FinancingSubmission) -> FinancingSubmission:
        ...

    def select(self, user_id: Optional[str] = None) -> List[FinancingSubmission]:
        """Returns submissions newest first, optionally restricted to one owner."""
        ...

    def get(self, submission_id: str) -> Optional[FinancingSubmission]:
        ...

    def update(self, submission_id: str, patch: Dict[str, Any]) -> Optional[FinancingSubmission]:
        ...

    def delete(self, submission_id: str) -> bool:
        ...


def check_patch(patch: Dict[str, Any]) -> None:
    frozen = set(patch) - MUTABLE_FIELDS
    if frozen:
        raise InvalidInputError("Submission fields cannot be changed after signing", {"fields": sorted(frozen)})


class SqlSubmissionRepository:
    """SubmissionRepository backed by a SQLAlchemy session."""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, submission: FinancingSubmission) -> FinancingSubmission:
        try:
            self.db.add(submission)
            self.db.commit()
            self.db.refresh(submission)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving submission: {str(e)}")
            raise PersistenceError("Error saving submission") from e
        return submission

    def select(self, user_id: Optional[str] = None) -> List[FinancingSubmission]:
        try:
            query = self.db.query(FinancingSubmission)
            if user_id is not None:
                query = query.filter(FinancingSubmission.user_id == user_id)
            return query.order_by(FinancingSubmission.created_at.desc(), FinancingSubmission.id).all()
        except (SQLAlchemyError, LookupError) as e:
            # LookupError: a persisted status outside SubmissionStatus
            logger.error(f"Error loading submissions: {str(e)}")
            raise PersistenceError("Error loading submissions") from e

    def get(self, submission_id: str) -> Optional[FinancingSubmission]:
        try:
            return self.db.query(FinancingSubmission).filter(
                FinancingSubmission.id == submission_id
            ).first()
        except (SQLAlchemyError, LookupError) as e:
            logger.error(f"Error loading submission {submission_id}: {str(e)}")
            raise PersistenceError("Error loading submission") from e

    def update(self, submission_id: str, patch: Dict[str, Any]) -> Optional[FinancingSubmission]:
        check_patch(patch)
        submission = self.get(submission_id)
        if submission is None:
            return None

        try:
            for field, value in patch.items():
                setattr(submission, field, value)
            self.db.commit()
            self.db.refresh(submission)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error updating submission {submission_id}: {str(e)}")
            raise PersistenceError("Error updating submission") from e
        return submission

    def delete(self, submission_id: str) -> bool:
        submission = self.get(submission_id)
        if submission is None:
            return False

        try:
            self.db.delete(submission)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error deleting submission {submission_id}: {str(e)}")
            raise PersistenceError("Error deleting submission") from e
        return True


def get_submission_repository(db: Session = Depends(get_db)) -> SqlSubmissionRepository:
    """FastAPI dependency that binds the repository to the request session."""
    return SqlSubmissionRepository(db)
