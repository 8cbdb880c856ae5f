"""
Data model for signed financing proposals and their review status.
Status is the only field that changes after creation, and only through the admin workflow.
"""
from sqlalchemy import Integer, Float, String, DateTime, Enum, Text
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from uuid import uuid4
import enum
from typing import Any, Dict, FrozenSet, List
from simulafin.core.database import Base
from simulafin.core.exceptions import InvalidStatusError


def get_enum_values(enum_cls: Any) -> List[str]:
    """Helper to get values from an Enum class for SQLAlchemy."""
    return [e.value for e in enum_cls]


class SubmissionStatus(str, enum.Enum):
    """Review states of a proposal. APPROVED and REJECTED are terminal."""
    PENDING = "pending"
    REVIEW = "review"
    APPROVED = "approved"
    REJECTED = "rejected"


TERMINAL_STATUSES: FrozenSet[SubmissionStatus] = frozenset({SubmissionStatus.APPROVED, SubmissionStatus.REJECTED})

# Forward-only moves; REVIEW is optional
ALLOWED_TRANSITIONS: Dict[SubmissionStatus, FrozenSet[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset({SubmissionStatus.REVIEW, SubmissionStatus.APPROVED, SubmissionStatus.REJECTED}),
    SubmissionStatus.REVIEW: frozenset({SubmissionStatus.APPROVED, SubmissionStatus.REJECTED}),
}


def parse_status(value: Any) -> SubmissionStatus:
    """Maps raw input onto the closed status set. Unknown values raise InvalidStatusError."""
    if isinstance(value, SubmissionStatus):
        return value
    try:
        return SubmissionStatus(str(value).strip().lower())
    except ValueError:
        raise InvalidStatusError(value)


def can_transition(current: SubmissionStatus, new: SubmissionStatus) -> bool:
    if current in TERMINAL_STATUSES:
        return False
    return new in ALLOWED_TRANSITIONS[current]


class FinancingSubmission(Base):
    """Entity representing a signed proposal submitted for administrative review."""

    __tablename__ = "financing_submissions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_email: Mapped[str] = mapped_column(String(100), nullable=False)
    user_name: Mapped[str] = mapped_column(String(150), nullable=False)
    user_cpf: Mapped[str] = mapped_column(String(11), nullable=False, index=True)
    property_value: Mapped[float] = mapped_column(Float, nullable=False)
    down_payment: Mapped[float] = mapped_column(Float, nullable=False)
    down_payment_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    financed_amount: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_payment: Mapped[float] = mapped_column(Float, nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    total_interest: Mapped[float] = mapped_column(Float, nullable=False)
    term_years: Mapped[int] = mapped_column(Integer, nullable=False)
    signature_data: Mapped[str] = mapped_column(Text, nullable=False, default="")
    status: Mapped[SubmissionStatus] = mapped_column(
        "status",
        Enum(SubmissionStatus, values_callable=get_enum_values),
        nullable=False,
        default=SubmissionStatus.PENDING,
        index=True
    )
    signed_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )
    correlation_id: Mapped[str] = mapped_column(String(100), nullable=True)

    def __repr__(self):
        return f"<FinancingSubmission(id={self.id}, user_id={self.user_id}, status={self.status})>"
