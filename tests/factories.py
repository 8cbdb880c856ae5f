"""Shared test database, builders and an in-memory submission repository."""
import copy
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from simulafin.auth.models import User
from simulafin.core.security import get_password_hash
from simulafin.propostas.models import FinancingSubmission, SubmissionStatus
from simulafin.propostas.repository import check_patch

# Setup In-Memory Database for Testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def create_user(email: str, password: str = "password123", is_admin: bool = False, name: str = "Test User") -> User:
    db = TestingSessionLocal()
    user = User(
        name=name,
        email=email,
        hashed_password=get_password_hash(password),
        is_admin=is_admin
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    db.expunge(user)
    db.close()
    return user


def login(client: TestClient, email: str, password: str = "password123") -> Dict[str, str]:
    """Logs in and returns Authorization headers. The client cookie jar is cleared so each call picks its own user."""
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200
    client.cookies.clear()
    return {"Authorization": f"Bearer {response.json()['access_token']}"}


class InMemorySubmissionRepository:
    """SubmissionRepository kept in a dict, for workflow tests without a database."""

    def __init__(self, submissions: Optional[List[FinancingSubmission]] = None):
        self.rows: Dict[str, FinancingSubmission] = {}
        self.select_calls = 0
        for submission in submissions or []:
            self.insert(submission)

    def insert(self, submission: FinancingSubmission) -> FinancingSubmission:
        self.rows[submission.id] = submission
        return submission

    def select(self, user_id: Optional[str] = None) -> List[FinancingSubmission]:
        self.select_calls += 1
        rows = [s for s in self.rows.values() if user_id is None or s.user_id == user_id]
        return sorted(rows, key=lambda s: (-s.created_at.timestamp(), s.id))

    def get(self, submission_id: str) -> Optional[FinancingSubmission]:
        return self.rows.get(submission_id)

    def update(self, submission_id: str, patch: Dict[str, Any]) -> Optional[FinancingSubmission]:
        check_patch(patch)
        submission = self.rows.get(submission_id)
        if submission is None:
            return None
        for field, value in patch.items():
            setattr(submission, field, value)
        return submission

    def delete(self, submission_id: str) -> bool:
        return self.rows.pop(submission_id, None) is not None


BASE_TIME = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_submission(
    name: str = "João Pereira",
    email: str = "joao@simulafin.com.br",
    cpf: str = "12345678901",
    property_value: float = 500000.0,
    status: SubmissionStatus = SubmissionStatus.PENDING,
    user_id: str = "user-1",
    minutes: int = 0
) -> FinancingSubmission:
    created_at = BASE_TIME + timedelta(minutes=minutes)
    return FinancingSubmission(
        id=str(uuid4()),
        user_id=user_id,
        user_email=email,
        user_name=name,
        user_cpf=cpf,
        property_value=property_value,
        down_payment=property_value * 0.2,
        down_payment_percentage=20.0,
        financed_amount=property_value * 0.8,
        monthly_payment=5111.11,
        total_amount=1122000.0,
        total_interest=722000.0,
        term_years=30,
        signature_data="data:image/png;base64,AAAA",
        status=status,
        signed_at=created_at,
        created_at=created_at,
        updated_at=created_at,
    )


def snapshot(submission: FinancingSubmission) -> Dict[str, Any]:
    """Column values of a submission, for before/after comparisons."""
    return copy.deepcopy({
        attr.key: getattr(submission, attr.key)
        for attr in FinancingSubmission.__mapper__.column_attrs
    })
