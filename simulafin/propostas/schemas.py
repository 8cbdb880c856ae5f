"""
Pydantic schemas for proposal submission and the exported proposal document.
"""
from datetime import date, datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from simulafin.core.utils import only_digits, round_money
from simulafin.propostas.models import SubmissionStatus


class SubmissionCreateRequest(BaseModel):
    """Accepted proposal: the simulation inputs plus the signer's identity and signature."""
    property_value: Union[float, str] = Field(..., description="Property value, number or BRL string")
    down_payment_percentage: float = Field(20, description="Down payment (%)")
    term_years: int = Field(30, description="Financing term in years")
    name: str = Field(..., max_length=150, description="Signer full name")
    cpf: str = Field(..., description="Signer CPF, formatted or digits only")
    signature_data: str = Field(..., min_length=1, description="Signature image as a data URL")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError('Signer name is required')
        return v

    @field_validator('cpf')
    @classmethod
    def validate_cpf(cls, v: str) -> str:
        cpf = only_digits(v)
        if len(cpf) != 11:
            raise ValueError('CPF must have 11 digits')
        return cpf


class StatusUpdateRequest(BaseModel):
    """New status for a submission. Checked against the closed status set by the workflow."""
    status: str = Field(..., description="pending, review, approved or rejected")


class SubmissionResponse(BaseModel):
    id: str
    user_id: str
    user_email: str
    user_name: str
    user_cpf: str
    property_value: float
    down_payment: float
    down_payment_percentage: float
    financed_amount: float
    monthly_payment: float
    total_amount: float
    total_interest: float
    term_years: int
    status: SubmissionStatus
    signed_at: datetime
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer(
        'property_value', 'down_payment', 'financed_amount',
        'monthly_payment', 'total_amount', 'total_interest'
    )
    def serialize_money(self, value: float) -> float:
        """Money is presented in cents, like the simulation responses."""
        return round_money(value)


class StatusSummary(BaseModel):
    total: int
    pending: int
    review: int
    approved: int
    rejected: int


class DocumentClient(BaseModel):
    name: str
    cpf: str
    email: str
    proposal_date: str


class DocumentFinancing(BaseModel):
    property_value: str
    down_payment_percentage: float
    down_payment: str
    financed_amount: str
    term_years: int
    total_months: int
    interest_rate: str
    amortization_system: str
    first_installment: str
    last_installment: str
    total_interest: str
    total_amount: str


class DocumentSignature(BaseModel):
    image: str
    signed_by: str
    cpf: str
    signed_at: str


class ProposalDocument(BaseModel):
    """Everything a renderer needs to produce the downloadable proposal."""
    submission_id: str
    filename: str
    title: str
    subtitle: str
    status: SubmissionStatus
    valid_until: date
    client: DocumentClient
    financing: DocumentFinancing
    conditions: List[str]
    signature: DocumentSignature
    footer: List[str]
    generated_at: Optional[str] = None
