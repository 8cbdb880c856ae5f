"""
Pydantic schemas for financing simulation requests and responses.
Business limits (minimum down payment, term range) are enforced by the engine so they stay configurable.
"""
from datetime import datetime
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from simulafin.core.utils import format_brl, round_money
from simulafin.financiamento.engine import SacInstallment, SacResult


class SimulationRequest(BaseModel):
    """Financing simulation request payload."""
    property_value: Union[float, str] = Field(..., description="Property value, number or BRL string (e.g. 'R$ 500.000')")
    down_payment_percentage: float = Field(20, description="Down payment as a percentage of the property value")
    term_years: int = Field(30, description="Financing term in years")

    @field_validator('property_value')
    @classmethod
    def strip_property_value(cls, v: Union[float, str]) -> Union[float, str]:
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError('Property value is required')
        return v

class AmortizationInstallment(BaseModel):
    """Represents a single row in the amortization schedule."""
    month: int = Field(..., ge=1, description="Month number")
    installment: float = Field(..., description="Installment value")
    interest: float = Field(..., ge=0, description="Interest amount")
    principal: float = Field(..., ge=0, description="Principal amortization")
    balance: float = Field(..., ge=0, description="Remaining balance")

    @classmethod
    def from_row(cls, row: SacInstallment) -> "AmortizationInstallment":
        return cls(
            month=row.month,
            installment=round_money(row.installment),
            interest=round_money(row.interest),
            principal=round_money(row.principal),
            balance=round_money(row.balance),
        )

class SimulationResponse(BaseModel):
    """Simulation result payload. Values are rounded to cents for presentation only."""
    simulation_id: Optional[str] = Field(None, description="Persisted simulation ID")
    saved: bool = Field(..., description="Whether the simulation was stored in the history")
    property_value: float
    property_value_display: str
    down_payment_percentage: float
    term_years: int
    total_months: int
    annual_rate: float
    down_payment: float
    financed_amount: float
    monthly_amortization: float
    monthly_payment: float = Field(..., description="First (largest) monthly installment")
    last_monthly_payment: float
    total_interest: float
    total_amount: float
    created_at: Optional[datetime] = None
    table: Optional[List[AmortizationInstallment]] = Field(None, description="Full amortization schedule")

    @classmethod
    def from_result(
        cls,
        result: SacResult,
        simulation_id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        include_table: bool = False
    ) -> "SimulationResponse":
        return cls(
            simulation_id=simulation_id,
            saved=simulation_id is not None,
            property_value=round_money(result.property_value),
            property_value_display=format_brl(result.property_value),
            down_payment_percentage=result.down_payment_percentage,
            term_years=result.term_years,
            total_months=result.total_months,
            annual_rate=result.annual_rate,
            down_payment=round_money(result.down_payment),
            financed_amount=round_money(result.financed_amount),
            monthly_amortization=round_money(result.monthly_amortization),
            monthly_payment=round_money(result.first_monthly_payment),
            last_monthly_payment=round_money(result.last_monthly_payment),
            total_interest=round_money(result.total_interest),
            total_amount=round_money(result.total_amount),
            created_at=created_at,
            table=[AmortizationInstallment.from_row(row) for row in result.schedule()] if include_table else None,
        )

class SimulationRecordResponse(BaseModel):
    """Stored simulation as returned in the user's history."""
    id: str
    user_id: str
    user_email: str
    property_value: float
    down_payment: float
    down_payment_percentage: float
    financed_amount: float
    monthly_payment: float
    total_amount: float
    total_interest: float
    term_years: int
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_serializer(
        'property_value', 'down_payment', 'financed_amount',
        'monthly_payment', 'total_amount', 'total_interest'
    )
    def serialize_money(self, value: float) -> float:
        return round_money(value)
