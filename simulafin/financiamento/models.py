"""
Data model for persisted financing simulations.
A simulation is written once and never updated; only its owner may delete it.
"""
from sqlalchemy import Integer, Float, String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from uuid import uuid4
from simulafin.core.database import Base


class Simulation(Base):
    """Entity representing one SAC simulation computed for a user."""

    __tablename__ = "simulations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid4()))
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    user_email: Mapped[str] = mapped_column(String(100), nullable=False)
    property_value: Mapped[float] = mapped_column(Float, nullable=False)
    down_payment: Mapped[float] = mapped_column(Float, nullable=False)
    down_payment_percentage: Mapped[float] = mapped_column(Float, nullable=False)
    financed_amount: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_payment: Mapped[float] = mapped_column(Float, nullable=False)
    total_amount: Mapped[float] = mapped_column(Float, nullable=False)
    total_interest: Mapped[float] = mapped_column(Float, nullable=False)
    term_years: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc), index=True)
    correlation_id: Mapped[str] = mapped_column(String(100), nullable=True)

    def __repr__(self):
        return f"<Simulation(id={self.id}, user_id={self.user_id}, property_value={self.property_value})>"
