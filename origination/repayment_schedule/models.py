"""
Loan application records the repayment schedule is read from.
Only the columns that feed the schedule are mapped here.
"""
from sqlalchemy import DateTime, Enum, ForeignKey, Integer, JSON, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, List, Optional
from origination.core.database import Base
from origination.repayment_schedule.schemas import RepaymentStructure, ReturnType


def get_enum_values(enum_cls: Any) -> List[str]:
    """Helper to get values from an Enum class for SQLAlchemy."""
    return [e.value for e in enum_cls]


class LoanApplication(Base):
    __tablename__ = "loan_applications"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, index=True)
    funding_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    funding_currency: Mapped[str] = mapped_column(String(10), nullable=False)
    repayment_period: Mapped[int] = mapped_column(Integer, nullable=False)
    # Annual percentage
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    active_version_id: Mapped[Optional[str]] = mapped_column(String(24), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True, index=True)

    def __repr__(self):
        return f"<LoanApplication(id={self.id}, funding_amount={self.funding_amount})>"


class LoanApplicationVersion(Base):
    """Negotiated terms overriding the base application once activated."""

    __tablename__ = "loan_application_versions"

    id: Mapped[str] = mapped_column(String(24), primary_key=True, index=True)
    loan_application_id: Mapped[str] = mapped_column(
        String(24), ForeignKey("loan_applications.id"), nullable=False, index=True
    )
    funding_amount: Mapped[Decimal] = mapped_column(Numeric(15, 2), nullable=False)
    repayment_period: Mapped[int] = mapped_column(Integer, nullable=False)
    return_type: Mapped[ReturnType] = mapped_column(
        Enum(ReturnType, values_callable=get_enum_values),
        nullable=False
    )
    interest_rate: Mapped[Decimal] = mapped_column(Numeric(7, 4), nullable=False)
    repayment_structure: Mapped[RepaymentStructure] = mapped_column(
        Enum(RepaymentStructure, values_callable=get_enum_values),
        nullable=False
    )
    repayment_cycle: Mapped[str] = mapped_column(String(20), nullable=False)
    # Unit is not recorded: months or days, see grace.normalize_grace_period
    grace_period: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    first_payment_date: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    custom_fees: Mapped[List[Any]] = mapped_column(JSON, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=lambda: datetime.now(timezone.utc))
