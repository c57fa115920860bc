"""
Pydantic schemas for repayment schedule input/output.
Python attributes are snake_case; the wire format is camelCase.
"""
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Annotated, List, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

# Decimals travel as JSON numbers, not strings
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class ReturnType(str, Enum):
    INTEREST_BASED = "interest_based"
    REVENUE_SHARING = "revenue_sharing"


class RepaymentStructure(str, Enum):
    PRINCIPAL_AND_INTEREST = "principal_and_interest"
    BULLET = "bullet"


class RepaymentCycle(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    BI_WEEKLY = "bi_weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


class FeeType(str, Enum):
    FLAT = "flat"
    PERCENTAGE = "percentage"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CustomFee(CamelModel):
    """A single charge contributing to the facility fee."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Fee label")
    amount: Money = Field(..., description="Flat amount, or percentage of principal")
    type: FeeType = Field(..., description="flat | percentage")


class LoanTerms(CamelModel):
    """
    Snapshot of the terms a schedule is computed from.

    Amount and period are range-checked by the engine, not here, so that
    callers receive the coded INVALID_* errors.
    """
    model_config = ConfigDict(frozen=True)

    loan_amount: Money = Field(..., description="Principal")
    interest_rate: Money = Field(..., description="Annual rate in percent (12.5 = 12.5%/yr)")
    repayment_period: int = Field(..., description="Number of installments")
    repayment_structure: RepaymentStructure = Field(
        default=RepaymentStructure.PRINCIPAL_AND_INTEREST,
        description="Ignored for revenue sharing"
    )
    # Plain string: cycles unknown to this service fall back to monthly
    repayment_cycle: str = Field(default=RepaymentCycle.MONTHLY.value, description="Installment cadence")
    first_payment_date: Optional[date] = Field(default=None, description="Defaults to today")
    grace_period: Decimal = Field(default=Decimal("0"), description="Months, or days when above 12")
    return_type: ReturnType = Field(default=ReturnType.INTEREST_BASED)
    custom_fees: List[CustomFee] = Field(default_factory=list)
    currency: Optional[str] = Field(default=None, max_length=10, description="ISO 4217 code")


class ScheduleRow(CamelModel):
    """Represents a single installment of the schedule."""
    model_config = ConfigDict(frozen=True)

    payment_no: int = Field(..., ge=1)
    due_date: date
    payment_due: Money
    interest: Money = Field(..., description="Interest, or revenue share")
    principal: Money = Field(..., description="Principal, or capital redemption")
    outstanding_balance: Money


class ScheduleSummary(CamelModel):
    total_payment_due: Money
    total_interest: Money
    total_principal: Money
    monthly_payment: Money = Field(..., description="Steady-state installment, excluding grace")
    facility_fee: Money


class LoanSummary(CamelModel):
    """Echo of the terms after normalization."""
    loan_amount: Money
    currency: str
    repayment_period: int
    interest_rate: Money
    repayment_structure: RepaymentStructure
    repayment_cycle: str
    grace_period: int = Field(..., description="Normalized grace period in months")
    first_payment_date: Optional[date] = None
    return_type: ReturnType


class RepaymentScheduleResponse(CamelModel):
    schedule: List[ScheduleRow]
    summary: ScheduleSummary
    loan_summary: LoanSummary
