"""
Business logic for repayment schedules.
Validates loan terms, runs the schedule engine and assembles the response.
"""
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from origination.core.config import settings
from origination.core.logger import logger
from origination.core.utils import round_money
from origination.repayment_schedule.errors import InvalidLoanTermsError, LoanApplicationNotFoundError
from origination.repayment_schedule.fees import calculate_facility_fee
from origination.repayment_schedule.generator import generate_schedule
from origination.repayment_schedule.grace import resolve_grace_period
from origination.repayment_schedule.models import LoanApplication, LoanApplicationVersion
from origination.repayment_schedule.schemas import (
    FeeType,
    LoanSummary,
    LoanTerms,
    RepaymentScheduleResponse,
    RepaymentStructure,
    ReturnType,
)
from origination.repayment_schedule.summary import summarize_schedule


def validate_loan_terms(terms: LoanTerms) -> None:
    if terms.loan_amount <= 0:
        raise InvalidLoanTermsError("INVALID_LOAN_AMOUNT", "Loan amount must be greater than 0")
    if terms.repayment_period <= 0:
        raise InvalidLoanTermsError("INVALID_REPAYMENT_PERIOD", "Repayment period must be greater than 0")


def calculate_repayment_schedule(terms: LoanTerms) -> RepaymentScheduleResponse:
    """
    Computes the full schedule, its summary and the normalized terms echo.
    Raises InvalidLoanTermsError before any row is produced.
    """
    validate_loan_terms(terms)
    grace_months = resolve_grace_period(terms.grace_period, terms.return_type, terms.repayment_period)

    first_payment_date = terms.first_payment_date or date.today()
    schedule = generate_schedule(terms, grace_months, first_payment_date)

    facility_fee = calculate_facility_fee(terms.loan_amount, terms.custom_fees)
    summary = summarize_schedule(schedule, terms.return_type, grace_months, facility_fee)

    loan_summary = LoanSummary(
        loan_amount=round_money(terms.loan_amount),
        currency=terms.currency or settings.DEFAULT_CURRENCY,
        repayment_period=terms.repayment_period,
        interest_rate=terms.interest_rate,
        repayment_structure=terms.repayment_structure,
        repayment_cycle=terms.repayment_cycle,
        grace_period=grace_months,
        first_payment_date=terms.first_payment_date,
        return_type=terms.return_type,
    )

    logger.info(
        f"Repayment schedule calculated: amount={terms.loan_amount}, period={terms.repayment_period}, "
        f"return_type={terms.return_type.value}, grace={grace_months}, monthly_payment={summary.monthly_payment}"
    )

    return RepaymentScheduleResponse(schedule=schedule, summary=summary, loan_summary=loan_summary)


def known_fees(custom_fees: Optional[List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Stored fees with a type this service does not price are skipped."""
    fee_types = {fee_type.value for fee_type in FeeType}
    fees = []
    for fee in custom_fees or []:
        if fee.get("type") in fee_types:
            fees.append(fee)
        else:
            logger.warning(f"Skipping custom fee with unsupported type: name={fee.get('name')}, type={fee.get('type')}")
    return fees


def build_loan_terms(application: LoanApplication, version: Optional[LoanApplicationVersion]) -> LoanTerms:
    """
    Terms from the active version when there is one, otherwise from the base application.
    Currency always comes from the base application.
    """
    if version is None:
        return LoanTerms(
            loan_amount=application.funding_amount,
            interest_rate=application.interest_rate,
            repayment_period=application.repayment_period,
            currency=application.funding_currency,
        )

    first_payment_date = version.first_payment_date.date() if version.first_payment_date else None

    return LoanTerms(
        loan_amount=version.funding_amount,
        interest_rate=version.interest_rate,
        repayment_period=version.repayment_period,
        repayment_structure=version.repayment_structure or RepaymentStructure.PRINCIPAL_AND_INTEREST,
        repayment_cycle=version.repayment_cycle or "monthly",
        first_payment_date=first_payment_date,
        grace_period=version.grace_period or 0,
        return_type=version.return_type or ReturnType.INTEREST_BASED,
        custom_fees=known_fees(version.custom_fees),
        currency=application.funding_currency,
    )


def get_repayment_schedule(db: Session, loan_application_id: str) -> RepaymentScheduleResponse:
    """Schedule of a stored loan application. Soft-deleted applications are not found."""
    application = db.query(LoanApplication).filter(
        LoanApplication.id == loan_application_id,
        LoanApplication.deleted_at.is_(None)
    ).first()

    if not application:
        raise LoanApplicationNotFoundError(loan_application_id)

    version = None
    if application.active_version_id:
        version = db.query(LoanApplicationVersion).filter(
            LoanApplicationVersion.id == application.active_version_id
        ).first()

    terms = build_loan_terms(application, version)
    return calculate_repayment_schedule(terms)
