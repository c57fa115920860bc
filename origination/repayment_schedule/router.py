"""
FastAPI Router for repayment schedule endpoints.
Schedules are computed on demand and never stored.
"""
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Header
from sqlalchemy.orm import Session

from origination.core.database import get_db
from origination.core.logger import get_logger_with_correlation
from origination.repayment_schedule.errors import RepaymentScheduleError
from origination.repayment_schedule.schemas import LoanTerms, RepaymentScheduleResponse
from origination.repayment_schedule.service import calculate_repayment_schedule, get_repayment_schedule

router = APIRouter(tags=["Repayment Schedule"])


@router.post("/repayment-schedule/calculate", response_model=RepaymentScheduleResponse)
def calculate_schedule(
    terms: LoanTerms,
    x_correlation_id: str = Header(default=None)
) -> RepaymentScheduleResponse:
    """
    Projects the repayment schedule for ad-hoc loan terms.

    - **loanAmount**: Principal
    - **interestRate**: Annual rate in percent
    - **repaymentPeriod**: Number of installments
    - **gracePeriod**: Months, or days when above 12

    **Returns:**
    - One row per installment
    - Totals, steady-state installment and facility fee
    - The normalized terms
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        return calculate_repayment_schedule(terms)
    except RepaymentScheduleError as e:
        logger.error(f"Repayment schedule rejected: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())


@router.get("/loan-applications/{loan_application_id}/repayment-schedule", response_model=RepaymentScheduleResponse)
def loan_application_schedule(
    loan_application_id: str,
    db: Session = Depends(get_db),
    x_correlation_id: str = Header(default=None)
) -> RepaymentScheduleResponse:
    """
    Repayment schedule of a stored loan application.
    Uses the active version's terms when one exists.
    """
    correlation_id = x_correlation_id or str(uuid4())
    logger = get_logger_with_correlation(correlation_id)

    try:
        logger.info(f"Calculating repayment schedule: loan_application_id={loan_application_id}")
        return get_repayment_schedule(db, loan_application_id)
    except RepaymentScheduleError as e:
        logger.error(f"Repayment schedule rejected: loan_application_id={loan_application_id}, {e}")
        raise HTTPException(status_code=e.status_code, detail=e.to_detail())
