"""
Repayment schedule generation.

Revenue sharing: a flat share of the principal is spread evenly over the
installments and the principal is redeemed in full with the last one.

Interest based: interest-only grace installments, followed either by a
constant annuity (Price Table) or by interest-only installments with a
bullet repayment at the end.

Annuity formula: PMT = P * r(1+r)^M / ((1+r)^M - 1)
"""
from datetime import date
from decimal import Decimal
from typing import Iterator, List

from origination.core.utils import ZERO, round_money
from origination.repayment_schedule.cycles import months_per_cycle
from origination.repayment_schedule.dates import installment_due_date
from origination.repayment_schedule.schemas import (
    LoanTerms,
    RepaymentStructure,
    ReturnType,
    ScheduleRow,
)

MONTHS_PER_YEAR = 12


def monthly_rate(annual_rate: Decimal) -> Decimal:
    """12 (% per year) -> 0.01"""
    return annual_rate / 100 / MONTHS_PER_YEAR


def annuity_payment(principal: Decimal, rate: Decimal, installments: int) -> Decimal:
    """Constant installment repaying `principal` over `installments` periods at `rate`."""
    if installments <= 0:
        return ZERO
    factor = (1 + rate) ** installments
    # Rates too small to move 1 + rate at Decimal precision behave as zero
    if rate == 0 or factor == 1:
        return principal / installments
    return principal * (rate * factor) / (factor - 1)


def is_amortized(terms: LoanTerms) -> bool:
    return (
        terms.return_type == ReturnType.INTEREST_BASED
        and terms.repayment_structure == RepaymentStructure.PRINCIPAL_AND_INTEREST
    )


def iter_revenue_sharing_rows(terms: LoanTerms, first_payment_date: date) -> Iterator[ScheduleRow]:
    installments = terms.repayment_period
    cycle_months = months_per_cycle(terms.repayment_cycle)
    revenue_share = terms.loan_amount * terms.interest_rate / 100 / installments

    for payment_no in range(1, installments + 1):
        is_last = payment_no == installments
        capital_redemption = terms.loan_amount if is_last else ZERO

        yield ScheduleRow(
            payment_no=payment_no,
            due_date=installment_due_date(first_payment_date, payment_no, cycle_months),
            payment_due=round_money(revenue_share + capital_redemption),
            interest=round_money(revenue_share),
            principal=round_money(capital_redemption),
            outstanding_balance=ZERO if is_last else round_money(terms.loan_amount),
        )


def iter_interest_based_rows(
    terms: LoanTerms,
    grace_months: int,
    first_payment_date: date
) -> Iterator[ScheduleRow]:
    """
    Yields installments threading the outstanding balance from one row to the next.
    The final-row correction of amortized schedules is not applied here.
    """
    installments = terms.repayment_period
    cycle_months = months_per_cycle(terms.repayment_cycle)
    rate = monthly_rate(terms.interest_rate)
    amortized = terms.repayment_structure == RepaymentStructure.PRINCIPAL_AND_INTEREST

    balance = terms.loan_amount
    payment = None

    for payment_no in range(1, installments + 1):
        is_last = payment_no == installments
        interest = balance * rate

        if payment_no <= grace_months:
            principal = ZERO
        elif amortized:
            if payment is None:
                # Fixed once, from the balance left when the grace phase ends
                payment = annuity_payment(balance, rate, installments - grace_months)
            principal = payment - interest
        else:
            principal = terms.loan_amount if is_last else ZERO

        balance = ZERO if is_last else balance - principal

        yield ScheduleRow(
            payment_no=payment_no,
            due_date=installment_due_date(first_payment_date, payment_no, cycle_months),
            payment_due=round_money(interest + principal),
            interest=round_money(interest),
            principal=round_money(principal),
            outstanding_balance=round_money(balance),
        )


def iter_schedule_rows(terms: LoanTerms, grace_months: int, first_payment_date: date) -> Iterator[ScheduleRow]:
    """Lazy, uncorrected row sequence for either return type."""
    if terms.return_type == ReturnType.REVENUE_SHARING:
        return iter_revenue_sharing_rows(terms, first_payment_date)
    return iter_interest_based_rows(terms, grace_months, first_payment_date)


def correct_final_row(rows: List[ScheduleRow], loan_amount: Decimal) -> List[ScheduleRow]:
    """
    Forces the rounded principals to add up to the loan amount exactly.
    The last row absorbs the residual and closes the balance at zero.
    """
    if not rows:
        return rows

    *prior, last = rows
    principal = round_money(loan_amount - sum((row.principal for row in prior), ZERO))
    corrected = last.model_copy(update={
        "principal": principal,
        "payment_due": round_money(last.interest + principal),
        "outstanding_balance": ZERO,
    })
    return [*prior, corrected]


def generate_schedule(terms: LoanTerms, grace_months: int, first_payment_date: date) -> List[ScheduleRow]:
    """
    Materializes the full schedule.
    `grace_months` must already be normalized and validated.
    """
    rows = list(iter_schedule_rows(terms, grace_months, first_payment_date))
    if is_amortized(terms):
        rows = correct_final_row(rows, terms.loan_amount)
    return rows
