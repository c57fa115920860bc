import math
from datetime import date
from fractions import Fraction
from typing import Union

from dateutil.relativedelta import relativedelta

from origination.repayment_schedule.errors import InvalidLoanTermsError


def add_months(start: date, months: int) -> date:
    """
    Shift a date by whole months, clamping to the end of the target month.
    2024-01-31 + 1 -> 2024-02-29, 2023-01-31 + 1 -> 2023-02-28
    """
    return start + relativedelta(months=months)


def installment_due_date(first_payment_date: date, payment_no: int, cycle_months: Union[int, Fraction]) -> date:
    """
    Due date of the payment_no-th installment (1-based).
    Fractional month offsets (sub-monthly cycles) are truncated to whole months.
    """
    offset = math.trunc((payment_no - 1) * cycle_months)
    try:
        return add_months(first_payment_date, offset)
    except (ValueError, OverflowError):
        raise InvalidLoanTermsError(
            "INVALID_FIRST_PAYMENT_DATE",
            f"Installment {payment_no} falls beyond the supported calendar range "
            f"(first payment {first_payment_date.isoformat()})"
        )
