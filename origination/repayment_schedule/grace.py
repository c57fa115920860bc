"""
Grace period normalization.

Stored grace periods do not say which unit they are in. Small values are
read as months, larger ones as days.
"""
from decimal import Decimal
from typing import Union

from origination.core.logger import logger
from origination.core.utils import round_whole
from origination.repayment_schedule.errors import InvalidLoanTermsError
from origination.repayment_schedule.schemas import ReturnType

DAYS_THRESHOLD = 12
DAYS_PER_MONTH = 30


def reads_as_days(grace_period: Decimal) -> bool:
    return grace_period > DAYS_THRESHOLD


def normalize_grace_period(grace_period: Union[Decimal, int]) -> int:
    """
    Converts a raw grace period to whole months.

    Values above 12 are taken as days (90 -> 3), everything else as months.
    A genuine 13-month grace period is therefore misread as days; replace
    this function once upstream records carry their unit.
    """
    grace_period = Decimal(grace_period)
    if reads_as_days(grace_period):
        return round_whole(grace_period / DAYS_PER_MONTH)
    return round_whole(grace_period)


def resolve_grace_period(
    grace_period: Union[Decimal, int],
    return_type: ReturnType,
    repayment_period: int
) -> int:
    """
    Normalizes and validates the grace period for the given return type.
    Revenue-sharing schedules have no grace phase, so a positive value is dropped.
    """
    raw = Decimal(grace_period)
    months = normalize_grace_period(raw)

    if raw < 0:
        raise InvalidLoanTermsError("INVALID_GRACE_PERIOD", "Grace period cannot be negative")

    if return_type == ReturnType.REVENUE_SHARING:
        if months > 0:
            logger.warning(f"Grace period ({months}) is not used for revenue sharing loans, ignoring")
        return 0

    if months >= repayment_period:
        unit = "days" if reads_as_days(raw) else "months"
        raise InvalidLoanTermsError(
            "INVALID_GRACE_PERIOD",
            f"Grace period ({months} months from {raw} {unit}) must be less than repayment period "
            f"({repayment_period} months). Maximum allowed: {repayment_period - 1} months."
        )

    return months
