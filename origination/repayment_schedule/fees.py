from decimal import Decimal
from typing import Iterable, Optional

from origination.core.utils import ZERO, round_money
from origination.repayment_schedule.schemas import CustomFee, FeeType


def calculate_facility_fee(loan_amount: Decimal, custom_fees: Optional[Iterable[CustomFee]]) -> Decimal:
    """
    Flat fees are added as-is, percentage fees as a share of the principal.
    The total is rounded once, after summing.
    """
    facility_fee = ZERO
    for fee in custom_fees or ():
        if fee.type == FeeType.FLAT:
            facility_fee += fee.amount
        elif fee.type == FeeType.PERCENTAGE:
            facility_fee += loan_amount * fee.amount / 100
    return round_money(facility_fee)
