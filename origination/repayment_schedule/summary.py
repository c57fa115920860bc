from decimal import Decimal
from typing import Sequence

from origination.core.utils import ZERO, round_money, sum_money
from origination.repayment_schedule.schemas import ReturnType, ScheduleRow, ScheduleSummary


def get_monthly_payment(schedule: Sequence[ScheduleRow], return_type: ReturnType, grace_months: int) -> Decimal:
    """
    Representative installment amount.
    Revenue sharing: the revenue share. Interest based: the first installment after grace.
    """
    if not schedule:
        return ZERO

    if return_type == ReturnType.REVENUE_SHARING:
        return schedule[0].interest

    if grace_months < len(schedule):
        return schedule[grace_months].payment_due
    return schedule[0].payment_due


def summarize_schedule(
    schedule: Sequence[ScheduleRow],
    return_type: ReturnType,
    grace_months: int,
    facility_fee: Decimal
) -> ScheduleSummary:
    return ScheduleSummary(
        total_payment_due=sum_money(row.payment_due for row in schedule),
        total_interest=sum_money(row.interest for row in schedule),
        total_principal=sum_money(row.principal for row in schedule),
        monthly_payment=round_money(get_monthly_payment(schedule, return_type, grace_months)),
        facility_fee=round_money(facility_fee),
    )
