from fractions import Fraction
from types import MappingProxyType

from origination.repayment_schedule.schemas import RepaymentCycle

# Months covered by one installment. A month is taken as 30 days.
MONTHS_PER_CYCLE = MappingProxyType({
    RepaymentCycle.DAILY.value: Fraction(1, 30),
    RepaymentCycle.WEEKLY.value: Fraction(7, 30),
    RepaymentCycle.BI_WEEKLY.value: Fraction(14, 30),
    RepaymentCycle.MONTHLY.value: Fraction(1),
    RepaymentCycle.QUARTERLY.value: Fraction(3),
})


def months_per_cycle(repayment_cycle: str) -> Fraction:
    """Unrecognized cycles are treated as monthly."""
    return MONTHS_PER_CYCLE.get(repayment_cycle, Fraction(1))
