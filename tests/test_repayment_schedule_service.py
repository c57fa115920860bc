"""
Unit tests for the repayment schedule service.
Validates input checks, summary aggregation and assembly of terms from stored records.
"""
import pytest
from datetime import date, datetime
from decimal import Decimal
from unittest.mock import MagicMock, Mock, patch
from origination.repayment_schedule.errors import InvalidLoanTermsError, LoanApplicationNotFoundError
from origination.repayment_schedule.schemas import (
    LoanTerms,
    RepaymentStructure,
    ReturnType,
    ScheduleRow,
)
from origination.repayment_schedule.service import (
    build_loan_terms,
    calculate_repayment_schedule,
    get_repayment_schedule,
)
from origination.repayment_schedule.summary import get_monthly_payment


def test_interest_based_summary():
    terms = LoanTerms(
        loan_amount=Decimal("12000"),
        interest_rate=Decimal("12"),
        repayment_period=12,
        first_payment_date=date(2024, 1, 31),
        currency="KES",
    )

    result = calculate_repayment_schedule(terms)

    assert len(result.schedule) == 12
    assert result.summary.total_principal == Decimal("12000.00")
    assert result.summary.monthly_payment == Decimal("1066.19")
    assert result.summary.total_payment_due == sum(row.payment_due for row in result.schedule)
    assert result.summary.total_interest == sum(row.interest for row in result.schedule)
    # Installments blend interest and principal, so totals differ at most by a cent per row
    assert abs(result.summary.total_payment_due - Decimal("12000.00") - result.summary.total_interest) <= Decimal("0.12")
    assert result.summary.facility_fee == Decimal("0.00")
    assert result.loan_summary.currency == "KES"
    assert result.loan_summary.first_payment_date == date(2024, 1, 31)


def test_monthly_payment_skips_grace_installments():
    terms = LoanTerms(
        loan_amount=Decimal("12000"),
        interest_rate=Decimal("12"),
        repayment_period=12,
        grace_period=Decimal("90"),
        first_payment_date=date(2024, 1, 31),
    )

    result = calculate_repayment_schedule(terms)

    assert result.loan_summary.grace_period == 3
    assert result.schedule[2].payment_due == Decimal("120.00")
    assert result.summary.monthly_payment == result.schedule[3].payment_due


def test_revenue_sharing_summary():
    terms = LoanTerms(
        loan_amount=Decimal("10000"),
        interest_rate=Decimal("20"),
        repayment_period=6,
        return_type=ReturnType.REVENUE_SHARING,
        grace_period=Decimal("2"),
        first_payment_date=date(2024, 3, 1),
        custom_fees=[
            {"name": "Arrangement", "amount": 100, "type": "flat"},
            {"name": "Facility", "amount": 1, "type": "percentage"},
        ],
    )

    result = calculate_repayment_schedule(terms)

    assert result.loan_summary.grace_period == 0
    assert result.summary.monthly_payment == Decimal("333.33")
    assert result.summary.total_interest == Decimal("1999.98")
    assert result.summary.total_principal == Decimal("10000.00")
    assert result.summary.total_payment_due == Decimal("11999.98")
    assert result.summary.facility_fee == Decimal("200.00")


def test_missing_first_payment_date_starts_today():
    terms = LoanTerms(loan_amount=Decimal("1000"), interest_rate=Decimal("10"), repayment_period=2)

    result = calculate_repayment_schedule(terms)

    assert result.schedule[0].due_date == date.today()
    assert result.loan_summary.first_payment_date is None
    assert result.loan_summary.currency == "USD"


def test_unknown_cycle_is_echoed_and_stepped_monthly():
    terms = LoanTerms(
        loan_amount=Decimal("1000"),
        interest_rate=Decimal("10"),
        repayment_period=2,
        repayment_cycle="fortnightly",
        first_payment_date=date(2024, 1, 15),
    )

    result = calculate_repayment_schedule(terms)

    assert result.loan_summary.repayment_cycle == "fortnightly"
    assert result.schedule[1].due_date == date(2024, 2, 15)


@pytest.mark.parametrize("amount, period, expected_code", [
    (Decimal("0"), 12, "INVALID_LOAN_AMOUNT"),
    (Decimal("-500"), 12, "INVALID_LOAN_AMOUNT"),
    (Decimal("1000"), 0, "INVALID_REPAYMENT_PERIOD"),
    (Decimal("1000"), -3, "INVALID_REPAYMENT_PERIOD"),
])
def test_invalid_terms_are_rejected(amount: Decimal, period: int, expected_code: str):
    terms = LoanTerms(loan_amount=amount, interest_rate=Decimal("10"), repayment_period=period)

    with pytest.raises(InvalidLoanTermsError) as exc_info:
        calculate_repayment_schedule(terms)

    assert exc_info.value.code == expected_code
    assert str(exc_info.value).startswith(f"[{expected_code}]")


def test_grace_period_covering_whole_loan_is_rejected():
    terms = LoanTerms(
        loan_amount=Decimal("1000"),
        interest_rate=Decimal("10"),
        repayment_period=3,
        grace_period=Decimal("90"),
    )

    with pytest.raises(InvalidLoanTermsError) as exc_info:
        calculate_repayment_schedule(terms)

    assert exc_info.value.code == "INVALID_GRACE_PERIOD"


def test_monthly_payment_falls_back_to_first_row():
    row = ScheduleRow(
        payment_no=1,
        due_date=date(2024, 1, 1),
        payment_due=Decimal("10.00"),
        interest=Decimal("10.00"),
        principal=Decimal("0"),
        outstanding_balance=Decimal("0"),
    )

    assert get_monthly_payment([row], ReturnType.INTEREST_BASED, 5) == Decimal("10.00")
    assert get_monthly_payment([], ReturnType.INTEREST_BASED, 0) == Decimal("0")


def make_application(**overrides) -> Mock:
    application = Mock()
    application.id = "app-123"
    application.funding_amount = Decimal("50000.00")
    application.funding_currency = "KES"
    application.repayment_period = 24
    application.interest_rate = Decimal("18.0000")
    application.active_version_id = None
    for key, value in overrides.items():
        setattr(application, key, value)
    return application


def test_build_terms_from_base_application():
    terms = build_loan_terms(make_application(), None)

    assert terms.loan_amount == Decimal("50000.00")
    assert terms.repayment_period == 24
    assert terms.return_type == ReturnType.INTEREST_BASED
    assert terms.repayment_structure == RepaymentStructure.PRINCIPAL_AND_INTEREST
    assert terms.repayment_cycle == "monthly"
    assert terms.grace_period == 0
    assert terms.first_payment_date is None
    assert terms.custom_fees == []
    assert terms.currency == "KES"


def test_build_terms_from_active_version():
    version = Mock()
    version.funding_amount = Decimal("40000.00")
    version.interest_rate = Decimal("15.5000")
    version.repayment_period = 12
    version.return_type = ReturnType.INTEREST_BASED
    version.repayment_structure = RepaymentStructure.BULLET
    version.repayment_cycle = "quarterly"
    version.grace_period = 60
    version.first_payment_date = datetime(2025, 6, 30, 9, 0)
    version.custom_fees = [{"name": "Legal", "amount": 500, "type": "flat"}]

    terms = build_loan_terms(make_application(active_version_id="ver-1"), version)

    assert terms.loan_amount == Decimal("40000.00")
    assert terms.interest_rate == Decimal("15.5000")
    assert terms.repayment_structure == RepaymentStructure.BULLET
    assert terms.repayment_cycle == "quarterly"
    assert terms.grace_period == 60
    assert terms.first_payment_date == date(2025, 6, 30)
    assert terms.custom_fees[0].amount == Decimal("500")
    assert terms.currency == "KES"


def test_get_schedule_for_unknown_application():
    db_mock = MagicMock()
    db_mock.query().filter().first.return_value = None

    with pytest.raises(LoanApplicationNotFoundError) as exc_info:
        get_repayment_schedule(db_mock, "missing")

    assert exc_info.value.code == "LOAN_APPLICATION_NOT_FOUND"
    assert exc_info.value.status_code == 404


def test_get_schedule_for_base_application():
    db_mock = MagicMock()
    db_mock.query().filter().first.return_value = make_application()

    result = get_repayment_schedule(db_mock, "app-123")

    assert len(result.schedule) == 24
    assert result.summary.total_principal == Decimal("50000.00")


def test_stored_fees_with_unsupported_type_are_skipped():
    version = Mock()
    version.funding_amount = Decimal("10000.00")
    version.interest_rate = Decimal("12.0000")
    version.repayment_period = 6
    version.return_type = ReturnType.INTEREST_BASED
    version.repayment_structure = RepaymentStructure.PRINCIPAL_AND_INTEREST
    version.repayment_cycle = "monthly"
    version.grace_period = 0
    version.first_payment_date = datetime(2025, 1, 15)
    version.custom_fees = [
        {"name": "Arrangement", "amount": 50, "type": "flat"},
        {"name": "Servicing", "amount": 2, "type": "annual"},
    ]

    with patch("origination.repayment_schedule.service.logger") as logger_mock:
        terms = build_loan_terms(make_application(active_version_id="ver-1"), version)
        result = calculate_repayment_schedule(terms)

    assert len(terms.custom_fees) == 1
    assert result.summary.facility_fee == Decimal("50.00")
    logger_mock.warning.assert_called_once()


def test_negligible_rate_produces_schedule():
    terms = LoanTerms(
        loan_amount=Decimal("1000"),
        interest_rate=Decimal("1e-30"),
        repayment_period=12,
        first_payment_date=date(2024, 1, 31),
    )

    result = calculate_repayment_schedule(terms)

    assert result.summary.total_principal == Decimal("1000.00")
    assert result.summary.monthly_payment == Decimal("83.33")


def test_first_payment_date_near_calendar_end_is_rejected():
    terms = LoanTerms(
        loan_amount=Decimal("1000"),
        interest_rate=Decimal("10"),
        repayment_period=24,
        first_payment_date=date(9999, 6, 30),
    )

    with pytest.raises(InvalidLoanTermsError) as exc_info:
        calculate_repayment_schedule(terms)

    assert exc_info.value.code == "INVALID_FIRST_PAYMENT_DATE"
