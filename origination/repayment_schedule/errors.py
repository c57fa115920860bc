"""
Domain errors raised by the repayment schedule module.
Each error carries a machine-readable code and the HTTP status it maps to.
"""


class RepaymentScheduleError(Exception):
    """Base class for repayment schedule failures."""

    status_code = 400

    def __init__(self, code: str, message: str):
        super().__init__(f"[{code}] {message}")
        self.code = code
        self.message = message

    def to_detail(self) -> dict:
        return {"code": self.code, "message": self.message}


class InvalidLoanTermsError(RepaymentScheduleError, ValueError):
    """Loan terms cannot produce a schedule. The caller must correct the input."""


class LoanApplicationNotFoundError(RepaymentScheduleError):
    status_code = 404

    def __init__(self, loan_application_id: str):
        super().__init__("LOAN_APPLICATION_NOT_FOUND", "Loan application not found")
        self.loan_application_id = loan_application_id
