from typing import Any, Dict, Optional


class PayslipError(Exception):
    """Base for failures the HTTP layer maps to a fixed status code."""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class PayslipValidationError(PayslipError):
    status_code = 400

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message, details={"field": field})


class DuplicatePayslipError(PayslipError):
    status_code = 400
    kind = "duplicate"


class DuplicateNaturalKeyError(DuplicatePayslipError):
    kind = "natural_key"

    def __init__(self, employee_id: str, month_year: str):
        self.employee_id = employee_id
        self.month_year = month_year
        super().__init__(
            f"Payslip already exists for employee {employee_id} for {month_year}",
            details={"employee_id": employee_id, "month_year": month_year},
        )


class DuplicatePayslipIdError(DuplicatePayslipError):
    kind = "payslip_id"

    def __init__(self, payslip_id: str):
        self.payslip_id = payslip_id
        super().__init__(
            f"Payslip ID {payslip_id} is already in use, please try again",
            details={"payslip_id": payslip_id},
        )


class PayslipNotFoundError(PayslipError):
    status_code = 404

    def __init__(self, payslip_id: str):
        self.payslip_id = payslip_id
        super().__init__("Payslip not found", details={"payslip_id": payslip_id})


class StorageError(PayslipError):
    """Unexpected backend failure. The message is never shown to clients."""

    status_code = 500
    public_message = "Internal server error"
