"""Field-level validation for inbound payslip records.

``PayslipIn`` declares the rules; this module turns its first complaint into a
single ``PayslipValidationError`` so the same input always produces the same
error, and normalizes what passes into dates and cent-rounded decimals.
"""
from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import ValidationError

from payslip_api.core.errors import PayslipValidationError
from payslip_api.domains.payslips.schemas import (
    CENTS,
    MAX_AMOUNT,
    MONTHS,
    PayslipIn,
    to_amount,
)

EARNINGS = ("basic_salary", "hra", "other_allowance")
DEDUCTIONS = ("professional_tax", "tds", "provident_fund", "lwp", "other_deduction")
MONEY_FIELDS = EARNINGS + DEDUCTIONS

REQUIRED_FIELDS = tuple(PayslipIn.model_fields)

MESSAGES = {
    "employee_id": "Employee ID must be ATS0 followed by 3 digits (ATS0000 is not allowed)",
    "employee_name": "Employee name must contain only letters and single spaces between words",
    "employee_email": "Employee email must be a valid address ending in .com, .in, .org or .co.in",
    "month_year": 'Month and year must look like "January 2024"',
    "designation": "Invalid designation",
    "office_location": "Office location must be one of Hyderabad, Bangalore, Pune, Chennai, Delhi",
    "employment_type": "Employment type must be one of Permanent, Contract, Temporary, Intern",
    "date_of_joining": "Date of joining must be a valid date between 2021-01-01 and today",
    "working_days": "Working days must be a whole number between 1 and 31",
    "bank_name": "Bank name must contain only letters and spaces",
    "pan_no": "PAN must be 5 uppercase letters, 4 digits and 1 uppercase letter",
    "bank_account_no": "Bank account number must be 10 to 18 digits",
    "pf_no": "PF number must be 12 to 22 uppercase letters or digits",
    "uan_no": "UAN must be exactly 12 digits",
    "esic_no": "ESIC number must be 10 to 17 uppercase letters or digits",
    "basic_salary": "Basic salary must be a number greater than 0",
}


def _amount_label(name: str) -> str:
    if name in ("hra", "tds", "lwp"):
        return name.upper()
    return name.replace("_", " ").capitalize()


MESSAGES.update(
    {name: f"{_amount_label(name)} must be a number of 0 or more" for name in MONEY_FIELDS[1:]}
)


def parse_month_year(value: str) -> tuple[int, int]:
    """Return ``(year, month)`` for a ``"January 2024"`` style period."""
    name, _, year = value.partition(" ")
    if name not in MONTHS or len(year) != 4 or not year.isdigit():
        raise ValueError(f"Invalid month_year: {value!r}")
    return int(year), MONTHS.index(name) + 1


class PayslipValidator:
    """Validates and normalizes a raw payslip mapping.

    ``today`` is injectable so the joining-date window can be pinned in tests.
    """

    def __init__(
        self,
        *,
        require_other_deduction: bool = False,
        today: Callable[[], date] = date.today,
    ) -> None:
        self.require_other_deduction = require_other_deduction
        self._today = today

    @property
    def required_fields(self) -> tuple[str, ...]:
        if self.require_other_deduction:
            return REQUIRED_FIELDS
        return tuple(f for f in REQUIRED_FIELDS if f != "other_deduction")

    def validate(self, raw: Mapping[str, Any]) -> dict[str, Any]:
        """Return the normalized record or raise on the first failing field."""
        for name in self.required_fields:
            if raw.get(name) is None:
                raise PayslipValidationError(name, f"Missing required field: {name}")

        data = {name: raw[name] for name in REQUIRED_FIELDS if raw.get(name) is not None}
        try:
            payslip = PayslipIn.model_validate(data, context={"today": self._today()})
        except ValidationError as exc:
            first = exc.errors()[0]
            field = str(first["loc"][0]) if first["loc"] else "payslip"
            raise PayslipValidationError(field, MESSAGES.get(field, first["msg"])) from None

        values = payslip.model_dump()
        for name in MONEY_FIELDS:
            values[name] = to_amount(values[name])
        if abs(compute_net_salary(values)) > Decimal(str(MAX_AMOUNT)):
            raise PayslipValidationError(
                "net_salary", f"Net salary must be between -{MAX_AMOUNT} and {MAX_AMOUNT}"
            )
        return values


def compute_net_salary(record: Mapping[str, Any]) -> Decimal:
    earnings = sum((to_amount(record[name]) for name in EARNINGS), Decimal("0"))
    deductions = sum((to_amount(record[name]) for name in DEDUCTIONS), Decimal("0"))
    return (earnings - deductions).quantize(CENTS)
