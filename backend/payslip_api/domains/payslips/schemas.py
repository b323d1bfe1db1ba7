from __future__ import annotations

from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictInt,
    ValidationInfo,
    field_validator,
)

MONTHS = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)

Designation = Literal[
    "Software Engineer",
    "Senior Software Engineer",
    "Associate Software Engineer",
    "Trainee Software Engineer",
    "Lead Software Engineer",
    "Technical Lead",
    "Engineering Manager",
    "Project Manager",
    "Product Manager",
    "Business Analyst",
    "Data Analyst",
    "Data Scientist",
    "Data Engineer",
    "DevOps Engineer",
    "Cloud Engineer",
    "QA Engineer",
    "Test Engineer",
    "UI/UX Designer",
    "Frontend Developer",
    "Backend Developer",
    "Full Stack Developer",
    "System Administrator",
    "Network Engineer",
    "Database Administrator",
    "HR Executive",
    "HR Manager",
]
OfficeLocation = Literal["Hyderabad", "Bangalore", "Pune", "Chennai", "Delhi"]
EmploymentType = Literal["Permanent", "Contract", "Temporary", "Intern"]

EARLIEST_JOINING_DATE = date(2021, 1, 1)
# Numeric(10, 2) upper bound
MAX_AMOUNT = 99999999.99
CENTS = Decimal("0.01")

EMAIL_PATTERN = r"(?i)^[a-z0-9._%+-]+@[a-z0-9-]+(\.[a-z0-9-]+)*\.(com|in|org|co\.in)$"
MONTH_YEAR_PATTERN = r"^(%s) [0-9]{4}$" % "|".join(MONTHS)


def to_amount(value: Any) -> Decimal:
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


class PayslipIn(BaseModel):
    """Inbound payslip. Values are taken as sent: ``"50000"`` is not a salary."""

    model_config = ConfigDict(strict=True)

    employee_id: str = Field(..., pattern=r"^ATS0[0-9]{3}$")
    employee_name: str = Field(..., pattern=r"^[A-Za-z]+( [A-Za-z]+)*$")
    employee_email: str = Field(..., pattern=EMAIL_PATTERN)
    month_year: str = Field(..., pattern=MONTH_YEAR_PATTERN)
    designation: Designation
    office_location: OfficeLocation
    employment_type: EmploymentType
    date_of_joining: date = Field(..., strict=False)
    working_days: StrictInt = Field(..., ge=1, le=31)
    bank_name: str = Field(..., pattern=r"^[A-Za-z ]+$")
    pan_no: str = Field(..., pattern=r"^[A-Z]{5}[0-9]{4}[A-Z]$")
    bank_account_no: str = Field(..., pattern=r"^[0-9]{10,18}$")
    pf_no: str = Field(..., pattern=r"^[A-Z0-9]{12,22}$")
    uan_no: str = Field(..., pattern=r"^[0-9]{12}$")
    esic_no: str = Field(..., pattern=r"^[A-Z0-9]{10,17}$")
    basic_salary: float = Field(..., gt=0, le=MAX_AMOUNT, allow_inf_nan=False)
    hra: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    other_allowance: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    professional_tax: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    tds: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    provident_fund: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    lwp: float = Field(..., ge=0, le=MAX_AMOUNT, allow_inf_nan=False)
    other_deduction: float = Field(0, ge=0, le=MAX_AMOUNT, allow_inf_nan=False)

    @field_validator("employee_id")
    @classmethod
    def validate_employee_id(cls, value: str) -> str:
        if value == "ATS0000":
            raise ValueError("ATS0000 is reserved")
        return value

    @field_validator("date_of_joining", mode="before")
    @classmethod
    def reject_non_dates(cls, value: object) -> object:
        # lax date parsing would otherwise read integers as timestamps
        if not isinstance(value, (str, date)):
            raise ValueError("Date of joining must be an ISO date")
        return value

    @field_validator("date_of_joining")
    @classmethod
    def validate_joining_window(cls, value: date, info: ValidationInfo) -> date:
        today = (info.context or {}).get("today") or date.today()
        if not EARLIEST_JOINING_DATE <= value <= today:
            raise ValueError("Date of joining is outside the allowed window")
        return value

    @field_validator("basic_salary")
    @classmethod
    def validate_basic_salary(cls, value: float) -> float:
        if to_amount(value) <= 0:
            raise ValueError("Basic salary rounds to 0")
        return value


class PayslipOut(BaseModel):
    payslip_id: str
    employee_id: str
    employee_name: str
    employee_email: str
    month_year: str
    designation: str
    office_location: str
    employment_type: str
    date_of_joining: date
    working_days: int
    bank_name: str
    pan_no: str
    bank_account_no: str
    pf_no: str
    uan_no: str
    esic_no: str
    basic_salary: float
    hra: float
    other_allowance: float
    professional_tax: float
    tds: float
    provident_fund: float
    lwp: float
    other_deduction: float
    net_salary: float
    status: str


class PayslipCreated(BaseModel):
    message: str
    payslip: PayslipOut


class ErrorOut(BaseModel):
    error: str
