from payslip_api.core.config import settings
from payslip_api.core.errors import DuplicatePayslipError
from payslip_api.core.logging import get_logger
from payslip_api.domains.payslips.store import PayslipStore
from payslip_api.domains.payslips.validation import PayslipValidator

logger = get_logger(__name__)

SAMPLE_PAYSLIPS = [
    {
        "employee_id": "ATS0001",
        "employee_name": "John Doe",
        "employee_email": "john@example.com",
        "month_year": "January 2024",
        "designation": "Software Engineer",
        "office_location": "Hyderabad",
        "employment_type": "Permanent",
        "date_of_joining": "2021-01-15",
        "working_days": 22,
        "bank_name": "State Bank",
        "pan_no": "ABCDE1234F",
        "bank_account_no": "1234567890",
        "pf_no": "PF1234567890",
        "uan_no": "123456789012",
        "esic_no": "ESIC123456",
        "basic_salary": 50000.00,
        "hra": 20000.00,
        "other_allowance": 5000.00,
        "professional_tax": 200.00,
        "tds": 5000.00,
        "provident_fund": 3000.00,
        "lwp": 0.00,
        "other_deduction": 0.00,
    },
]


def seed(store: PayslipStore, validator: PayslipValidator | None = None) -> int:
    """Insert the sample payslips, skipping any that already exist."""
    validator = validator or PayslipValidator(require_other_deduction=settings.other_deduction_required)
    created = 0
    for raw in SAMPLE_PAYSLIPS:
        try:
            store.create(validator.validate(raw))
        except DuplicatePayslipError:
            logger.info("seed_payslip_skipped", employee_id=raw["employee_id"], month_year=raw["month_year"])
            continue
        created += 1
    return created
