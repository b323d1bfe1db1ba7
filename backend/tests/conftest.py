from __future__ import annotations

import os

# Must be set before payslip_api.core.config is imported
os.environ.setdefault("PAYSLIP_ENV", "test")
os.environ["PAYSLIP_DATABASE_URL"] = "sqlite://"

from datetime import date

import pytest
from fastapi.testclient import TestClient

from payslip_api.db.session import build_engine
from payslip_api.domains.payslips.store import PayslipStore
from payslip_api.domains.payslips.validation import PayslipValidator
from payslip_api.main import app


def build_payload(**overrides) -> dict:
    payload = {
        "employee_id": "ATS0001",
        "employee_name": "John Doe",
        "employee_email": "john@example.com",
        "month_year": "January 2024",
        "designation": "Software Engineer",
        "office_location": "Hyderabad",
        "employment_type": "Permanent",
        "date_of_joining": "2022-03-01",
        "working_days": 22,
        "bank_name": "State Bank",
        "pan_no": "ABCDE1234F",
        "bank_account_no": "1234567890",
        "pf_no": "PF1234567890",
        "uan_no": "123456789012",
        "esic_no": "ESIC123456",
        "basic_salary": 50000,
        "hra": 20000,
        "other_allowance": 5000,
        "professional_tax": 200,
        "tds": 5000,
        "provident_fund": 3000,
        "lwp": 0,
        "other_deduction": 0,
    }
    payload.update(overrides)
    return payload


class SequenceRandom:
    """Stands in for random.Random and hands out the given numbers in order."""

    def __init__(self, *numbers: int) -> None:
        self.numbers = list(numbers)

    def randint(self, low: int, high: int) -> int:
        value = self.numbers.pop(0)
        assert low <= value <= high
        return value


@pytest.fixture
def make_payload():
    return build_payload


@pytest.fixture
def payload() -> dict:
    return build_payload()


@pytest.fixture
def sequence_random():
    return SequenceRandom


@pytest.fixture
def validator() -> PayslipValidator:
    return PayslipValidator(today=lambda: date(2024, 6, 30))


@pytest.fixture
def store():
    payslip_store = PayslipStore(build_engine("sqlite://"))
    payslip_store.open()
    yield payslip_store
    payslip_store.close()


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client
