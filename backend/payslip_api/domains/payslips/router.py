from typing import Any

from fastapi import APIRouter, Body, Depends, Query, Request

from payslip_api.core.config import settings
from payslip_api.core.errors import PayslipValidationError
from payslip_api.domains.payslips.schemas import ErrorOut, PayslipCreated, PayslipOut
from payslip_api.domains.payslips.store import PayslipStore
from payslip_api.domains.payslips.validation import PayslipValidator

router = APIRouter(prefix="/api/payslips", tags=["payslips"])

ERROR_RESPONSES = {
    400: {"model": ErrorOut},
    500: {"model": ErrorOut},
}


def get_store(request: Request) -> PayslipStore:
    return request.app.state.store


def get_validator() -> PayslipValidator:
    return PayslipValidator(require_other_deduction=settings.other_deduction_required)


def _optional_int(name: str, value: str | None) -> int | None:
    # the history screen sends empty strings for unused filters
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError:
        raise PayslipValidationError(name, f"{name.capitalize()} must be a number") from None


@router.post("", response_model=PayslipCreated, status_code=201, responses=ERROR_RESPONSES)
def create_payslip(
    payload: dict[str, Any] = Body(...),
    store: PayslipStore = Depends(get_store),
    validator: PayslipValidator = Depends(get_validator),
) -> PayslipCreated:
    record = validator.validate(payload)
    payslip = store.create(record)
    return PayslipCreated(message="Payslip generated successfully", payslip=payslip)


@router.get("/history", response_model=list[PayslipOut], responses=ERROR_RESPONSES)
def payslip_history(
    search: str | None = Query(default=None),
    month: str | None = Query(default=None),
    year: str | None = Query(default=None),
    store: PayslipStore = Depends(get_store),
) -> list[PayslipOut]:
    return store.list(
        search=search or None,
        month=_optional_int("month", month),
        year=_optional_int("year", year),
    )


@router.get("/{payslip_id}", response_model=PayslipOut, responses={404: {"model": ErrorOut}})
def get_payslip(payslip_id: str, store: PayslipStore = Depends(get_store)) -> PayslipOut:
    return store.get_by_id(payslip_id)
