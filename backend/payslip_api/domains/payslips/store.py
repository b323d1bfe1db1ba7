from __future__ import annotations

import random
from typing import Any, Mapping

from opentelemetry import trace
from sqlalchemy import func, inspect, or_, select, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session
from tenacity import RetryCallState, Retrying, retry_if_exception_type, stop_after_attempt, wait_fixed

from payslip_api.core.errors import (
    DuplicateNaturalKeyError,
    DuplicatePayslipIdError,
    PayslipNotFoundError,
    PayslipValidationError,
    StorageError,
)
from payslip_api.core.logging import get_logger
from payslip_api.core.observability import PayslipMetrics
from payslip_api.db.session import Base, build_session_factory, session_scope
from payslip_api.domains.payslips.schemas import PayslipOut
from payslip_api.domains.payslips.validation import (
    MONEY_FIELDS,
    MONTHS,
    compute_net_salary,
    parse_month_year,
)
from payslip_api.models.payslip import Payslip

logger = get_logger(__name__)
tracer = trace.get_tracer(__name__)
store_metrics = PayslipMetrics()

GENERATED = "Generated"


def generate_payslip_id(month_year: str, rng: random.Random | None = None) -> str:
    """``PSL-<MONTHYEAR>-<nnn>``, e.g. ``PSL-JANUARY2024-473``."""
    number = (rng or random).randint(100, 999)
    return f"PSL-{month_year.replace(' ', '').upper()}-{number}"


def _to_schema(row: Payslip) -> PayslipOut:
    data = {column.key: getattr(row, column.key) for column in inspect(Payslip).column_attrs}
    data.pop("created_at", None)
    for name in MONEY_FIELDS + ("net_salary",):
        data[name] = float(data[name])
    return PayslipOut(**data)


def _sort_key(row: Payslip) -> tuple[int, int]:
    year, month = parse_month_year(row.month_year)
    return year, month


class PayslipStore:
    """Persistence for payslips.

    Uniqueness of (employee_id, month_year) is enforced by the table's
    constraint; the lookup in ``create`` only gives the common case a clean
    error before the insert is attempted.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        id_attempts: int = 1,
        rng: random.Random | None = None,
    ) -> None:
        if id_attempts < 1:
            raise ValueError("id_attempts must be at least 1")
        self.engine = engine
        self.id_attempts = id_attempts
        self._rng = rng
        self._sessions = build_session_factory(engine)
        self._metrics = store_metrics

    def open(self) -> None:
        Base.metadata.create_all(bind=self.engine)
        logger.info("payslip_store_opened", url=self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()
        logger.info("payslip_store_closed")

    def ping(self) -> bool:
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as exc:
            logger.warning("payslip_store_ping_failed", error=str(exc))
            return False
        return True

    def pool_status(self) -> str:
        try:
            return self.engine.pool.status()
        except NotImplementedError:
            return type(self.engine.pool).__name__

    def create(self, record: Mapping[str, Any]) -> PayslipOut:
        """Persist a validated record and return the stored payslip."""
        employee_id = record["employee_id"]
        month_year = record["month_year"]
        with tracer.start_as_current_span("payslip.create") as span:
            span.set_attribute("payslip.employee_id", employee_id)
            span.set_attribute("payslip.month_year", month_year)

            net_salary = compute_net_salary(record)
            for attempt in range(1, self.id_attempts + 1):
                payslip_id = generate_payslip_id(month_year, self._rng)
                try:
                    created = self._insert(record, payslip_id, net_salary)
                except DuplicatePayslipIdError:
                    logger.warning(
                        "payslip_id_collision",
                        payslip_id=payslip_id,
                        attempt=attempt,
                        max_attempts=self.id_attempts,
                    )
                    if attempt == self.id_attempts:
                        self._metrics.record_duplicate(DuplicatePayslipIdError.kind)
                        raise
                    continue
                except DuplicateNaturalKeyError:
                    self._metrics.record_duplicate(DuplicateNaturalKeyError.kind)
                    logger.info(
                        "payslip_duplicate_rejected",
                        employee_id=employee_id,
                        month_year=month_year,
                    )
                    raise

                span.set_attribute("payslip.id", created.payslip_id)
                self._metrics.record_created(month_year)
                logger.info(
                    "payslip_created",
                    payslip_id=created.payslip_id,
                    employee_id=employee_id,
                    month_year=month_year,
                    net_salary=created.net_salary,
                )
                return created

    def _insert(self, record: Mapping[str, Any], payslip_id: str, net_salary) -> PayslipOut:
        employee_id = record["employee_id"]
        month_year = record["month_year"]
        try:
            with session_scope(self._sessions) as db:
                if self._natural_key_exists(db, employee_id, month_year):
                    raise DuplicateNaturalKeyError(employee_id, month_year)

                row = Payslip(
                    payslip_id=payslip_id,
                    employee_id=employee_id,
                    employee_name=record["employee_name"],
                    employee_email=record["employee_email"],
                    month_year=month_year,
                    designation=record["designation"],
                    office_location=record["office_location"],
                    employment_type=record["employment_type"],
                    date_of_joining=record["date_of_joining"],
                    working_days=record["working_days"],
                    bank_name=record["bank_name"],
                    pan_no=record["pan_no"],
                    bank_account_no=record["bank_account_no"],
                    pf_no=record["pf_no"],
                    uan_no=record["uan_no"],
                    esic_no=record["esic_no"],
                    basic_salary=record["basic_salary"],
                    hra=record["hra"],
                    other_allowance=record["other_allowance"],
                    professional_tax=record["professional_tax"],
                    tds=record["tds"],
                    provident_fund=record["provident_fund"],
                    lwp=record["lwp"],
                    other_deduction=record["other_deduction"],
                    net_salary=net_salary,
                    status=GENERATED,
                )
                db.add(row)
                db.flush()
                created = _to_schema(row)
        except IntegrityError as exc:
            raise self._classify_conflict(exc, payslip_id, employee_id, month_year) from exc
        except SQLAlchemyError as exc:
            raise self._storage_failure("payslip_create_failed", exc, payslip_id=payslip_id) from exc
        return created

    def _natural_key_exists(self, db: Session, employee_id: str, month_year: str) -> bool:
        stmt = select(Payslip.payslip_id).where(
            Payslip.employee_id == employee_id,
            Payslip.month_year == month_year,
        )
        return db.execute(stmt).first() is not None

    def _classify_conflict(
        self, exc: IntegrityError, payslip_id: str, employee_id: str, month_year: str
    ) -> Exception:
        """Work out which constraint rejected an insert that passed the pre-check."""
        try:
            with session_scope(self._sessions) as db:
                if self._natural_key_exists(db, employee_id, month_year):
                    return DuplicateNaturalKeyError(employee_id, month_year)
                if db.get(Payslip, payslip_id) is not None:
                    return DuplicatePayslipIdError(payslip_id)
        except SQLAlchemyError as lookup_exc:
            return self._storage_failure("payslip_conflict_lookup_failed", lookup_exc, payslip_id=payslip_id)
        return self._storage_failure("payslip_integrity_error", exc, payslip_id=payslip_id)

    def _storage_failure(self, event: str, exc: Exception, **context: Any) -> StorageError:
        logger.error(
            event,
            error=str(exc),
            db_connection=self.pool_status(),
            exc_info=exc,
            **context,
        )
        return StorageError(str(exc), details={"event": event, **context})

    def get_by_id(self, payslip_id: str) -> PayslipOut:
        with tracer.start_as_current_span("payslip.get"):
            try:
                with session_scope(self._sessions) as db:
                    row = db.get(Payslip, payslip_id)
                    if row is None:
                        raise PayslipNotFoundError(payslip_id)
                    return _to_schema(row)
            except SQLAlchemyError as exc:
                raise self._storage_failure("payslip_get_failed", exc, payslip_id=payslip_id) from exc

    def list(
        self,
        search: str | None = None,
        month: int | None = None,
        year: int | None = None,
    ) -> list[PayslipOut]:
        """Filtered history, newest period first, then by employee ID."""
        if month is not None and not 1 <= month <= 12:
            raise PayslipValidationError("month", "Month must be between 1 and 12")
        if year is not None and not 1000 <= year <= 9999:
            raise PayslipValidationError("year", "Year must be a 4-digit number")

        stmt = select(Payslip)
        if search:
            needle = search.lower()
            stmt = stmt.where(
                or_(
                    func.lower(Payslip.employee_id).contains(needle, autoescape=True),
                    func.lower(Payslip.employee_name).contains(needle, autoescape=True),
                )
            )
        if month is not None:
            stmt = stmt.where(Payslip.month_year.startswith(f"{MONTHS[month - 1]} ", autoescape=True))
        if year is not None:
            stmt = stmt.where(Payslip.month_year.endswith(f" {year}", autoescape=True))
        stmt = stmt.order_by(Payslip.employee_id.asc())

        with tracer.start_as_current_span("payslip.list") as span:
            try:
                with session_scope(self._sessions) as db:
                    rows = db.execute(stmt).scalars().all()
                    # stable sort keeps the employee_id order within a period
                    rows = sorted(rows, key=_sort_key, reverse=True)
                    results = [_to_schema(row) for row in rows]
            except SQLAlchemyError as exc:
                raise self._storage_failure("payslip_list_failed", exc, search=search, month=month, year=year) from exc
            span.set_attribute("payslip.results", len(results))
        return results


def _log_connect_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "database_connection_retry",
        attempt=retry_state.attempt_number,
        retry_in=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(retry_state.outcome.exception()) if retry_state.outcome else None,
    )


def open_with_retry(store: PayslipStore, *, attempts: int, delay: float) -> None:
    """Open the store, retrying while the database refuses connections."""
    retrying = Retrying(
        stop=stop_after_attempt(attempts),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(OperationalError),
        before_sleep=_log_connect_retry,
        reraise=True,
    )
    try:
        retrying(store.open)
    except OperationalError as exc:
        logger.error("database_connection_failed", attempts=attempts, error=str(exc))
        raise
