from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payslip_api.api.routes import health
from payslip_api.core.config import settings
from payslip_api.core.errors import PayslipError, StorageError
from payslip_api.core.logging import configure_logging, get_logger
from payslip_api.core.monitoring import configure_error_monitoring, report_exception
from payslip_api.core.observability import configure_observability
from payslip_api.db.session import build_engine
from payslip_api.domains.payslips.router import router as payslip_router
from payslip_api.domains.payslips.store import PayslipStore, open_with_retry
from payslip_api.seed.seed_data import seed

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

INTERNAL_ERROR = {"error": StorageError.public_message}


@asynccontextmanager
async def lifespan(app: FastAPI):
    store = PayslipStore(
        build_engine(settings.database_url),
        id_attempts=settings.payslip_id_attempts,
    )
    open_with_retry(
        store,
        attempts=settings.db_connect_attempts,
        delay=settings.db_connect_retry_delay,
    )
    if settings.seed_sample_data:
        seed(store)
    app.state.store = store
    logger.info("startup_complete", env=settings.env)
    try:
        yield
    finally:
        store.close()
        logger.info("shutdown_complete")


app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=bool(settings.cors_origins),
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    report_exception(exc, path=request.url.path, **exc.details)
    return JSONResponse(status_code=exc.status_code, content=INTERNAL_ERROR)


@app.exception_handler(PayslipError)
async def payslip_error_handler(request: Request, exc: PayslipError) -> JSONResponse:
    logger.info(
        "request_rejected",
        path=request.url.path,
        error_type=type(exc).__name__,
        message=exc.message,
        **exc.details,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = first.get("loc", ("body",))[-1]
    message = f"{field}: {first.get('msg', 'Invalid request')}"
    logger.info("request_malformed", path=request.url.path, errors=len(errors))
    return JSONResponse(status_code=400, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    report_exception(exc, path=request.url.path)
    return JSONResponse(status_code=500, content=INTERNAL_ERROR)


app.include_router(health.router)
app.include_router(payslip_router)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Payslip API running", "environment": settings.env}
