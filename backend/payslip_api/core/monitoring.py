import sentry_sdk

from payslip_api.core.config import settings


def configure_error_monitoring() -> None:
    if settings.sentry_dsn:
        sentry_sdk.init(
            dsn=settings.sentry_dsn,
            environment=settings.env,
            release=settings.version,
            traces_sample_rate=0.2,
            send_default_pii=False,
        )


def report_exception(exc: BaseException, **context: object) -> None:
    """Forward an unexpected failure to Sentry with request/storage context attached."""
    if not settings.sentry_dsn:
        return
    with sentry_sdk.new_scope() as scope:
        for key, value in context.items():
            scope.set_extra(key, value)
        sentry_sdk.capture_exception(exc)
