import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """JSON lines on stdout; SQLAlchemy's own engine logger stays at WARNING."""
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=False,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.BoundLogger:
    # initial values stay lazy, so loggers created at import follow configure_logging
    return structlog.get_logger(name, logger_name=name)
