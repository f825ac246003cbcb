"""Loguru setup for the user API process."""

import logging
import sys
from pathlib import Path

from loguru import logger

from src.user_api.runtime.config.config_data import LoggingConfig

CONSOLE_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Standard-library loggers and the level they are capped at
STDLIB_LEVELS = {
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}

NO_REQUEST = "-"


class InterceptHandler(logging.Handler):
    """Forward standard ``logging`` records (uvicorn, SQLAlchemy) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # log_requests already records every request
        if record.name == "uvicorn.access":
            return
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno
        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _default_request_id(record) -> None:
    record["extra"].setdefault("request_id", NO_REQUEST)


def _add_file_sink(config: LoggingConfig, verbose: bool) -> None:
    path = Path(config.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    as_json = config.format == "json"
    logger.add(
        str(path),
        level=config.level,
        format="{message}" if as_json else CONSOLE_FORMAT,
        serialize=as_json,
        rotation=f"{config.max_size_mb} MB",
        retention=config.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose,
        diagnose=verbose,
    )


def _route_stdlib_logging() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = []
        stdlib_logger.propagate = True
    for name, level in STDLIB_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging(config: LoggingConfig, environment: str) -> None:
    """Install the console and file sinks described by ``config``.

    Every record carries ``extra["request_id"]``: the id bound by the request
    middleware while a ``/api/users`` call is served, ``"-"`` otherwise.
    Tracebacks show local variables outside production only.
    """
    verbose = environment != "production"

    logger.remove()
    logger.configure(extra={"request_id": NO_REQUEST}, patcher=_default_request_id)
    logger.add(
        sys.stderr,
        level=config.level,
        format=CONSOLE_FORMAT,
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )
    if config.file:
        _add_file_sink(config, verbose)

    _route_stdlib_logging()

    logger.info(
        "Logging configured at {} ({} file: {}) for {}",
        config.level,
        config.format,
        config.file or "none",
        environment,
    )
