"""Structured logging setup for the NusaDana API and CLI.

Every event carries ``app`` and ``environment`` next to the request id bound
by the web middleware, so logs from several deployments (a village office
server, the Supabase-hosted API) can share one sink.
"""

import logging
import os
import sys
from pathlib import Path
from typing import Any

import structlog

APP_NAME = "nusadana"

# Libraries that log every request or statement at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def add_app_context(environment: str):
    """Processor that stamps each event with the app name and environment."""

    def processor(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("app", APP_NAME)
        event_dict.setdefault("environment", environment)
        return event_dict

    return processor


def configure_logging(
    level: str | None = None,
    json_logs: bool | None = None,
    environment: str | None = None,
) -> None:
    """Configure structlog and stdlib logging.

    Args:
        level: Log level name; ``LOG_LEVEL`` or INFO when omitted
        json_logs: Render JSON lines; defaults to ``JSON_LOGS``, and to True in production
        environment: Deployment name; ``ENVIRONMENT`` or development when omitted
    """
    environment = environment or os.getenv("ENVIRONMENT", "development")
    if json_logs is None:
        json_logs = os.getenv("JSON_LOGS", str(environment == "production")).lower() == "true"
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_app_context(environment),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    log_file = Path("logs") / f"{APP_NAME}-{environment}.log"
    if log_file.parent.is_dir():
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(format="%(message)s", handlers=handlers, level=level)

    if level != "DEBUG":
        for name in NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
