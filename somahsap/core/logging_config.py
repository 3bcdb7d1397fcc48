# somahsap/core/logging_config.py
import logging
import sys

import structlog


def setup_logging(level: str = "INFO") -> None:
    """
    Configure structlog + standaard logging.
    Logs gaan als JSON naar stdout (de hosting pakt dit automatisch op).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.add_logger_name,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str):
    return structlog.get_logger(name)


# Globale logger die je overal kunt importeren
logger = structlog.get_logger("somahsap")
