"""
Structured logging for the persisted query pipeline.

Every module logs through structlog with snake_case event names and
keyword fields so request outcomes (saved, resolved, not found) can be
filtered without parsing free text.
"""

import logging

import structlog


_CONFIGURED = False


def configure_logging(level: str = "INFO") -> None:
    """
    Configure stdlib logging and structlog once per process.

    Args:
        level: Log level name (e.g. "INFO", "DEBUG")
    """
    global _CONFIGURED

    if _CONFIGURED:
        return

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(message)s",
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str):
    """Return a structlog logger bound to a module name."""
    return structlog.get_logger(name)
