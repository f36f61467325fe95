"""
Structured Logging for the Scheduler Extender Client

Loggers are structlog bound loggers routed through the standard library. The
host scheduler process calls ``setup_logging`` once; until then structlog's
defaults apply.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import LoggingConfig


def setup_logging(config: Optional[LoggingConfig] = None):
    """Setup structured logging for the extender client."""
    if config is None:
        config = LoggingConfig.from_env()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            (
                structlog.processors.JSONRenderer()
                if config.log_format == "json"
                else structlog.dev.ConsoleRenderer()
            ),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, config.log_level))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    # Rendering happens in structlog; the handler only writes the line.
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)

    logging.getLogger("scheduler_extender").debug(
        f"Logging initialized - log_level={config.log_level}, log_format={config.log_format}"
    )


def get_logger(name: str) -> structlog.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
