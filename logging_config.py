"""
Centralized logging configuration for the Manufacturer Pack service.

Every record carries the thread name and the purchase order currently being
packed, so the log of one pack assembly can be pulled out of a busy server
log with a single grep.

Log Format:
    2026-03-02 10:15:30 [INFO    ] [MainThread] [PO-2024-017] services.pack_assembler - Rendered order sheet
    2026-03-02 10:15:31 [WARNING ] [MainThread] [-] modules.label_layout - Barcode fallback for 'X00...'

Usage:
    # At application startup
    from logging_config import setup_logging, get_logger

    setup_logging(log_level=logging.INFO, enable_file_logging=True)

    # In modules
    logger = get_logger(__name__)

    # Around the work for one purchase order
    with order_context("PO-2024-017"):
        logger.info("Assembling pack")
"""

import contextvars
import logging
import sys
import threading
from contextlib import contextmanager
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

ROOT_LOGGER_NAME = "manufacturer_pack"

_current_order: contextvars.ContextVar[str] = contextvars.ContextVar(
    "current_order", default="-"
)


# =============================================================================
# CONTEXT FILTER
# =============================================================================

class OrderContextFilter(logging.Filter):
    """
    Adds ``thread_name`` and ``po_number`` attributes to every record.

    ``po_number`` is "-" outside of an ``order_context()`` block.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.thread_name = threading.current_thread().name
        record.po_number = _current_order.get()
        return True


@contextmanager
def order_context(po_number: str) -> Iterator[None]:
    """Tag log records emitted inside the block with ``po_number``."""
    token = _current_order.set(po_number or "-")
    try:
        yield
    finally:
        _current_order.reset(token)


# =============================================================================
# LOGGING SETUP
# =============================================================================

def setup_logging(
    app_name: str = ROOT_LOGGER_NAME,
    log_level: int = logging.INFO,
    log_dir: Optional[Path] = None,
    enable_file_logging: bool = True,
) -> logging.Logger:
    """
    Configure application logging.

    Sets up a console handler, and optionally a rotating application log and
    a separate ERROR-only log under ``log_dir`` (default: ./logs).

    Args:
        app_name: Name of the root logger
        log_level: Minimum log level
        log_dir: Directory for log files
        enable_file_logging: Whether to write to log files

    Returns:
        Configured root logger instance
    """
    logger = logging.getLogger(app_name)
    logger.setLevel(log_level)
    logger.propagate = False

    # Allows re-configuration (tests, app factory called twice)
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)-8s] [%(thread_name)s] [%(po_number)s] %(name)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    context_filter = OrderContextFilter()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if enable_file_logging:
        if log_dir is None:
            log_dir = Path(__file__).parent / "logs"
        log_dir.mkdir(parents=True, exist_ok=True)

        app_log_file = log_dir / f"{app_name}.log"
        file_handler = RotatingFileHandler(
            filename=app_log_file,
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)

        error_handler = RotatingFileHandler(
            filename=log_dir / f"{app_name}_error.log",
            maxBytes=10 * 1024 * 1024,
            backupCount=5,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        error_handler.addFilter(context_filter)
        logger.addHandler(error_handler)

        logger.info(f"File logging enabled: {app_log_file}")

    logger.info(f"Logging configured at level {logging.getLevelName(log_level)}")
    return logger


# =============================================================================
# LOGGER FACTORY FUNCTIONS
# =============================================================================

def get_logger(name: str) -> logging.Logger:
    """
    Get a child logger under the application namespace.

    Example:
        logger = get_logger("services.pack_assembler")
        # Logger name: "manufacturer_pack.services.pack_assembler"
    """
    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def get_order_logger(po_number: str) -> logging.Logger:
    """
    Get a logger dedicated to one purchase order.

    Slashes and dots in the order number would create nested logger names,
    so they are replaced with dashes.
    """
    safe = (po_number or "unknown").replace(".", "-").replace("/", "-")
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.order.{safe}")
