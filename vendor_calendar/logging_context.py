"""Vendor correlation logging context.

Attaches the vendor currently being loaded to every log record so a
single calendar's load, aggregation and mutations can be traced across
modules. ``configure_logging`` installs the filter on the root handlers,
so records from any logger carry ``vendor_id`` and ``LOG_FORMAT`` can
always be rendered.

Usage:
    from vendor_calendar.logging_context import get_vendor_logger, set_vendor_id

    set_vendor_id("V1")
    logger = get_vendor_logger(__name__)
    logger.info("Loading month")  # ... [V1] INFO: Loading month
"""

import logging
from contextvars import ContextVar

LOG_FORMAT = "%(asctime)s [%(name)s] [%(vendor_id)s] %(levelname)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

_vendor_id: ContextVar[str] = ContextVar("vendor_id", default="NO_VENDOR")


def set_vendor_id(vendor_id: str) -> None:
    """Set the vendor correlation ID for the current async context."""
    _vendor_id.set(vendor_id)


def get_vendor_id() -> str:
    return _vendor_id.get()


class VendorIdFilter(logging.Filter):
    """Stamps the current vendor onto records that reach it."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.vendor_id = _vendor_id.get()  # type: ignore[attr-defined]
        return True


def attach_vendor_filter(handler: logging.Handler) -> logging.Handler:
    """Add a VendorIdFilter to ``handler`` unless it already has one."""
    if not any(isinstance(f, VendorIdFilter) for f in handler.filters):
        handler.addFilter(VendorIdFilter())
    return handler


def configure_logging(level: int = logging.INFO) -> None:
    """Configure root logging with the vendor-aware format.

    Handler filters see records propagated from every logger, including
    ones created with plain ``logging.getLogger``.
    """
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for handler in logging.getLogger().handlers:
        attach_vendor_filter(handler)


def get_vendor_logger(name: str) -> logging.Logger:
    """Return a logger with the VendorIdFilter attached.

    The filter adds ``vendor_id`` to each record so formatters can
    include ``%(vendor_id)s`` in their format string.
    """
    logger = logging.getLogger(name)
    if not any(isinstance(f, VendorIdFilter) for f in logger.filters):
        logger.addFilter(VendorIdFilter())
    return logger
