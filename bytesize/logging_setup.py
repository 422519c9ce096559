from __future__ import annotations

import contextlib
import contextvars
import logging
import os
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Iterator, Optional

from bytesize.env_loader import size_from_env
from bytesize.units import MEGABYTE

DEFAULT_CATEGORY = "CONFIG"
DEFAULT_LOG_MAX_BYTES = 10 * MEGABYTE
CATEGORIES = {
    "PARSE",
    "FORMAT",
    "CONFIG",
    "CLI",
    "ERRORS",
}
LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(category)s | cid=%(correlation_id)s | %(name)s | "
    "%(filename)s:%(lineno)d %(funcName)s() | %(message)s"
)

_correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id", default="-")
_category_var: contextvars.ContextVar[str] = contextvars.ContextVar("category", default=DEFAULT_CATEGORY)


def short_uuid() -> str:
    return uuid.uuid4().hex[:8]


def get_correlation_id() -> str:
    return _correlation_id_var.get()


def get_category() -> str:
    return _category_var.get()


@contextlib.contextmanager
def correlation_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    cid = correlation_id or short_uuid()
    token = _correlation_id_var.set(cid)
    try:
        yield cid
    finally:
        _correlation_id_var.reset(token)


@contextlib.contextmanager
def category_context(category: str) -> Iterator[None]:
    token = _category_var.set(category if category in CATEGORIES else DEFAULT_CATEGORY)
    try:
        yield
    finally:
        _category_var.reset(token)


class ContextEnricherFilter(logging.Filter):
    """
    Ensures every LogRecord has:
      - category
      - correlation_id
    """

    def filter(self, record: logging.LogRecord) -> bool:  # noqa: A003
        if not getattr(record, "category", None):
            record.category = get_category()
        if not getattr(record, "correlation_id", None):
            record.correlation_id = get_correlation_id()
        return True


class CategoryLoggerAdapter(logging.LoggerAdapter):
    def __init__(self, logger: logging.Logger, category: str) -> None:
        super().__init__(logger, extra={"category": category})

    def process(self, msg, kwargs):
        extra = kwargs.get("extra", {})
        if "category" not in extra:
            extra["category"] = self.extra.get("category") or get_category()
        if "correlation_id" not in extra:
            extra["correlation_id"] = get_correlation_id()
        kwargs["extra"] = extra
        return msg, kwargs


def _level_from_env() -> int:
    level_name = os.environ.get("BYTESIZE_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    return level if isinstance(level, int) else logging.INFO


def setup_logging() -> None:
    """
    Central logging setup.

    Logs go to stderr; BYTESIZE_LOG_FILE adds a rotating file handler whose
    rollover size comes from BYTESIZE_LOG_MAX_BYTES (e.g. "5MB").
    Calling it again only refreshes the level from BYTESIZE_LOG_LEVEL.
    """
    level = _level_from_env()
    root_logger = logging.getLogger()
    log_file = os.environ.get("BYTESIZE_LOG_FILE", "").strip()
    max_bytes = size_from_env("BYTESIZE_LOG_MAX_BYTES", DEFAULT_LOG_MAX_BYTES)

    if getattr(root_logger, "_bytesize_logging_installed", False):
        root_logger.setLevel(level)
        for h in root_logger.handlers:
            h.setLevel(level)
        return
    root_logger.setLevel(level)

    formatter = logging.Formatter(fmt=LOG_FORMAT)
    enricher = ContextEnricherFilter()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.addFilter(enricher)
    root_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            path,
            maxBytes=max_bytes,
            backupCount=10,
            encoding="utf-8",
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(enricher)
        root_logger.addHandler(file_handler)

    root_logger._bytesize_logging_installed = True  # type: ignore[attr-defined]


def get_logger(name: str, category: str = DEFAULT_CATEGORY) -> CategoryLoggerAdapter:
    return CategoryLoggerAdapter(logging.getLogger(name), category if category in CATEGORIES else DEFAULT_CATEGORY)
