"""Structured logging helpers."""

import logging
from typing import Any

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str | int = "INFO") -> None:
    """Configure root logging for CLI runs."""
    if isinstance(level, str):
        level = level.upper()
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def build_log_context(
    *,
    user_id: str | None = None,
    org_id: str | None = None,
    inspection_id: str | None = None,
    workflow_id: str | None = None,
    batch_id: str | None = None,
) -> dict[str, Any]:
    """Return a log context dict for use as ``extra=``."""
    context: dict[str, Any] = {}
    if user_id:
        context["user_id"] = user_id
    if org_id:
        context["org_id"] = org_id
    if inspection_id:
        context["inspection_id"] = inspection_id
    if workflow_id:
        context["workflow_id"] = workflow_id
    if batch_id:
        context["batch_id"] = batch_id
    return context
