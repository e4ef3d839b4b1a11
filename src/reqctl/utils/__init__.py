r"""Utility functions for request execution and logging."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "clear_correlation_id",
    "clone_request",
    "get_branch_name",
    "get_correlation_id",
    "log_structured",
    "set_branch_name",
    "set_correlation_id",
]

from reqctl.utils.request import clone_request
from reqctl.utils.structured_logging import (
    StructuredFormatter,
    clear_correlation_id,
    get_branch_name,
    get_correlation_id,
    log_structured,
    set_branch_name,
    set_correlation_id,
)
