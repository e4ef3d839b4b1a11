r"""Backoff strategies for retry delays.

This package provides the backoff strategies used between retry attempts:
a constant (fixed) delay and an exponential delay.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
]

from reqctl.backoff.base import BaseBackoffStrategy
from reqctl.backoff.constant import ConstantBackoff
from reqctl.backoff.exponential import ExponentialBackoff
