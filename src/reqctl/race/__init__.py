r"""Delayed parallel racing of two attempt sequences."""

from __future__ import annotations

__all__ = ["HEDGE", "PRIMARY", "RaceCoordinator", "WriteOnceSlot"]

from reqctl.race.coordinator import HEDGE, PRIMARY, RaceCoordinator
from reqctl.race.gate import WriteOnceSlot
