from __future__ import annotations

from typing import List

from .fifo_domain import CurrencyMismatchEvent, InsufficientLotsEvent


class EventRecorder:
    """Collect matching diagnostics without side effects."""

    def __init__(self) -> None:
        self._shortfalls: List[InsufficientLotsEvent] = []
        self._mismatches: List[CurrencyMismatchEvent] = []

    def record_shortfall(self, event: InsufficientLotsEvent) -> None:
        self._shortfalls.append(event)

    def record_mismatch(self, event: CurrencyMismatchEvent) -> None:
        self._mismatches.append(event)

    @property
    def shortfalls(self) -> list[InsufficientLotsEvent]:
        return self._shortfalls

    @property
    def mismatches(self) -> list[CurrencyMismatchEvent]:
        return self._mismatches

    def clear(self) -> None:
        self._shortfalls.clear()
        self._mismatches.clear()
