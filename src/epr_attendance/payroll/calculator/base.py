from __future__ import annotations

from abc import ABC, abstractmethod

from ..model import PeriodRecord


class ReconciliationPolicy(ABC):
    """Calculator interface (Strategy Pattern for monthly settlement)."""

    @abstractmethod
    def reconcile(self, record: PeriodRecord) -> PeriodRecord:
        raise NotImplementedError
