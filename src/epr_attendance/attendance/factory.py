from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import NormalizationStrategy
from .strategies.onsite_strategy import OnSiteWorkdayStrategy
from .strategies.raw_strategy import RawIntervalStrategy


@dataclass
class NormalizationStrategyFactory:
    """Factory Pattern: choose the normalization strategy for one interval."""

    def for_interval(self, *, is_workday: bool, is_wfh: bool, is_split_shift: bool) -> NormalizationStrategy:
        # split shifts are exempt from discipline even on workdays
        if is_split_shift:
            return RawIntervalStrategy()
        if is_workday and not is_wfh:
            return OnSiteWorkdayStrategy()
        return RawIntervalStrategy()
