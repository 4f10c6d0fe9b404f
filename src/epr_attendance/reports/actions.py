from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..daily.model import DailyRecord


@dataclass(frozen=True)
class ActionItem:
    person_id: int
    work_date: str
    reason_codes: str = ""


@dataclass(frozen=True)
class ActionsSeed:
    """Keys an external action-queue builder turns into manager tasks."""

    missing_days: tuple[ActionItem, ...] = ()
    needs_review_days: tuple[ActionItem, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.missing_days and not self.needs_review_days


def build_actions_seed(daily: Iterable[DailyRecord]) -> ActionsSeed:
    missing: list[ActionItem] = []
    review: list[ActionItem] = []
    for d in sorted(daily, key=lambda r: r.key):
        if d.missing_attendance_day:
            missing.append(ActionItem(d.person_id, d.work_date, d.reason_codes))
        if d.needs_review:
            review.append(ActionItem(d.person_id, d.work_date, d.review_reason_codes))
    return ActionsSeed(missing_days=tuple(missing), needs_review_days=tuple(review))
