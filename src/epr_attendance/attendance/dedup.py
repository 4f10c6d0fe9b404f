from __future__ import annotations

from typing import Iterable

from .model import Interval


def flag_duplicates(intervals: Iterable[Interval]) -> list[Interval]:
    """Flag repeated dedup signatures, keeping input order.

    The first occurrence is the original; every later match is a duplicate. When
    the notes differ (empty vs non-empty included) both sides become conflicts.
    """
    out = list(intervals)
    first_seen: dict[tuple, int] = {}

    for idx, rec in enumerate(out):
        sig = rec.signature
        original_idx = first_seen.get(sig)
        if original_idx is None:
            first_seen[sig] = idx
            continue

        original = out[original_idx]
        notes_differ = original.note != rec.note
        out[idx] = rec.with_flags(
            duplicate=True,
            needs_review=True,
            conflict=rec.flags.conflict or notes_differ,
        )
        if notes_differ:
            out[original_idx] = original.with_flags(conflict=True, needs_review=True)

    return out
