from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from ..common.rows import as_int, as_text, pick
from ..core.enums import PersonMode
from ..core.exceptions import ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Person:
    """Domain entity: a member of the workforce (ERP ``osebe`` row)."""

    id: int
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    email: str = ""
    alt_id: str = ""
    group_code: str = "UNKNOWN"
    mode: PersonMode = PersonMode.FULL

    @property
    def is_slim(self) -> bool:
        return self.mode is PersonMode.SLIM

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> Person:
        person_id = as_int(pick(row, "id", "person_id", "osebid"), default=0)
        if person_id <= 0:
            raise ValidationError(f"Person id must be a positive integer: {pick(row, 'id', 'person_id', 'osebid')!r}")

        return cls(
            id=person_id,
            first_name=as_text(pick(row, "first_name", "ime", default="")).strip(),
            last_name=as_text(pick(row, "last_name", "priimek", default="")).strip(),
            phone=as_text(pick(row, "phone", "tel_gsm", default="")).strip(),
            email=as_text(pick(row, "email", "e_mail", default="")).strip(),
            alt_id=as_text(pick(row, "alt_id", default="")).strip(),
            group_code=as_text(pick(row, "group_code", default="")).strip().upper() or "UNKNOWN",
            mode=PersonMode.parse(pick(row, "mode", default="FULL")),
        )


def build_people(people: Iterable[Person | Mapping[str, Any]]) -> dict[int, Person]:
    """Person id -> Person. Rows without a usable id are skipped (already rejected by validation)."""
    out: dict[int, Person] = {}
    for item in people:
        if isinstance(item, Person):
            person = item
        else:
            try:
                person = Person.from_row(item)
            except ValidationError as exc:
                logger.debug("Skipping person row: %s", exc)
                continue
        out[person.id] = person
    return dict(sorted(out.items()))
