from __future__ import annotations

import datetime as dt
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Union


class Motive(str, Enum):
    """Government-defined justification categories, in checkbox order."""

    PRO = "pro"
    SHOP = "shop"
    HEALTH = "health"
    FAMILY = "family"
    BRIEF = "brief"
    ADMINISTRATIVE = "administrative"
    TIG = "tig"


def parse_motives(values: Iterable[Union[Motive, str]]) -> FrozenSet[Motive]:
    """Convert motive codes to `Motive` members; unknown codes raise ValueError."""
    motives = set()
    for value in values:
        if isinstance(value, Motive):
            motives.add(value)
            continue
        code = str(value).strip().lower()
        try:
            motives.add(Motive(code))
        except ValueError:
            allowed = ", ".join(m.value for m in Motive)
            raise ValueError(f"Unknown motive '{value}' (expected one of: {allowed})") from None
    return frozenset(motives)


@dataclass(frozen=True)
class CertificateRecord:
    """Source data for one certificate instance."""

    first_name: str
    last_name: str
    birthdate: str
    birthplace: str
    full_address: str
    city: str
    zip_code: str = ""
    motives: FrozenSet[Motive] = field(default_factory=frozenset)
    date: str = ""
    hour: str = ""
    minute: str = ""

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @classmethod
    def from_form(
        cls,
        *,
        first_name: str,
        last_name: str,
        birthdate: str,
        birthplace: str,
        full_address: str,
        city: str,
        outing: dt.datetime,
        motives: Iterable[Union[Motive, str]] = (),
        zip_code: str = "",
    ) -> "CertificateRecord":
        """Build a record from raw form values, formatting the outing timestamp."""
        return cls(
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            birthdate=birthdate.strip(),
            birthplace=birthplace.strip(),
            full_address=full_address.strip(),
            city=city.strip(),
            zip_code=zip_code.strip(),
            motives=parse_motives(motives),
            date=outing.strftime("%d/%m/%Y"),
            hour=outing.strftime("%H"),
            minute=outing.strftime("%M"),
        )
