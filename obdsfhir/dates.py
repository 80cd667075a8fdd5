# obdsfhir/dates.py
"""Tolerant parsing of ADT ``DD.MM.YYYY`` dates.

Registry exports may leave the day, or both day and month, unknown and
encode them as ``00``.  Such dates are moved to the middle of the known
period before parsing:

    - ``00.00.2022`` -> ``01.07.2022``
    - ``00.04.2022`` -> ``15.04.2022``

The result is a UTC-midnight timestamp flagged with day precision so that
consumers do not read meaning into the time of day.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Optional

_UNKNOWN_DAY_AND_MONTH = re.compile(r"00\.00\.(\d{4})", re.ASCII)
_UNKNOWN_DAY = re.compile(r"00\.(\d{2}\.\d{4})", re.ASCII)
_ADT_DATE = re.compile(r"\d{2}\.\d{2}\.\d{4}", re.ASCII)


class AdtDateFormatError(ValueError):
    """Raised for a non-blank date that is not a valid ``DD.MM.YYYY`` date."""

    def __init__(self, value: str, reason: str = "") -> None:
        self.value = value
        message = f"Invalid ADT date {value!r}, expected DD.MM.YYYY"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


@dataclass(frozen=True)
class DayPrecisionDateTime:
    """A UTC timestamp of which only the calendar day is meaningful."""

    value: datetime
    precision: str = "day"

    @property
    def date(self) -> date:
        return self.value.date()

    def to_fhir(self) -> str:
        """Render as a FHIR ``dateTime`` with day precision (``YYYY-MM-DD``)."""
        return self.value.strftime("%Y-%m-%d")


def repair_adt_date(adt_date: str) -> str:
    """Replace unknown (``00``) day and month parts with mid-period defaults."""
    match = _UNKNOWN_DAY_AND_MONTH.fullmatch(adt_date)
    if match:
        return f"01.07.{match.group(1)}"
    match = _UNKNOWN_DAY.fullmatch(adt_date)
    if match:
        return f"15.{match.group(1)}"
    return adt_date


def normalize_adt_date(adt_date: Optional[str]) -> Optional[DayPrecisionDateTime]:
    """Convert an ADT date string to a day-precision UTC timestamp.

    Parameters
    ----------
    adt_date:
        Date in ``DD.MM.YYYY`` form, possibly with ``00`` for an unknown
        day or unknown day and month.

    Returns
    -------
    DayPrecisionDateTime or None
        ``None`` for a missing or blank value.

    Raises
    ------
    AdtDateFormatError
        If the value is neither blank nor a valid calendar date after
        the unknown-part repairs.
    """
    if adt_date is None or not adt_date.strip():
        return None

    repaired = repair_adt_date(adt_date)
    if not _ADT_DATE.fullmatch(repaired):
        raise AdtDateFormatError(adt_date)
    try:
        parsed = datetime.strptime(repaired, "%d.%m.%Y")
    except ValueError as exc:
        raise AdtDateFormatError(adt_date, str(exc)) from exc

    return DayPrecisionDateTime(value=parsed.replace(tzinfo=timezone.utc))
