"""Gmail search-query builder and date helpers."""

from __future__ import annotations

import re
from datetime import datetime

from .errors import ValidationError
from .models import FilterSet

_DATE_RE = re.compile(r"\d{8}")
DATE_FORMAT = "%m%d%Y"


def parse_date(value: str) -> int:
    """Convert an ``MMDDYYYY`` date to a whole-second Unix timestamp.

    The timestamp is midnight at the start of that day in local time.
    """
    if not isinstance(value, str) or not _DATE_RE.fullmatch(value):
        raise ValidationError(f"Invalid date {value!r}: expected MMDDYYYY")
    try:
        moment = datetime.strptime(value, DATE_FORMAT)
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}: {exc}", cause=exc) from exc
    return int(moment.timestamp())


def build_query(filters: FilterSet) -> str:
    """Build a Gmail ``q`` search string.

    Terms appear in a fixed order (sender, recipient, after, before) and
    are joined by single spaces.  ``filters.id`` does not contribute: an
    id lookup bypasses search entirely.
    """
    terms: list[str] = []

    if filters.sender:
        terms.append(f"from:{filters.sender}")

    if filters.recipient:
        terms.append(f"to:{filters.recipient}")

    if filters.after is not None:
        terms.append(f"after:{filters.after}")

    if filters.before is not None:
        terms.append(f"before:{filters.before}")

    return " ".join(terms).strip()
