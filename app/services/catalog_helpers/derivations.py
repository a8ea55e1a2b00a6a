# /app/services/catalog_helpers/derivations.py

"""
Pure display derivations for catalog records.

Nothing here is stored; each function takes a record (ORM row or read
model, anything with the right attributes) or a bare value and returns the
string a page shows.
"""

from datetime import date
from typing import Any, Optional

from ...config import CATALOG_PREFIX


def entity_url(kind: str, entity_id: str) -> str:
    """Canonical location of a single entity, e.g. `/catalog/book/<id>`."""
    return f"{CATALOG_PREFIX}/{kind}/{entity_id}"


def listing_url(kind_plural: str) -> str:
    return f"{CATALOG_PREFIX}/{kind_plural}"


def author_name(author: Any) -> str:
    """`"Family, First"`, or an empty string when either part is missing."""
    first_name = getattr(author, "first_name", None)
    family_name = getattr(author, "family_name", None)
    if not first_name or not family_name:
        return ""
    return f"{family_name}, {first_name}"


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(value: Optional[date]) -> str:
    """e.g. `March 2nd, 2024`; empty for a missing date."""
    if value is None:
        return ""
    return f"{value.strftime('%B')} {_ordinal(value.day)}, {value.year:04d}"


def format_form_date(value: Optional[date]) -> str:
    """The `yyyy-mm-dd` form used to prefill date inputs."""
    if value is None:
        return ""
    return value.isoformat()


def author_lifespan(author: Any) -> str:
    """
    `"<birth> - <death>"` with each side in long form, dropping whichever
    date is unknown. An author with neither date yields `" - "`.
    """
    lifespan = " - "
    date_of_birth = getattr(author, "date_of_birth", None)
    date_of_death = getattr(author, "date_of_death", None)
    if date_of_birth:
        lifespan = format_long_date(date_of_birth) + lifespan
    if date_of_death:
        lifespan = lifespan + format_long_date(date_of_death)
    return lifespan
