# /app/models/form_model.py

"""
Shared data contracts for form handling: the field error record, the
redirect outcome, the form view model, and reusable field rules for the
per-entity form schemas.
"""

from datetime import date
from typing import Any, Callable, Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_core import PydanticCustomError


class FieldError(BaseModel):
    """A single violated rule, reported against the form field it belongs to."""
    field: str
    message: str


class Redirect(BaseModel):
    """Successful outcome of a write: where the caller should go next."""
    location: str = Field(..., description="Canonical path of the affected entity or listing.")


class FormPage(BaseModel):
    """
    The view model for a create/update form.

    `entity` holds the (sanitized) candidate values, `choices` the selectable
    reference lists keyed by field name, each option carrying a `checked`
    flag for pre-selection.
    """
    title: str
    entity: Optional[Dict[str, Any]] = None
    choices: Dict[str, List[Dict[str, Any]]] = Field(default_factory=dict)
    errors: List[FieldError] = Field(default_factory=list)


# --- Reusable Field Rules ---
# Each factory returns a plain callable meant for `AfterValidator` or
# `BeforeValidator`, raising with the exact message shown to the user.

def required(message: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError("required", message)
        return value
    return check


def max_length(limit: int, message: str) -> Callable[[str], str]:
    def check(value: str) -> str:
        if len(value) > limit:
            raise PydanticCustomError("too_long", message)
        return value
    return check


def optional_date(message: str) -> Callable[[Any], Optional[date]]:
    """Blank input means "no date"; anything else must be an ISO `yyyy-mm-dd` date."""
    def parse(value: Any) -> Optional[date]:
        if value is None or isinstance(value, date):
            return value
        if not str(value).strip():
            return None
        try:
            return date.fromisoformat(str(value).strip())
        except ValueError:
            raise PydanticCustomError("invalid_date", message)
    return parse
