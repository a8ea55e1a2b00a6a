# /app/services/exceptions.py

"""
Typed failures raised by the catalog services.

The HTTP layer maps each of these to a status code; the services themselves
never build responses. A refused delete is not an error and is reported
through `DeleteOutcome` instead (see `integrity_guard`).
"""

from typing import Any, List


class CatalogError(Exception):
    """Base class for every failure the catalog core reports."""


class NotFound(CatalogError):
    """The requested primary entity does not exist."""

    def __init__(self, entity: str, entity_id: str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationFailed(CatalogError):
    """
    One or more form fields broke their rules.

    Carries the complete list of field errors together with the form view
    model (sanitized candidate plus reference lists) so the caller can
    redisplay the form in one go.
    """

    def __init__(self, errors: List[Any], form: Any = None):
        self.errors = errors
        self.form = form
        super().__init__(f"{len(errors)} field(s) failed validation")


class StoreFailure(CatalogError):
    """A read or write against the underlying store failed."""
