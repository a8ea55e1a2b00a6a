# /app/models/bookinstance_model.py

from datetime import date
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, computed_field
from pydantic_core import PydanticCustomError

from ..services.catalog_helpers import derivations
from .form_model import optional_date, required


class BookInstanceStatus(str, Enum):
    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    LOANED = "Loaned"
    RESERVED = "Reserved"


def _status_or_default(value: Any) -> BookInstanceStatus:
    if value is None or value == "":
        return BookInstanceStatus.MAINTENANCE
    try:
        return BookInstanceStatus(value)
    except ValueError:
        allowed = ", ".join(s.value for s in BookInstanceStatus)
        raise PydanticCustomError("invalid_status", "Status must be one of: {allowed}", {"allowed": allowed})


class BookInstanceForm(BaseModel):
    model_config = ConfigDict(use_enum_values=True)

    book: Annotated[str, AfterValidator(required("Book must be specified"))]
    imprint: Annotated[str, AfterValidator(required("Imprint must be specified"))]
    status: Annotated[BookInstanceStatus, BeforeValidator(_status_or_default)] = BookInstanceStatus.MAINTENANCE
    due_back: Annotated[Optional[date], BeforeValidator(optional_date("Invalid date"))] = None


class BookRef(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str

    @computed_field
    @property
    def url(self) -> str:
        return derivations.entity_url("book", self.id)


class BookInstanceRead(BaseModel):
    """
    One physical copy, with the owning book's title resolved for display.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    book_id: str
    imprint: str
    status: BookInstanceStatus
    due_back: Optional[date] = None
    book: Optional[BookRef] = None

    @computed_field
    @property
    def url(self) -> str:
        return derivations.entity_url("bookinstance", self.id)

    @computed_field
    @property
    def due_back_formatted(self) -> str:
        return derivations.format_long_date(self.due_back)

    @computed_field
    @property
    def due_back_form(self) -> str:
        return derivations.format_form_date(self.due_back)
