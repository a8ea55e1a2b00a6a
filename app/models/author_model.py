# /app/models/author_model.py

from datetime import date
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, computed_field

from ..services.catalog_helpers import derivations
from .form_model import max_length, optional_date, required


class AuthorForm(BaseModel):
    """Rules for the author create/update form."""
    first_name: Annotated[
        str,
        AfterValidator(required("First name must be specified.")),
        AfterValidator(max_length(100, "First name must not exceed 100 characters.")),
    ]
    family_name: Annotated[
        str,
        AfterValidator(required("Family name must be specified.")),
        AfterValidator(max_length(100, "Family name must not exceed 100 characters.")),
    ]
    date_of_birth: Annotated[Optional[date], BeforeValidator(optional_date("Invalid date of birth"))] = None
    date_of_death: Annotated[Optional[date], BeforeValidator(optional_date("Invalid date of death"))] = None


class AuthorRead(BaseModel):
    """
    The full representation of an Author as returned by the API, including
    the display values derived from the stored fields.
    """
    model_config = ConfigDict(from_attributes=True)

    id: str
    first_name: str
    family_name: str
    date_of_birth: Optional[date] = None
    date_of_death: Optional[date] = None

    @computed_field
    @property
    def name(self) -> str:
        return derivations.author_name(self)

    @computed_field
    @property
    def lifespan(self) -> str:
        return derivations.author_lifespan(self)

    @computed_field
    @property
    def url(self) -> str:
        return derivations.entity_url("author", self.id)

    @computed_field
    @property
    def form_birth_date(self) -> str:
        return derivations.format_form_date(self.date_of_birth)

    @computed_field
    @property
    def form_death_date(self) -> str:
        return derivations.format_form_date(self.date_of_death)
