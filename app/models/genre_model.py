# /app/models/genre_model.py

from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, computed_field

from ..services.catalog_helpers import derivations
from .form_model import required


class GenreForm(BaseModel):
    name: Annotated[str, AfterValidator(required("Genre name required"))]


class GenreRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str

    @computed_field
    @property
    def url(self) -> str:
        return derivations.entity_url("genre", self.id)
