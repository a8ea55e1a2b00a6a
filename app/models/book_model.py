# /app/models/book_model.py

from typing import Annotated, List, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, computed_field

from ..services.catalog_helpers import derivations
from .author_model import AuthorRead
from .form_model import required
from .genre_model import GenreRead


class BookForm(BaseModel):
    """
    Rules for the book create/update form. `genre` arrives already
    normalized into a list of genre ids and may be empty.
    """
    title: Annotated[str, AfterValidator(required("Title must not be empty."))]
    author: Annotated[str, AfterValidator(required("Author must not be empty."))]
    summary: Annotated[str, AfterValidator(required("Summary must not be empty."))]
    isbn: Annotated[str, AfterValidator(required("ISBN must not be empty"))]
    genre: List[str] = Field(default_factory=list)


class BookSummary(BaseModel):
    """A book as listed among the dependents of an author or genre."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    summary: str

    @computed_field
    @property
    def url(self) -> str:
        return derivations.entity_url("book", self.id)


class BookRead(BookSummary):
    """
    The full representation of a Book, with its author and genres resolved.
    """
    isbn: str
    author_id: str
    author: Optional[AuthorRead] = None
    genre: List[GenreRead] = Field(default_factory=list)
