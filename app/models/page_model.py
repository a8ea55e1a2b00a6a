# /app/models/page_model.py

"""
View models for the catalog's read pages: the home-page counts, the
per-entity listings and the detail/delete-confirmation bags.

The delete confirmation reuses the detail model of its entity, since both
show the entity next to the records that depend on it.
"""

from typing import List

from pydantic import BaseModel, Field

from .author_model import AuthorRead
from .book_model import BookRead, BookSummary
from .bookinstance_model import BookInstanceRead
from .genre_model import GenreRead


class CatalogSummary(BaseModel):
    title: str = "Local Library Home"
    book_count: int = Field(..., description="Number of catalogued titles.")
    book_instance_count: int = Field(..., description="Number of physical copies.")
    book_instance_available_count: int = Field(..., description="Copies currently on the shelf.")
    author_count: int
    genre_count: int


# --- Listings ---

class AuthorList(BaseModel):
    title: str = "Author List"
    author_list: List[AuthorRead]

class GenreList(BaseModel):
    title: str = "Genre List"
    genre_list: List[GenreRead]

class BookList(BaseModel):
    title: str = "Book List"
    book_list: List[BookRead]

class BookInstanceList(BaseModel):
    title: str = "Book Instance List"
    bookinstance_list: List[BookInstanceRead]


# --- Detail / Delete Confirmation ---

class AuthorDetail(BaseModel):
    title: str
    author: AuthorRead
    author_books: List[BookSummary]

class GenreDetail(BaseModel):
    title: str
    genre: GenreRead
    genre_books: List[BookSummary]

class BookDetail(BaseModel):
    title: str
    book: BookRead
    book_instances: List[BookInstanceRead]

class BookInstanceDetail(BaseModel):
    title: str
    bookinstance: BookInstanceRead
