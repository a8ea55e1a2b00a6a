# /app/db/models/catalog_models.py

"""
This module defines the SQLAlchemy ORM models for the four catalog entities:
`Author`, `Genre`, `Book` and `BookInstance`.

Relationships are plain foreign keys. None of them cascade on delete: removal
of a referenced record is decided by the integrity guard, which refuses to
delete anything that still has dependents.
"""

from datetime import date

from sqlalchemy import Column, String, Date, ForeignKey, Table
from sqlalchemy.orm import relationship

from ..base_class import Base


# Many-to-many link between books and the genres they are filed under.
book_genre = Table(
    "book_genre",
    Base.metadata,
    Column("book_id", String, ForeignKey("book.id"), primary_key=True),
    Column("genre_id", String, ForeignKey("genre.id"), primary_key=True),
)


class Author(Base):
    id = Column(String, primary_key=True, index=True)
    first_name = Column(String(100), nullable=False)
    family_name = Column(String(100), nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    date_of_death = Column(Date, nullable=True)

    books = relationship("Book", back_populates="author")


class Genre(Base):
    id = Column(String, primary_key=True, index=True)
    # Not unique at the storage level; the create flow looks the name up first.
    name = Column(String(100), nullable=False, index=True)

    books = relationship("Book", secondary=book_genre, back_populates="genre")


class Book(Base):
    """
    SQLAlchemy model representing a catalogued title.

    A book belongs to exactly one author and may be filed under any number
    of genres. Physical copies are tracked separately as `BookInstance` rows.
    """
    id = Column(String, primary_key=True, index=True)
    title = Column(String, nullable=False, index=True)
    author_id = Column(String, ForeignKey("author.id"), nullable=False, index=True)
    summary = Column(String, nullable=False)
    isbn = Column(String, nullable=False)

    author = relationship("Author", back_populates="books")
    genre = relationship("Genre", secondary=book_genre, back_populates="books")
    instances = relationship("BookInstance", back_populates="book")


class BookInstance(Base):
    """
    SQLAlchemy model representing one physical copy of a book.
    """
    id = Column(String, primary_key=True, index=True)
    book_id = Column(String, ForeignKey("book.id"), nullable=False, index=True)
    imprint = Column(String, nullable=False)
    status = Column(String, nullable=False, default="Maintenance", index=True)
    due_back = Column(Date, nullable=False, default=date.today)

    book = relationship("Book", back_populates="instances")
