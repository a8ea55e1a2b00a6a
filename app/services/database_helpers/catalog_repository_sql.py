# /app/services/database_helpers/catalog_repository_sql.py

"""
This module contains all the raw SQLAlchemy queries for the Author, Genre,
Book and BookInstance tables. It is the direct interface to the store.

Relationships are resolved here on demand: dependents are found by filtering
the dependent table on the foreign reference, and reference fields that a
caller will read are eager-loaded so that rows stay usable after their
session is closed.
"""

from contextlib import contextmanager
from typing import Dict, List, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from app.db.models.catalog_models import Author, Book, BookInstance, Genre
from ..exceptions import StoreFailure


class CatalogRepositorySQL:
    def __init__(self, db_session: Session):
        self.db = db_session

    @contextmanager
    def _writing(self, action: str):
        """
        Wraps one write method, lookups included. Any store error rolls the
        session back and surfaces as a StoreFailure.
        """
        try:
            yield
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.exception("Catalog write failed: {}", action)
            raise StoreFailure(str(exc)) from exc

    def _add(self, row):
        self.db.add(row)
        self.db.commit()
        self.db.refresh(row)
        return row

    def _update(self, row, data: Dict):
        if row is not None:
            for key, value in data.items():
                setattr(row, key, value)
            self.db.commit()
            self.db.refresh(row)
        return row

    def _delete(self, row) -> bool:
        # A row that vanished before the lookup reports False; attempt_delete
        # still treats that as a successful delete.
        if row is None:
            return False
        self.db.delete(row)
        self.db.commit()
        return True

    # --- Author Methods ---

    def get_all_authors(self) -> List[Author]:
        return self.db.query(Author).order_by(Author.family_name, Author.first_name).all()

    def get_author_by_id(self, author_id: str) -> Optional[Author]:
        return self.db.query(Author).filter(Author.id == author_id).first()

    def add_author(self, record: Dict) -> Author:
        with self._writing("add author"):
            return self._add(Author(**record))

    def update_author(self, author_id: str, data: Dict) -> Optional[Author]:
        with self._writing("update author"):
            return self._update(self.get_author_by_id(author_id), data)

    def delete_author(self, author_id: str) -> bool:
        with self._writing("delete author"):
            return self._delete(self.get_author_by_id(author_id))

    def count_authors(self) -> int:
        return self.db.query(Author).count()

    # --- Genre Methods ---

    def get_all_genres(self) -> List[Genre]:
        return self.db.query(Genre).order_by(Genre.name.asc()).all()

    def get_genre_by_id(self, genre_id: str) -> Optional[Genre]:
        return self.db.query(Genre).filter(Genre.id == genre_id).first()

    def get_genre_by_name(self, name: str) -> Optional[Genre]:
        return self.db.query(Genre).filter(Genre.name == name).first()

    def get_genres_by_ids(self, genre_ids: List[str]) -> List[Genre]:
        if not genre_ids:
            return []
        return self.db.query(Genre).filter(Genre.id.in_(genre_ids)).all()

    def add_genre(self, record: Dict) -> Genre:
        with self._writing("add genre"):
            return self._add(Genre(**record))

    def update_genre(self, genre_id: str, data: Dict) -> Optional[Genre]:
        with self._writing("update genre"):
            return self._update(self.get_genre_by_id(genre_id), data)

    def delete_genre(self, genre_id: str) -> bool:
        with self._writing("delete genre"):
            return self._delete(self.get_genre_by_id(genre_id))

    def count_genres(self) -> int:
        return self.db.query(Genre).count()

    # --- Book Methods ---

    def _books(self):
        return self.db.query(Book).options(joinedload(Book.author), selectinload(Book.genre))

    def get_all_books(self) -> List[Book]:
        return self._books().order_by(Book.title).all()

    def get_book_by_id(self, book_id: str) -> Optional[Book]:
        return self._books().filter(Book.id == book_id).first()

    def get_books_by_author_id(self, author_id: str) -> List[Book]:
        return self.db.query(Book).filter(Book.author_id == author_id).order_by(Book.title).all()

    def get_books_by_genre_id(self, genre_id: str) -> List[Book]:
        return (
            self.db.query(Book)
            .filter(Book.genre.any(Genre.id == genre_id))
            .order_by(Book.title)
            .all()
        )

    def add_book(self, record: Dict, genre_ids: List[str]) -> Book:
        with self._writing("add book"):
            new_book = Book(**record)
            new_book.genre = self.get_genres_by_ids(genre_ids)
            return self._add(new_book)

    def update_book(self, book_id: str, data: Dict, genre_ids: List[str]) -> Optional[Book]:
        """Replaces every field of an existing book, keeping its id."""
        with self._writing("update book"):
            db_book = self.get_book_by_id(book_id)
            if db_book is not None:
                db_book.genre = self.get_genres_by_ids(genre_ids)
            # The refresh reloads author and genre to match the new ids.
            return self._update(db_book, data)

    def delete_book(self, book_id: str) -> bool:
        with self._writing("delete book"):
            return self._delete(self.db.query(Book).filter(Book.id == book_id).first())

    def count_books(self) -> int:
        return self.db.query(Book).count()

    # --- BookInstance Methods ---

    def _instances(self):
        return self.db.query(BookInstance).options(joinedload(BookInstance.book))

    def get_all_instances(self) -> List[BookInstance]:
        return self._instances().order_by(BookInstance.due_back).all()

    def get_instance_by_id(self, instance_id: str) -> Optional[BookInstance]:
        return self._instances().filter(BookInstance.id == instance_id).first()

    def get_instances_by_book_id(self, book_id: str) -> List[BookInstance]:
        return self._instances().filter(BookInstance.book_id == book_id).all()

    def add_instance(self, record: Dict) -> BookInstance:
        with self._writing("add book instance"):
            return self._add(BookInstance(**record))

    def update_instance(self, instance_id: str, data: Dict) -> Optional[BookInstance]:
        with self._writing("update book instance"):
            return self._update(self.get_instance_by_id(instance_id), data)

    def delete_instance(self, instance_id: str) -> bool:
        with self._writing("delete book instance"):
            return self._delete(self.db.query(BookInstance).filter(BookInstance.id == instance_id).first())

    def count_instances(self, status: Optional[str] = None) -> int:
        query = self.db.query(BookInstance)
        if status is not None:
            query = query.filter(BookInstance.status == status)
        return query.count()
