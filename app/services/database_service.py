# /app/services/database_service.py

from typing import Dict, Generator, List, Optional

from fastapi import Depends
from sqlalchemy.orm import Session, sessionmaker

# --- Core Database Setup ---
from app.db.database import get_db, get_session_factory

# --- Repository Imports ---
from .database_helpers.catalog_repository_sql import CatalogRepositorySQL


class DatabaseService:
    def __init__(self, db_session: Session, session_factory: Optional[sessionmaker] = None):
        """
        Initializes the DatabaseService around one request-scoped session.

        `session_factory` is what concurrent reads use to open a session of
        their own; SQLAlchemy sessions must never be shared across threads.
        """
        self.session = db_session
        self.session_factory = session_factory
        self.catalog_repo = CatalogRepositorySQL(db_session)

    # --- AUTHOR METHODS (DELEGATED) ---
    def get_all_authors(self) -> List: return self.catalog_repo.get_all_authors()
    def get_author_by_id(self, author_id: str): return self.catalog_repo.get_author_by_id(author_id)
    def add_author(self, record: Dict): return self.catalog_repo.add_author(record)
    def update_author(self, author_id: str, data: Dict): return self.catalog_repo.update_author(author_id, data)
    def delete_author(self, author_id: str) -> bool: return self.catalog_repo.delete_author(author_id)
    def count_authors(self) -> int: return self.catalog_repo.count_authors()

    # --- GENRE METHODS (DELEGATED) ---
    def get_all_genres(self) -> List: return self.catalog_repo.get_all_genres()
    def get_genre_by_id(self, genre_id: str): return self.catalog_repo.get_genre_by_id(genre_id)
    def get_genre_by_name(self, name: str): return self.catalog_repo.get_genre_by_name(name)
    def get_genres_by_ids(self, genre_ids: List[str]) -> List: return self.catalog_repo.get_genres_by_ids(genre_ids)
    def add_genre(self, record: Dict): return self.catalog_repo.add_genre(record)
    def update_genre(self, genre_id: str, data: Dict): return self.catalog_repo.update_genre(genre_id, data)
    def delete_genre(self, genre_id: str) -> bool: return self.catalog_repo.delete_genre(genre_id)
    def count_genres(self) -> int: return self.catalog_repo.count_genres()

    # --- BOOK METHODS (DELEGATED) ---
    def get_all_books(self) -> List: return self.catalog_repo.get_all_books()
    def get_book_by_id(self, book_id: str): return self.catalog_repo.get_book_by_id(book_id)
    def get_books_by_author_id(self, author_id: str) -> List: return self.catalog_repo.get_books_by_author_id(author_id)
    def get_books_by_genre_id(self, genre_id: str) -> List: return self.catalog_repo.get_books_by_genre_id(genre_id)
    def add_book(self, record: Dict, genre_ids: List[str]): return self.catalog_repo.add_book(record, genre_ids)
    def update_book(self, book_id: str, data: Dict, genre_ids: List[str]): return self.catalog_repo.update_book(book_id, data, genre_ids)
    def delete_book(self, book_id: str) -> bool: return self.catalog_repo.delete_book(book_id)
    def count_books(self) -> int: return self.catalog_repo.count_books()

    # --- BOOK INSTANCE METHODS (DELEGATED) ---
    def get_all_instances(self) -> List: return self.catalog_repo.get_all_instances()
    def get_instance_by_id(self, instance_id: str): return self.catalog_repo.get_instance_by_id(instance_id)
    def get_instances_by_book_id(self, book_id: str) -> List: return self.catalog_repo.get_instances_by_book_id(book_id)
    def add_instance(self, record: Dict): return self.catalog_repo.add_instance(record)
    def update_instance(self, instance_id: str, data: Dict): return self.catalog_repo.update_instance(instance_id, data)
    def delete_instance(self, instance_id: str) -> bool: return self.catalog_repo.delete_instance(instance_id)
    def count_instances(self, status: Optional[str] = None) -> int: return self.catalog_repo.count_instances(status)


def get_db_service(
    db: Session = Depends(get_db),
    session_factory: sessionmaker = Depends(get_session_factory),
) -> Generator[DatabaseService, None, None]:
    """
    FastAPI dependency that provides a DatabaseService instance for one request.
    """
    yield DatabaseService(db_session=db, session_factory=session_factory)
