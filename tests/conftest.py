# /tests/conftest.py

from datetime import date

import pytest
from fastapi.testclient import TestClient

from app.db.database import build_engine, build_session_factory, get_db, get_session_factory, init_db
from app.main import app
from app.services.database_service import DatabaseService


@pytest.fixture
def session_factory(tmp_path):
    """
    A session factory bound to a brand-new SQLite file for EACH test, so that
    concurrent worker sessions see the same data as the test itself.
    """
    engine = build_engine(f"sqlite:///{tmp_path / 'catalog.db'}")
    init_db(bind=engine)
    yield build_session_factory(engine)
    engine.dispose()


@pytest.fixture
def db_service(session_factory):
    session = session_factory()
    yield DatabaseService(session, session_factory)
    session.close()


@pytest.fixture
def seeded(db_service):
    """
    A small catalog:
      - Tolkien wrote B1 (two copies, Fantasy) and B2 (no copies, no genre).
      - Poetry is a genre nothing is filed under.
      - Le Guin has written nothing yet.
    """
    db_service.add_author({
        "id": "aut_tolkien", "first_name": "John", "family_name": "Tolkien",
        "date_of_birth": date(1892, 1, 3), "date_of_death": date(1973, 9, 2),
    })
    db_service.add_author({"id": "aut_leguin", "first_name": "Ursula", "family_name": "Le Guin"})
    db_service.add_genre({"id": "gen_fantasy", "name": "Fantasy"})
    db_service.add_genre({"id": "gen_poetry", "name": "Poetry"})
    db_service.add_book(
        {"id": "B1", "title": "The Hobbit", "author_id": "aut_tolkien",
         "summary": "There and back again.", "isbn": "9780261102217"},
        ["gen_fantasy"],
    )
    db_service.add_book(
        {"id": "B2", "title": "Roverandom", "author_id": "aut_tolkien",
         "summary": "A dog's adventures.", "isbn": "9780261103542"},
        [],
    )
    db_service.add_instance({
        "id": "bki_1", "book_id": "B1", "imprint": "Allen & Unwin, 1937",
        "status": "Available", "due_back": date(2024, 3, 2),
    })
    db_service.add_instance({
        "id": "bki_2", "book_id": "B1", "imprint": "HarperCollins, 1995",
        "status": "Loaned", "due_back": date(2024, 4, 21),
    })
    return db_service


@pytest.fixture
def client(session_factory):
    """A TestClient wired to the per-test database. The lifespan hook is not run."""
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    yield TestClient(app)
    app.dependency_overrides.clear()
