# /tests/test_aggregate_fetch.py

import pytest
from sqlalchemy.exc import OperationalError

from app.models.book_model import BookRead
from app.models.bookinstance_model import BookInstanceRead
from app.services.catalog_helpers.aggregate_fetch import as_read, as_read_list, fetch_aggregate, fetch_all
from app.services.exceptions import NotFound, StoreFailure


def _book_detail_queries(book_id):
    return (
        ("book", lambda db: as_read(BookRead, db.get_book_by_id(book_id))),
        {"book_instances": lambda db: as_read_list(BookInstanceRead, db.get_instances_by_book_id(book_id))},
    )


@pytest.mark.asyncio
async def test_book_and_its_instances_are_joined(seeded):
    primary, dependents = _book_detail_queries("B1")

    results = await fetch_aggregate(seeded.session_factory, primary, dependents, "Book", "B1")

    assert results["book"].title == "The Hobbit"
    assert results["book"].author.name == "Tolkien, John"
    assert [g.name for g in results["book"].genre] == ["Fantasy"]
    assert {i.id for i in results["book_instances"]} == {"bki_1", "bki_2"}


@pytest.mark.asyncio
async def test_missing_primary_raises_not_found(seeded):
    primary, dependents = _book_detail_queries("nope")

    with pytest.raises(NotFound) as exc_info:
        await fetch_aggregate(seeded.session_factory, primary, dependents, "Book", "nope")

    assert exc_info.value.entity == "Book"
    assert exc_info.value.entity_id == "nope"


@pytest.mark.asyncio
async def test_fetch_all_runs_every_query_in_its_own_session(seeded):
    opened = []

    def counting_factory():
        session = seeded.session_factory()
        opened.append(session)
        return session

    results = await fetch_all(counting_factory, {
        "books": lambda db: db.count_books(),
        "authors": lambda db: db.count_authors(),
        "genres": lambda db: db.count_genres(),
    })

    assert results == {"books": 2, "authors": 2, "genres": 2}
    assert len({id(s) for s in opened}) == 3


@pytest.mark.asyncio
async def test_store_errors_abort_the_whole_fetch(seeded):
    def broken(db):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    with pytest.raises(StoreFailure) as exc_info:
        await fetch_all(seeded.session_factory, {"books": lambda db: db.count_books(), "broken": broken})

    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_dependent_failure_wins_over_a_found_primary(seeded):
    def broken(db):
        raise ValueError("bad predicate")

    with pytest.raises(ValueError, match="bad predicate"):
        await fetch_aggregate(
            seeded.session_factory,
            ("book", lambda db: as_read(BookRead, db.get_book_by_id("B1"))),
            {"book_instances": broken},
            "Book",
            "B1",
        )
