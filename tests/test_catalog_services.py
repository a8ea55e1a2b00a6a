# /tests/test_catalog_services.py

import pytest
from sqlalchemy.exc import OperationalError

from app.services import author_service, book_service, bookinstance_service, catalog_service, genre_service
from app.services.exceptions import NotFound, StoreFailure, ValidationFailed


def _book_form(**overrides):
    form = {
        "title": "The Silmarillion",
        "author": "aut_tolkien",
        "summary": "The elder days.",
        "isbn": "9780261102736",
        "genre": ["gen_fantasy"],
    }
    form.update(overrides)
    return form


# --- Genres ---

@pytest.mark.asyncio
async def test_genre_creation_is_idempotent_by_name(seeded):
    first = await genre_service.create_genre({"name": "Horror"}, seeded)
    second = await genre_service.create_genre({"name": "  Horror "}, seeded)

    assert first.location == second.location
    assert [g.name for g in seeded.get_all_genres()].count("Horror") == 1


@pytest.mark.asyncio
async def test_existing_genre_name_redirects_to_the_existing_record(seeded):
    redirect = await genre_service.create_genre({"name": "Fantasy"}, seeded)
    assert redirect.location == "/catalog/genre/gen_fantasy"


@pytest.mark.asyncio
async def test_genre_rename_cannot_take_another_genres_name(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await genre_service.update_genre("gen_poetry", {"name": "Fantasy"}, seeded)
    assert exc_info.value.errors[0].field == "name"

    redirect = await genre_service.update_genre("gen_poetry", {"name": "Verse"}, seeded)
    assert redirect.location == "/catalog/genre/gen_poetry"


@pytest.mark.asyncio
async def test_genre_detail_lists_its_books(seeded):
    detail = await genre_service.get_genre_detail("gen_fantasy", seeded)
    assert detail.genre.name == "Fantasy"
    assert [b.title for b in detail.genre_books] == ["The Hobbit"]


# --- Books ---

@pytest.mark.asyncio
async def test_create_book_persists_and_redirects(seeded):
    redirect = await book_service.create_book(_book_form(), seeded)

    book_id = redirect.location.rsplit("/", 1)[-1]
    detail = await book_service.get_book_detail(book_id, seeded)
    assert detail.book.title == "The Silmarillion"
    assert [g.id for g in detail.book.genre] == ["gen_fantasy"]
    assert detail.book_instances == []


@pytest.mark.asyncio
async def test_invalid_book_form_is_redisplayed_with_every_error(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await book_service.create_book(_book_form(title="", isbn=""), seeded)

    assert {e.field for e in exc_info.value.errors} == {"title", "isbn"}
    assert seeded.count_books() == 2


@pytest.mark.asyncio
async def test_redisplayed_form_echoes_escaped_markup_and_marks_selections(seeded):
    """
    GIVEN: a title containing markup and an empty isbn.
    WHEN:  the book form is submitted.
    THEN:  the redisplayed candidate holds only the escaped title, and the
           previously chosen author and genre come back checked.
    """
    with pytest.raises(ValidationFailed) as exc_info:
        await book_service.create_book(_book_form(title="<script>x</script>", isbn=""), seeded)

    page = exc_info.value.form
    assert page.title == "Create Book"
    assert page.entity["title"] == "&lt;script&gt;x&lt;/script&gt;"
    assert "<script>" not in page.model_dump_json()
    checked_genres = [g["id"] for g in page.choices["genres"] if g["checked"]]
    checked_authors = [a["id"] for a in page.choices["authors"] if a["checked"]]
    assert checked_genres == ["gen_fantasy"]
    assert checked_authors == ["aut_tolkien"]


@pytest.mark.asyncio
async def test_book_must_reference_existing_author_and_genres(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await book_service.create_book(_book_form(author="aut_ghost", genre=["gen_fantasy", "gen_ghost"]), seeded)

    messages = {e.field: e.message for e in exc_info.value.errors}
    assert messages == {"author": "Author not found", "genre": "Genre not found"}
    assert seeded.count_books() == 2


@pytest.mark.asyncio
async def test_update_book_preserves_identity(seeded):
    redirect = await book_service.update_book(
        "B1", _book_form(title="The Hobbit, or There and Back Again", genre=[]), seeded
    )

    assert redirect.location == "/catalog/book/B1"
    detail = await book_service.get_book_detail("B1", seeded)
    assert detail.book.title == "The Hobbit, or There and Back Again"
    assert detail.book.genre == []
    assert seeded.count_books() == 2


@pytest.mark.asyncio
async def test_update_form_is_prefilled_with_the_current_book(seeded):
    page = await book_service.get_update_form("B1", seeded)

    assert page.entity["id"] == "B1"
    assert page.entity["author"] == "aut_tolkien"
    assert [g["id"] for g in page.choices["genres"] if g["checked"]] == ["gen_fantasy"]
    assert len(page.choices["authors"]) == 2


@pytest.mark.asyncio
async def test_update_form_for_missing_book_raises_not_found(seeded):
    with pytest.raises(NotFound):
        await book_service.get_update_form("nope", seeded)


@pytest.mark.asyncio
async def test_valid_update_of_missing_book_raises_not_found(seeded):
    with pytest.raises(NotFound):
        await book_service.update_book("nope", _book_form(), seeded)


# --- Authors ---

@pytest.mark.asyncio
async def test_author_round_trip_through_the_form(seeded):
    redirect = await author_service.create_author(
        {"first_name": "Mary", "family_name": "Shelley", "date_of_birth": "1797-08-30", "date_of_death": "1851-02-01"},
        seeded,
    )
    author_id = redirect.location.rsplit("/", 1)[-1]

    page = await author_service.get_update_form(author_id, seeded)
    detail = await author_service.get_author_detail(author_id, seeded)

    assert page.entity["date_of_birth"] == "1797-08-30"
    assert detail.author.name == "Shelley, Mary"
    assert detail.author.lifespan == "August 30th, 1797 - February 1st, 1851"
    assert detail.author_books == []


# --- Book Instances ---

@pytest.mark.asyncio
async def test_instance_must_reference_an_existing_book(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await bookinstance_service.create_instance({"book": "B404", "imprint": "Penguin"}, seeded)

    assert [e.message for e in exc_info.value.errors] == ["Book not found"]
    assert "books" in exc_info.value.form.choices


@pytest.mark.asyncio
async def test_instance_update_keeps_id_and_changes_status(seeded):
    await bookinstance_service.update_instance(
        "bki_2", {"book": "B1", "imprint": "HarperCollins, 1995", "status": "Available", "due_back": "2024-05-01"}, seeded
    )

    detail = await bookinstance_service.get_instance_detail("bki_2", seeded)
    assert detail.bookinstance.status.value == "Available"
    assert detail.bookinstance.due_back_formatted == "May 1st, 2024"


# --- Index ---

@pytest.mark.asyncio
async def test_catalog_summary_counts(seeded):
    summary = await catalog_service.get_summary_data(seeded)

    assert summary.book_count == 2
    assert summary.book_instance_count == 2
    assert summary.book_instance_available_count == 1
    assert summary.author_count == 2
    assert summary.genre_count == 2


# --- Escaping and store failures ---

@pytest.mark.asyncio
async def test_rejected_author_form_never_echoes_markup(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await author_service.create_author(
            {"first_name": "", "family_name": "X", "date_of_birth": "<script>x</script>"}, seeded
        )
    assert "<script>" not in exc_info.value.form.model_dump_json()


@pytest.mark.asyncio
async def test_rejected_copy_form_never_echoes_markup(seeded):
    with pytest.raises(ValidationFailed) as exc_info:
        await bookinstance_service.create_instance(
            {"book": "B1", "imprint": "Penguin", "status": "<img src=x onerror=alert(1)>", "due_back": "<b>"}, seeded
        )

    entity = exc_info.value.form.entity
    assert entity["status"] == "&lt;img src=x onerror=alert(1)&gt;"
    assert entity["due_back"] == "&lt;b&gt;"


@pytest.mark.asyncio
async def test_blank_genre_checkbox_is_ignored(seeded):
    redirect = await book_service.create_book(_book_form(genre=[""]), seeded)

    detail = await book_service.get_book_detail(redirect.location.rsplit("/", 1)[-1], seeded)
    assert detail.book.genre == []


@pytest.mark.asyncio
async def test_store_error_during_book_update_surfaces_as_store_failure(seeded, mocker):
    mocker.patch.object(
        seeded.catalog_repo, "get_book_by_id",
        side_effect=OperationalError("SELECT", {}, Exception("disk I/O error")),
    )

    with pytest.raises(StoreFailure):
        await book_service.update_book("B1", _book_form(), seeded)
