# /app/services/book_service.py

"""
Business logic for books: listing, the detail page, the create/update form
flow and guarded deletion.

Reads that need more than one query go through the aggregate fetch so that
the book, its copies and the author/genre option lists are loaded
concurrently. Writes go through the shared form pipeline.
"""

import asyncio
import uuid
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from ..models.author_model import AuthorRead
from ..models.book_model import BookForm, BookRead
from ..models.bookinstance_model import BookInstanceRead
from ..models.form_model import FieldError, FormPage, Redirect
from ..models.genre_model import GenreRead
from ..models.page_model import BookDetail, BookList
from .catalog_helpers import derivations
from .catalog_helpers.aggregate_fetch import as_read, as_read_list, fetch_aggregate, fetch_all
from .catalog_helpers.form_pipeline import FormContext, FormSpec, run_form_pipeline
from .catalog_helpers.integrity_guard import DeleteOutcome, attempt_delete
from .database_service import DatabaseService
from .exceptions import NotFound, ValidationFailed

BOOK_FORM = FormSpec(
    schema=BookForm,
    fields=("title", "author", "summary", "isbn", "genre"),
    multi_fields=("genre",),
    escape_fields=("title", "author", "summary", "isbn"),
)


# --- Query Builders ---

def _book_query(book_id: str):
    return lambda db: as_read(BookRead, db.get_book_by_id(book_id))

def _instances_query(book_id: str):
    return lambda db: as_read_list(BookInstanceRead, db.get_instances_by_book_id(book_id))

def _authors_query(db: DatabaseService) -> List[AuthorRead]:
    return as_read_list(AuthorRead, db.get_all_authors())

def _genres_query(db: DatabaseService) -> List[GenreRead]:
    return as_read_list(GenreRead, db.get_all_genres())


def _choices(authors: List[AuthorRead], genres: List[GenreRead], author_id: str, genre_ids: List[str]) -> Dict[str, List[Dict]]:
    """Option lists for the form, with the current selections marked."""
    selected = set(genre_ids)
    return {
        "authors": [{**a.model_dump(mode="json"), "checked": a.id == author_id} for a in authors],
        "genres": [{**g.model_dump(mode="json"), "checked": g.id in selected} for g in genres],
    }


def _form_values(book: BookRead) -> Dict[str, Any]:
    return {
        "id": book.id,
        "title": book.title,
        "author": book.author_id,
        "summary": book.summary,
        "isbn": book.isbn,
        "genre": [g.id for g in book.genre],
    }


# --- Read Operations ---

async def get_book_list(db: DatabaseService) -> BookList:
    results = await fetch_all(db.session_factory, {"books": lambda d: as_read_list(BookRead, d.get_all_books())})
    return BookList(book_list=results["books"])


async def get_book_detail(book_id: str, db: DatabaseService, title: Optional[str] = None) -> BookDetail:
    """The book plus every copy of it, fetched in one concurrent join."""
    results = await fetch_aggregate(
        db.session_factory,
        primary=("book", _book_query(book_id)),
        dependents={"book_instances": _instances_query(book_id)},
        entity_label="Book",
        entity_id=book_id,
    )
    book = results["book"]
    return BookDetail(title=title or book.title, book=book, book_instances=results["book_instances"])


# --- Form Operations ---

async def get_create_form(db: DatabaseService) -> FormPage:
    results = await fetch_all(db.session_factory, {"authors": _authors_query, "genres": _genres_query})
    return FormPage(title="Create Book", choices=_choices(results["authors"], results["genres"], "", []))


async def get_update_form(book_id: str, db: DatabaseService) -> FormPage:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("book", _book_query(book_id)),
        dependents={"authors": _authors_query, "genres": _genres_query},
        entity_label="Book",
        entity_id=book_id,
    )
    values = _form_values(results["book"])
    return FormPage(
        title="Update Book",
        entity=values,
        choices=_choices(results["authors"], results["genres"], values["author"], values["genre"]),
    )


async def _missing_references(ctx: FormContext, db: DatabaseService) -> List[FieldError]:
    """Checks that the chosen author and every chosen genre actually exist."""
    author_id = ctx.cleaned["author"]
    genre_ids = ctx.cleaned["genre"]
    found = await fetch_all(db.session_factory, {
        "author": lambda d: d.get_author_by_id(author_id) is not None,
        "genres": lambda d: {g.id for g in d.get_genres_by_ids(genre_ids)},
    })
    errors = []
    if not found["author"]:
        errors.append(FieldError(field="author", message="Author not found"))
    if set(genre_ids) - found["genres"]:
        errors.append(FieldError(field="genre", message="Genre not found"))
    return errors


async def _reject(ctx: FormContext, title: str, db: DatabaseService) -> None:
    results = await fetch_all(db.session_factory, {"authors": _authors_query, "genres": _genres_query})
    page = FormPage(
        title=title,
        entity=ctx.candidate,
        choices=_choices(results["authors"], results["genres"], ctx.fields["author"], ctx.fields["genre"]),
        errors=ctx.errors,
    )
    logger.warning("Book form rejected with {} error(s)", len(ctx.errors))
    raise ValidationFailed(ctx.errors, page)


async def submit_book_form(form_data: Mapping[str, Any], db: DatabaseService, book_id: Optional[str] = None) -> Redirect:
    """
    Creates a book, or replaces book `book_id` in place, from a form
    submission. Raises `ValidationFailed` (nothing persisted) when any rule
    fails, and redirects to the book's page otherwise.
    """
    title = "Create Book" if book_id is None else "Update Book"
    ctx = run_form_pipeline(form_data, BOOK_FORM, entity_id=book_id)
    if ctx.is_valid:
        ctx.errors.extend(await _missing_references(ctx, db))
    if not ctx.is_valid:
        await _reject(ctx, title, db)

    record = {
        "title": ctx.cleaned["title"],
        "author_id": ctx.cleaned["author"],
        "summary": ctx.cleaned["summary"],
        "isbn": ctx.cleaned["isbn"],
    }
    if book_id is None:
        record["id"] = f"book_{uuid.uuid4().hex[:12]}"
        book = await asyncio.to_thread(db.add_book, record, ctx.cleaned["genre"])
        logger.info("Created book {}", book.id)
    else:
        book = await asyncio.to_thread(db.update_book, book_id, record, ctx.cleaned["genre"])
        if book is None:
            raise NotFound("Book", book_id)
        logger.info("Updated book {}", book.id)
    return Redirect(location=derivations.entity_url("book", book.id))


async def create_book(form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_book_form(form_data, db)


async def update_book(book_id: str, form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_book_form(form_data, db, book_id=book_id)


# --- Delete Operations ---

async def get_delete_page(book_id: str, db: DatabaseService) -> BookDetail:
    return await get_book_detail(book_id, db, title="Delete Book")


async def delete_book(book_id: str, db: DatabaseService) -> DeleteOutcome:
    """Deletes the book unless copies of it still exist."""
    return await attempt_delete(
        db.session_factory,
        entity_label="Book",
        entity_id=book_id,
        primary_query=_book_query(book_id),
        dependents_query=_instances_query(book_id),
        delete=lambda: db.delete_book(book_id),
    )


def blocked_page(outcome: DeleteOutcome) -> BookDetail:
    return BookDetail(title="Delete Book", book=outcome.entity, book_instances=outcome.dependents)
