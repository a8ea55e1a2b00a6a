# /app/services/genre_service.py

"""
Business logic for genres.

Genre names are logically unique: creating a genre whose name is already
on file resolves to the existing record instead of inserting a duplicate.
"""

import asyncio
import uuid
from typing import Any, Mapping, Optional

from loguru import logger

from ..models.book_model import BookSummary
from ..models.form_model import FieldError, FormPage, Redirect
from ..models.genre_model import GenreForm, GenreRead
from ..models.page_model import GenreDetail, GenreList
from .catalog_helpers import derivations
from .catalog_helpers.aggregate_fetch import as_read, as_read_list, fetch_aggregate, fetch_all
from .catalog_helpers.form_pipeline import FormSpec, run_form_pipeline
from .catalog_helpers.integrity_guard import DeleteOutcome, attempt_delete
from .database_service import DatabaseService
from .exceptions import NotFound, ValidationFailed

GENRE_FORM = FormSpec(schema=GenreForm, fields=("name",), escape_fields=("name",))


def _genre_query(genre_id: str):
    return lambda db: as_read(GenreRead, db.get_genre_by_id(genre_id))

def _genre_books_query(genre_id: str):
    return lambda db: as_read_list(BookSummary, db.get_books_by_genre_id(genre_id))

def _genre_by_name_query(name: str):
    return lambda db: as_read(GenreRead, db.get_genre_by_name(name))


async def get_genre_list(db: DatabaseService) -> GenreList:
    results = await fetch_all(db.session_factory, {"genres": lambda d: as_read_list(GenreRead, d.get_all_genres())})
    return GenreList(genre_list=results["genres"])


async def get_genre_detail(genre_id: str, db: DatabaseService, title: str = "Genre Detail") -> GenreDetail:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("genre", _genre_query(genre_id)),
        dependents={"genre_books": _genre_books_query(genre_id)},
        entity_label="Genre",
        entity_id=genre_id,
    )
    return GenreDetail(title=title, genre=results["genre"], genre_books=results["genre_books"])


def get_create_form() -> FormPage:
    return FormPage(title="Create Genre")


async def get_update_form(genre_id: str, db: DatabaseService) -> FormPage:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("genre", _genre_query(genre_id)),
        dependents={},
        entity_label="Genre",
        entity_id=genre_id,
    )
    genre = results["genre"]
    return FormPage(title="Update Genre", entity={"id": genre.id, "name": genre.name})


async def create_genre(form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    """
    Creates a genre, or redirects to the genre that already carries the
    submitted name.
    """
    ctx = run_form_pipeline(form_data, GENRE_FORM)
    if not ctx.is_valid:
        logger.warning("Genre form rejected with {} error(s)", len(ctx.errors))
        raise ValidationFailed(ctx.errors, FormPage(title="Create Genre", entity=ctx.candidate, errors=ctx.errors))

    name = ctx.cleaned["name"]
    found = await fetch_all(db.session_factory, {"genre": _genre_by_name_query(name)})
    if found["genre"] is not None:
        logger.info("Genre '{}' already exists as {}", name, found["genre"].id)
        return Redirect(location=found["genre"].url)

    genre = await asyncio.to_thread(db.add_genre, {"id": f"gen_{uuid.uuid4().hex[:12]}", "name": name})
    logger.info("Created genre {}", genre.id)
    return Redirect(location=derivations.entity_url("genre", genre.id))


async def update_genre(genre_id: str, form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    """Renames a genre in place. The new name may not belong to another genre."""
    ctx = run_form_pipeline(form_data, GENRE_FORM, entity_id=genre_id)
    if ctx.is_valid:
        found = await fetch_all(db.session_factory, {"genre": _genre_by_name_query(ctx.cleaned["name"])})
        clash: Optional[GenreRead] = found["genre"]
        if clash is not None and clash.id != genre_id:
            ctx.errors.append(FieldError(field="name", message="A genre with this name already exists"))
    if not ctx.is_valid:
        logger.warning("Genre form rejected with {} error(s)", len(ctx.errors))
        raise ValidationFailed(ctx.errors, FormPage(title="Update Genre", entity=ctx.candidate, errors=ctx.errors))

    genre = await asyncio.to_thread(db.update_genre, genre_id, {"name": ctx.cleaned["name"]})
    if genre is None:
        raise NotFound("Genre", genre_id)
    logger.info("Updated genre {}", genre.id)
    return Redirect(location=derivations.entity_url("genre", genre.id))


async def get_delete_page(genre_id: str, db: DatabaseService) -> GenreDetail:
    return await get_genre_detail(genre_id, db, title="Delete Genre")


async def delete_genre(genre_id: str, db: DatabaseService) -> DeleteOutcome:
    """Deletes the genre unless books are still filed under it."""
    return await attempt_delete(
        db.session_factory,
        entity_label="Genre",
        entity_id=genre_id,
        primary_query=_genre_query(genre_id),
        dependents_query=_genre_books_query(genre_id),
        delete=lambda: db.delete_genre(genre_id),
    )


def blocked_page(outcome: DeleteOutcome) -> GenreDetail:
    return GenreDetail(title="Delete Genre", genre=outcome.entity, genre_books=outcome.dependents)
