# /app/services/author_service.py

import asyncio
import uuid
from typing import Any, Mapping, Optional

from loguru import logger

from ..models.author_model import AuthorForm, AuthorRead
from ..models.book_model import BookSummary
from ..models.form_model import FormPage, Redirect
from ..models.page_model import AuthorDetail, AuthorList
from .catalog_helpers import derivations
from .catalog_helpers.aggregate_fetch import as_read, as_read_list, fetch_aggregate, fetch_all
from .catalog_helpers.form_pipeline import FormSpec, run_form_pipeline
from .catalog_helpers.integrity_guard import DeleteOutcome, attempt_delete
from .database_service import DatabaseService
from .exceptions import NotFound, ValidationFailed

AUTHOR_FORM = FormSpec(
    schema=AuthorForm,
    fields=("first_name", "family_name", "date_of_birth", "date_of_death"),
    escape_fields=("first_name", "family_name"),
)


def _author_query(author_id: str):
    return lambda db: as_read(AuthorRead, db.get_author_by_id(author_id))

def _author_books_query(author_id: str):
    return lambda db: as_read_list(BookSummary, db.get_books_by_author_id(author_id))


async def get_author_list(db: DatabaseService) -> AuthorList:
    results = await fetch_all(db.session_factory, {"authors": lambda d: as_read_list(AuthorRead, d.get_all_authors())})
    return AuthorList(author_list=results["authors"])


async def get_author_detail(author_id: str, db: DatabaseService, title: str = "Author Detail") -> AuthorDetail:
    """The author together with every book written by them."""
    results = await fetch_aggregate(
        db.session_factory,
        primary=("author", _author_query(author_id)),
        dependents={"author_books": _author_books_query(author_id)},
        entity_label="Author",
        entity_id=author_id,
    )
    return AuthorDetail(title=title, author=results["author"], author_books=results["author_books"])


def get_create_form() -> FormPage:
    return FormPage(title="Create Author")


async def get_update_form(author_id: str, db: DatabaseService) -> FormPage:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("author", _author_query(author_id)),
        dependents={},
        entity_label="Author",
        entity_id=author_id,
    )
    author = results["author"]
    return FormPage(
        title="Update Author",
        entity={
            "id": author.id,
            "first_name": author.first_name,
            "family_name": author.family_name,
            "date_of_birth": author.form_birth_date,
            "date_of_death": author.form_death_date,
        },
    )


async def submit_author_form(form_data: Mapping[str, Any], db: DatabaseService, author_id: Optional[str] = None) -> Redirect:
    title = "Create Author" if author_id is None else "Update Author"
    ctx = run_form_pipeline(form_data, AUTHOR_FORM, entity_id=author_id)
    if not ctx.is_valid:
        logger.warning("Author form rejected with {} error(s)", len(ctx.errors))
        raise ValidationFailed(ctx.errors, FormPage(title=title, entity=ctx.candidate, errors=ctx.errors))

    record = dict(ctx.cleaned)
    if author_id is None:
        record["id"] = f"aut_{uuid.uuid4().hex[:12]}"
        author = await asyncio.to_thread(db.add_author, record)
        logger.info("Created author {}", author.id)
    else:
        author = await asyncio.to_thread(db.update_author, author_id, record)
        if author is None:
            raise NotFound("Author", author_id)
        logger.info("Updated author {}", author.id)
    return Redirect(location=derivations.entity_url("author", author.id))


async def create_author(form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_author_form(form_data, db)


async def update_author(author_id: str, form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_author_form(form_data, db, author_id=author_id)


async def get_delete_page(author_id: str, db: DatabaseService) -> AuthorDetail:
    return await get_author_detail(author_id, db, title="Delete Author")


async def delete_author(author_id: str, db: DatabaseService) -> DeleteOutcome:
    """Deletes the author unless any book still names them."""
    return await attempt_delete(
        db.session_factory,
        entity_label="Author",
        entity_id=author_id,
        primary_query=_author_query(author_id),
        dependents_query=_author_books_query(author_id),
        delete=lambda: db.delete_author(author_id),
    )


def blocked_page(outcome: DeleteOutcome) -> AuthorDetail:
    return AuthorDetail(title="Delete Author", author=outcome.entity, author_books=outcome.dependents)
