# /app/services/bookinstance_service.py

"""
Business logic for physical copies of books.

Nothing references a copy, so deleting one is never blocked; it still goes
through the integrity guard so that every delete follows the same path.
"""

import asyncio
import uuid
from datetime import date
from typing import Any, Dict, List, Mapping, Optional

from loguru import logger

from ..models.book_model import BookSummary
from ..models.bookinstance_model import BookInstanceForm, BookInstanceRead
from ..models.form_model import FieldError, FormPage, Redirect
from ..models.page_model import BookInstanceDetail, BookInstanceList
from .catalog_helpers import derivations
from .catalog_helpers.aggregate_fetch import as_read, as_read_list, fetch_aggregate, fetch_all
from .catalog_helpers.form_pipeline import FormContext, FormSpec, run_form_pipeline
from .catalog_helpers.integrity_guard import DeleteOutcome, attempt_delete
from .database_service import DatabaseService
from .exceptions import NotFound, ValidationFailed

BOOKINSTANCE_FORM = FormSpec(
    schema=BookInstanceForm,
    fields=("book", "imprint", "status", "due_back"),
    escape_fields=("book", "imprint"),
)


def _instance_query(instance_id: str):
    return lambda db: as_read(BookInstanceRead, db.get_instance_by_id(instance_id))

def _books_query(db: DatabaseService) -> List[BookSummary]:
    return as_read_list(BookSummary, db.get_all_books())


def _choices(books: List[BookSummary], book_id: str) -> Dict[str, List[Dict]]:
    return {"books": [{**b.model_dump(mode="json"), "checked": b.id == book_id} for b in books]}


async def get_instance_list(db: DatabaseService) -> BookInstanceList:
    results = await fetch_all(
        db.session_factory, {"instances": lambda d: as_read_list(BookInstanceRead, d.get_all_instances())}
    )
    return BookInstanceList(bookinstance_list=results["instances"])


async def get_instance_detail(instance_id: str, db: DatabaseService, title: Optional[str] = None) -> BookInstanceDetail:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("bookinstance", _instance_query(instance_id)),
        dependents={},
        entity_label="BookInstance",
        entity_id=instance_id,
    )
    instance = results["bookinstance"]
    return BookInstanceDetail(title=title or f"Copy: {instance.book.title if instance.book else instance.id}", bookinstance=instance)


async def get_create_form(db: DatabaseService) -> FormPage:
    results = await fetch_all(db.session_factory, {"books": _books_query})
    return FormPage(title="Create BookInstance", choices=_choices(results["books"], ""))


async def get_update_form(instance_id: str, db: DatabaseService) -> FormPage:
    results = await fetch_aggregate(
        db.session_factory,
        primary=("bookinstance", _instance_query(instance_id)),
        dependents={"books": _books_query},
        entity_label="BookInstance",
        entity_id=instance_id,
    )
    instance = results["bookinstance"]
    return FormPage(
        title="Update BookInstance",
        entity={
            "id": instance.id,
            "book": instance.book_id,
            "imprint": instance.imprint,
            "status": instance.status.value,
            "due_back": instance.due_back_form,
        },
        choices=_choices(results["books"], instance.book_id),
    )


async def _reject(ctx: FormContext, title: str, db: DatabaseService) -> None:
    results = await fetch_all(db.session_factory, {"books": _books_query})
    page = FormPage(title=title, entity=ctx.candidate, choices=_choices(results["books"], ctx.fields["book"]), errors=ctx.errors)
    logger.warning("BookInstance form rejected with {} error(s)", len(ctx.errors))
    raise ValidationFailed(ctx.errors, page)


async def submit_instance_form(form_data: Mapping[str, Any], db: DatabaseService, instance_id: Optional[str] = None) -> Redirect:
    title = "Create BookInstance" if instance_id is None else "Update BookInstance"
    ctx = run_form_pipeline(form_data, BOOKINSTANCE_FORM, entity_id=instance_id)
    if ctx.is_valid:
        book_id = ctx.cleaned["book"]
        found = await fetch_all(db.session_factory, {"book": lambda d: d.get_book_by_id(book_id) is not None})
        if not found["book"]:
            ctx.errors.append(FieldError(field="book", message="Book not found"))
    if not ctx.is_valid:
        await _reject(ctx, title, db)

    record = {
        "book_id": ctx.cleaned["book"],
        "imprint": ctx.cleaned["imprint"],
        "status": ctx.cleaned["status"],
        # A copy with no due date is due back the day it is recorded.
        "due_back": ctx.cleaned["due_back"] or date.today(),
    }
    if instance_id is None:
        record["id"] = f"bki_{uuid.uuid4().hex[:12]}"
        instance = await asyncio.to_thread(db.add_instance, record)
        logger.info("Created book instance {}", instance.id)
    else:
        instance = await asyncio.to_thread(db.update_instance, instance_id, record)
        if instance is None:
            raise NotFound("BookInstance", instance_id)
        logger.info("Updated book instance {}", instance.id)
    return Redirect(location=derivations.entity_url("bookinstance", instance.id))


async def create_instance(form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_instance_form(form_data, db)


async def update_instance(instance_id: str, form_data: Mapping[str, Any], db: DatabaseService) -> Redirect:
    return await submit_instance_form(form_data, db, instance_id=instance_id)


async def get_delete_page(instance_id: str, db: DatabaseService) -> BookInstanceDetail:
    return await get_instance_detail(instance_id, db, title="Delete BookInstance")


async def delete_instance(instance_id: str, db: DatabaseService) -> DeleteOutcome:
    return await attempt_delete(
        db.session_factory,
        entity_label="BookInstance",
        entity_id=instance_id,
        primary_query=_instance_query(instance_id),
        dependents_query=lambda _db: [],
        delete=lambda: db.delete_instance(instance_id),
    )
