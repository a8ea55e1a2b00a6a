# /app/routers/book_router.py

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from ..models.form_model import FormPage
from ..models.page_model import BookDetail, BookList
from ..services import book_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.exceptions import ValidationFailed
from .form_data import page_response, read_form, redirect_to, redirect_to_listing

router = APIRouter()


@router.get("/books", response_model=BookList, summary="List All Books")
async def list_books(db: DatabaseService = Depends(get_db_service)):
    return await book_service.get_book_list(db)


@router.get("/book/create", response_model=FormPage, summary="Get the Book Create Form")
async def get_create_form(db: DatabaseService = Depends(get_db_service)):
    return await book_service.get_create_form(db)


@router.post("/book/create", summary="Create a Book", responses={422: {"model": FormPage}})
async def create_book(form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await book_service.create_book(form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)


@router.get("/book/{book_id}", response_model=BookDetail, summary="Get a Book with Its Copies")
async def get_book(book_id: str, db: DatabaseService = Depends(get_db_service)):
    return await book_service.get_book_detail(book_id, db)


@router.get("/book/{book_id}/delete", response_model=BookDetail, summary="Get the Book Delete Confirmation")
async def get_delete_page(book_id: str, db: DatabaseService = Depends(get_db_service)):
    return await book_service.get_delete_page(book_id, db)


@router.post("/book/{book_id}/delete", summary="Delete a Book", responses={409: {"model": BookDetail}})
async def delete_book(book_id: str, db: DatabaseService = Depends(get_db_service)):
    outcome = await book_service.delete_book(book_id, db)
    if outcome.blocked:
        return page_response(book_service.blocked_page(outcome), status.HTTP_409_CONFLICT)
    return redirect_to_listing("books")


@router.get("/book/{book_id}/update", response_model=FormPage, summary="Get the Prefilled Book Update Form")
async def get_update_form(book_id: str, db: DatabaseService = Depends(get_db_service)):
    return await book_service.get_update_form(book_id, db)


@router.post("/book/{book_id}/update", summary="Update a Book", responses={422: {"model": FormPage}})
async def update_book(book_id: str, form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await book_service.update_book(book_id, form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)
