# /app/routers/author_router.py

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from ..models.form_model import FormPage
from ..models.page_model import AuthorDetail, AuthorList
from ..services import author_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.exceptions import ValidationFailed
from .form_data import page_response, read_form, redirect_to, redirect_to_listing

router = APIRouter()


@router.get("/authors", response_model=AuthorList, summary="List All Authors")
async def list_authors(db: DatabaseService = Depends(get_db_service)):
    return await author_service.get_author_list(db)


@router.get("/author/create", response_model=FormPage, summary="Get the Author Create Form")
def get_create_form():
    return author_service.get_create_form()


@router.post("/author/create", summary="Create an Author", responses={422: {"model": FormPage}})
async def create_author(form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await author_service.create_author(form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)


@router.get("/author/{author_id}", response_model=AuthorDetail, summary="Get an Author with Their Books")
async def get_author(author_id: str, db: DatabaseService = Depends(get_db_service)):
    return await author_service.get_author_detail(author_id, db)


@router.get("/author/{author_id}/delete", response_model=AuthorDetail, summary="Get the Author Delete Confirmation")
async def get_delete_page(author_id: str, db: DatabaseService = Depends(get_db_service)):
    return await author_service.get_delete_page(author_id, db)


@router.post("/author/{author_id}/delete", summary="Delete an Author", responses={409: {"model": AuthorDetail}})
async def delete_author(author_id: str, db: DatabaseService = Depends(get_db_service)):
    outcome = await author_service.delete_author(author_id, db)
    if outcome.blocked:
        return page_response(author_service.blocked_page(outcome), status.HTTP_409_CONFLICT)
    return redirect_to_listing("authors")


@router.get("/author/{author_id}/update", response_model=FormPage, summary="Get the Prefilled Author Update Form")
async def get_update_form(author_id: str, db: DatabaseService = Depends(get_db_service)):
    return await author_service.get_update_form(author_id, db)


@router.post("/author/{author_id}/update", summary="Update an Author", responses={422: {"model": FormPage}})
async def update_author(author_id: str, form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await author_service.update_author(author_id, form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)
