# /app/routers/genre_router.py

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from ..models.form_model import FormPage
from ..models.page_model import GenreDetail, GenreList
from ..services import genre_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.exceptions import ValidationFailed
from .form_data import page_response, read_form, redirect_to, redirect_to_listing

router = APIRouter()


@router.get("/genres", response_model=GenreList, summary="List All Genres")
async def list_genres(db: DatabaseService = Depends(get_db_service)):
    return await genre_service.get_genre_list(db)


@router.get("/genre/create", response_model=FormPage, summary="Get the Genre Create Form")
def get_create_form():
    return genre_service.get_create_form()


@router.post("/genre/create", summary="Create a Genre", responses={422: {"model": FormPage}})
async def create_genre(form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await genre_service.create_genre(form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)


@router.get("/genre/{genre_id}", response_model=GenreDetail, summary="Get a Genre with Its Books")
async def get_genre(genre_id: str, db: DatabaseService = Depends(get_db_service)):
    return await genre_service.get_genre_detail(genre_id, db)


@router.get("/genre/{genre_id}/delete", response_model=GenreDetail, summary="Get the Genre Delete Confirmation")
async def get_delete_page(genre_id: str, db: DatabaseService = Depends(get_db_service)):
    return await genre_service.get_delete_page(genre_id, db)


@router.post("/genre/{genre_id}/delete", summary="Delete a Genre", responses={409: {"model": GenreDetail}})
async def delete_genre(genre_id: str, db: DatabaseService = Depends(get_db_service)):
    outcome = await genre_service.delete_genre(genre_id, db)
    if outcome.blocked:
        return page_response(genre_service.blocked_page(outcome), status.HTTP_409_CONFLICT)
    return redirect_to_listing("genres")


@router.get("/genre/{genre_id}/update", response_model=FormPage, summary="Get the Prefilled Genre Update Form")
async def get_update_form(genre_id: str, db: DatabaseService = Depends(get_db_service)):
    return await genre_service.get_update_form(genre_id, db)


@router.post("/genre/{genre_id}/update", summary="Update a Genre", responses={422: {"model": FormPage}})
async def update_genre(genre_id: str, form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await genre_service.update_genre(genre_id, form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)
