# /app/routers/bookinstance_router.py

from typing import Dict, List

from fastapi import APIRouter, Depends, status

from ..models.form_model import FormPage
from ..models.page_model import BookInstanceDetail, BookInstanceList
from ..services import bookinstance_service
from ..services.database_service import DatabaseService, get_db_service
from ..services.exceptions import ValidationFailed
from .form_data import page_response, read_form, redirect_to, redirect_to_listing

router = APIRouter()


@router.get("/bookinstances", response_model=BookInstanceList, summary="List All Book Copies")
async def list_instances(db: DatabaseService = Depends(get_db_service)):
    return await bookinstance_service.get_instance_list(db)


@router.get("/bookinstance/create", response_model=FormPage, summary="Get the Copy Create Form")
async def get_create_form(db: DatabaseService = Depends(get_db_service)):
    return await bookinstance_service.get_create_form(db)


@router.post("/bookinstance/create", summary="Record a New Copy", responses={422: {"model": FormPage}})
async def create_instance(form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await bookinstance_service.create_instance(form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)


@router.get("/bookinstance/{instance_id}", response_model=BookInstanceDetail, summary="Get a Single Copy")
async def get_instance(instance_id: str, db: DatabaseService = Depends(get_db_service)):
    return await bookinstance_service.get_instance_detail(instance_id, db)


@router.get("/bookinstance/{instance_id}/delete", response_model=BookInstanceDetail, summary="Get the Copy Delete Confirmation")
async def get_delete_page(instance_id: str, db: DatabaseService = Depends(get_db_service)):
    return await bookinstance_service.get_delete_page(instance_id, db)


@router.post("/bookinstance/{instance_id}/delete", summary="Delete a Copy")
async def delete_instance(instance_id: str, db: DatabaseService = Depends(get_db_service)):
    # Copies have no dependents, so this is never blocked.
    await bookinstance_service.delete_instance(instance_id, db)
    return redirect_to_listing("bookinstances")


@router.get("/bookinstance/{instance_id}/update", response_model=FormPage, summary="Get the Prefilled Copy Update Form")
async def get_update_form(instance_id: str, db: DatabaseService = Depends(get_db_service)):
    return await bookinstance_service.get_update_form(instance_id, db)


@router.post("/bookinstance/{instance_id}/update", summary="Update a Copy", responses={422: {"model": FormPage}})
async def update_instance(instance_id: str, form: Dict[str, List[str]] = Depends(read_form), db: DatabaseService = Depends(get_db_service)):
    try:
        return redirect_to(await bookinstance_service.update_instance(instance_id, form, db))
    except ValidationFailed as e:
        return page_response(e.form, status.HTTP_422_UNPROCESSABLE_ENTITY)
