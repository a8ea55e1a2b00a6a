# /app/routers/form_data.py

from typing import Dict, List

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse, RedirectResponse
from starlette import status

from ..models.form_model import Redirect
from ..services.catalog_helpers.derivations import listing_url


async def read_form(request: Request) -> Dict[str, List[str]]:
    """
    FastAPI dependency returning the submitted form as field -> list of values.
    Repeated keys (e.g. several `genre` checkboxes) keep every value.
    """
    form = await request.form()
    return {key: form.getlist(key) for key in form.keys()}


def redirect_to(target: Redirect) -> RedirectResponse:
    return RedirectResponse(url=target.location, status_code=status.HTTP_303_SEE_OTHER)


def page_response(page, status_code: int) -> JSONResponse:
    """Re-renders a view model with a non-2xx status (rejected form, blocked delete)."""
    return JSONResponse(status_code=status_code, content=jsonable_encoder(page))


def redirect_to_listing(kind_plural: str) -> RedirectResponse:
    return redirect_to(Redirect(location=listing_url(kind_plural)))
