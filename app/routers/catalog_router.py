# /app/routers/catalog_router.py

# --- Core FastAPI Imports ---
from fastapi import APIRouter, Depends

from ..models.page_model import CatalogSummary
from ..services import catalog_service
from ..services.database_service import DatabaseService, get_db_service

router = APIRouter()


@router.get(
    "",
    response_model=CatalogSummary,
    summary="Get Catalog Summary",
    description="Counts of books, copies, available copies, authors and genres for the home page."
)
async def get_catalog_summary(db: DatabaseService = Depends(get_db_service)):
    return await catalog_service.get_summary_data(db=db)
