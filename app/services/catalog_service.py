# /app/services/catalog_service.py

# --- Core Imports ---
from ..models.page_model import CatalogSummary
from .catalog_helpers.aggregate_fetch import fetch_all
from .database_service import DatabaseService


async def get_summary_data(db: DatabaseService) -> CatalogSummary:
    """
    Counts every entity type for the home page. The five counts are
    independent, so they are fetched concurrently and joined.
    """
    counts = await fetch_all(db.session_factory, {
        "book_count": lambda d: d.count_books(),
        "book_instance_count": lambda d: d.count_instances(),
        "book_instance_available_count": lambda d: d.count_instances(status="Available"),
        "author_count": lambda d: d.count_authors(),
        "genre_count": lambda d: d.count_genres(),
    })
    return CatalogSummary(**counts)
