# /app/main.py

# --- Core FastAPI Imports ---
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from loguru import logger

# --- Application-specific Router Imports ---
from .routers import (
    catalog_router,
    author_router,
    genre_router,
    book_router,
    bookinstance_router,
)

# --- Startup Dependencies ---
from .config import CATALOG_PREFIX, CORS_ORIGINS
from .db.database import init_db
from .logging_config import configure_logging
from .services.exceptions import NotFound, StoreFailure

# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    # This code runs ONCE when the application starts up.
    configure_logging()
    init_db()
    logger.info("Catalog store ready")
    yield

# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="Local Library Catalog API",
    description="Books, authors, genres and physical copies, with guarded deletes.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Error Mapping ---
# Services raise typed failures; this is the only place they become statuses.
@app.exception_handler(NotFound)
async def handle_not_found(request: Request, exc: NotFound):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})

@app.exception_handler(StoreFailure)
async def handle_store_failure(request: Request, exc: StoreFailure):
    logger.error("Store failure on {} {}: {}", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "The catalog store could not complete the request."},
    )

# --- API Router Inclusion ---
app.include_router(catalog_router.router, prefix=CATALOG_PREFIX, tags=["Catalog"])
app.include_router(author_router.router, prefix=CATALOG_PREFIX, tags=["Authors"])
app.include_router(genre_router.router, prefix=CATALOG_PREFIX, tags=["Genres"])
app.include_router(book_router.router, prefix=CATALOG_PREFIX, tags=["Books"])
app.include_router(bookinstance_router.router, prefix=CATALOG_PREFIX, tags=["Book Instances"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "Catalog backend is running!", "version": app.version}
