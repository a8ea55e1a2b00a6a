# /app/services/catalog_helpers/aggregate_fetch.py

"""
Concurrent fan-out/fan-in reads.

Every query is a callable taking a `DatabaseService`. Each one runs on a
worker thread against a session of its own, all of them are started at
once, and the caller resumes only when every query has finished. The first
failure aborts the whole fetch; no partial result is ever returned.
"""

import asyncio
from typing import Any, Callable, Dict, Iterable, Optional, Tuple, Type, TypeVar

from loguru import logger
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from ..database_service import DatabaseService
from ..exceptions import NotFound, StoreFailure

Query = Callable[[Any], Any]
ReadModel = TypeVar("ReadModel", bound=BaseModel)


def as_read(model: Type[ReadModel], row: Any) -> Optional[ReadModel]:
    """Converts a row to its read model while its session is still open."""
    return None if row is None else model.model_validate(row)


def as_read_list(model: Type[ReadModel], rows: Iterable[Any]) -> list:
    return [model.model_validate(row) for row in rows]


def _run_query(session_factory: sessionmaker, query: Query) -> Any:
    try:
        with session_factory() as session:
            return query(DatabaseService(session, session_factory))
    except SQLAlchemyError as exc:
        logger.exception("Catalog read failed")
        raise StoreFailure(str(exc)) from exc


async def fetch_all(session_factory: sessionmaker, queries: Dict[str, Query]) -> Dict[str, Any]:
    """
    Runs all named queries concurrently and returns their results under the
    same names. Raises the first error any query raised.
    """
    names = list(queries)
    results = await asyncio.gather(
        *(asyncio.to_thread(_run_query, session_factory, queries[name]) for name in names)
    )
    return dict(zip(names, results))


async def fetch_aggregate(
    session_factory: sessionmaker,
    primary: Tuple[str, Query],
    dependents: Dict[str, Query],
    entity_label: str,
    entity_id: str,
) -> Dict[str, Any]:
    """
    Fetches a primary entity together with its dependent queries in one join.

    The primary query runs alongside the dependents; if it yields nothing,
    `NotFound` is raised and the dependents' results are discarded.
    """
    primary_name, primary_query = primary
    results = await fetch_all(session_factory, {primary_name: primary_query, **dependents})
    if results[primary_name] is None:
        raise NotFound(entity_label, entity_id)
    return results
