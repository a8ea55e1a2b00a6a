# /app/services/catalog_helpers/integrity_guard.py

"""
Block-on-reference deletion.

An entity is only removed when nothing references it. When dependents exist
the delete is refused and the full dependent list is handed back so the
confirmation page can show why. There is no cascading delete anywhere in
the catalog; this module is the single place that decides it.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

from loguru import logger
from sqlalchemy.orm import sessionmaker

from .aggregate_fetch import Query, fetch_aggregate


@dataclass
class DeleteOutcome:
    deleted: bool
    entity: Any = None
    dependents: List[Any] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return not self.deleted


async def attempt_delete(
    session_factory: sessionmaker,
    entity_label: str,
    entity_id: str,
    primary_query: Query,
    dependents_query: Query,
    delete: Callable[[], Any],
) -> DeleteOutcome:
    """
    Deletes the entity if and only if `dependents_query` finds nothing.

    `delete` performs the physical removal by id; it reporting that the row
    was already gone still counts as a successful delete. A missing entity
    raises `NotFound` from the aggregate fetch.

    The check and the delete are separate store operations, so a dependent
    created in between is not seen.
    """
    results: Dict[str, Any] = await fetch_aggregate(
        session_factory,
        primary=("entity", primary_query),
        dependents={"dependents": dependents_query},
        entity_label=entity_label,
        entity_id=entity_id,
    )
    dependents = list(results["dependents"])
    if dependents:
        logger.warning(
            "Refusing to delete {} {}: {} dependent record(s)", entity_label, entity_id, len(dependents)
        )
        return DeleteOutcome(deleted=False, entity=results["entity"], dependents=dependents)

    if not await asyncio.to_thread(delete):
        logger.info("{} {} was already gone at delete time", entity_label, entity_id)
    else:
        logger.info("Deleted {} {}", entity_label, entity_id)
    return DeleteOutcome(deleted=True, entity=results["entity"])
