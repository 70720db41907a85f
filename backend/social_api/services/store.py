"""
Social API Backend — Entity Store Helpers
===========================================

What:  The primitives every resource service is built from: fetch-or-404,
       reference checks for foreign keys supplied by the client, and
       first-or-create for the pair tables (likes, followers).
Why:   Each service otherwise repeats the same select/None/raise dance,
       and first-or-create has a concurrency subtlety worth writing once.
"""

import logging
from typing import Any, Optional, Tuple, Type, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from social_api.database import Base
from social_api.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_404(
    db: AsyncSession,
    model: Type[ModelT],
    entity_id: int,
    resource: str,
) -> ModelT:
    """
    Load a row by primary key.

    Raises:
        NotFoundError: the id does not resolve (→ 404)
    """
    instance = await db.get(model, entity_id)
    if instance is None:
        raise NotFoundError(resource=resource, resource_id=entity_id)
    return instance


async def ensure_reference(
    db: AsyncSession,
    model: Type[ModelT],
    entity_id: int,
    field: str,
) -> ModelT:
    """
    Load a row the client referenced by id in the request body.

    Unlike get_or_404 this is a validation failure (→ 400): the resource
    being created is what's wrong, not the URL.
    """
    instance = await db.get(model, entity_id)
    if instance is None:
        raise ValidationError(
            message=f"The selected {field.replace('_', ' ')} is invalid.",
            field=field,
        )
    return instance


async def find_first(db: AsyncSession, model: Type[ModelT], **criteria: Any) -> Optional[ModelT]:
    query = select(model).filter_by(**criteria).limit(1)
    result = await db.execute(query)
    return result.scalar_one_or_none()


async def first_or_create(
    db: AsyncSession,
    model: Type[ModelT],
    **criteria: Any,
) -> Tuple[ModelT, bool]:
    """
    Return the row matching criteria, inserting it if absent.

    Concurrency:
        Two requests can both miss the lookup and both insert. The table's
        UNIQUE constraint lets exactly one INSERT win; the loser's INSERT
        runs inside a SAVEPOINT so only that statement is rolled back, and
        the loser then returns the winner's row. The surrounding request
        transaction stays usable.

    Returns:
        (instance, created)
    """
    existing = await find_first(db, model, **criteria)
    if existing is not None:
        return existing, False

    instance = model(**criteria)
    try:
        async with db.begin_nested():
            db.add(instance)
    except IntegrityError:
        existing = await find_first(db, model, **criteria)
        if existing is None:
            raise
        logger.info("Concurrent insert of %s %s resolved to existing row", model.__name__, criteria)
        return existing, False

    return instance, True
