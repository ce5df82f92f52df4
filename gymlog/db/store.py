"""DataStore: the four persistence primitives the session engine is written against.

Every write the engine performs goes through ``insert``/``delete`` followed by one
``save()``, which commits the transaction. A failed save is rolled back and
re-raised as :class:`PersistenceError`, so callers never see half-written sets.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from gymlog.core.exceptions import ConstraintViolation, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DataStore:
    """Thin unit-of-work wrapper over an ``AsyncSession``."""

    def __init__(self, session: AsyncSession):
        self.session = session

    def insert(self, entity: Any) -> None:
        """Stage a new entity; it is written by the next ``save()``."""
        self.session.add(entity)

    async def fetch(
        self,
        model: type[T],
        *criteria: Any,
        order_by: Iterable[Any] = (),
        limit: int | None = None,
        options: Iterable[Any] = (),
    ) -> list[T]:
        """Return entities of ``model`` matching all ``criteria``."""
        stmt = select(model).where(*criteria)
        for opt in options:
            stmt = stmt.options(opt)
        for clause in order_by:
            stmt = stmt.order_by(clause)
        if limit is not None:
            stmt = stmt.limit(limit)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as e:
            logger.exception("Fetch of %s failed: %s", model.__name__, e)
            raise PersistenceError(f"Could not read {model.__name__}") from e
        return list(result.scalars().all())

    async def get(self, model: type[T], ident: uuid.UUID, options: Sequence[Any] = ()) -> T | None:
        """Fetch one entity by primary key (``None`` when absent)."""
        rows = await self.fetch(model, model.id == ident, options=options, limit=1)
        return rows[0] if rows else None

    async def save(self) -> None:
        """Commit pending changes as one transaction."""
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            logger.warning("Save rejected by constraint: %s", e.orig)
            raise ConstraintViolation("Write conflicts with existing data") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.exception("Save failed: %s", e)
            raise PersistenceError("Could not save changes") from e

    async def delete(self, entity: Any) -> None:
        """Stage ``entity`` for deletion; it is removed by the next ``save()``."""
        await self.session.delete(entity)
