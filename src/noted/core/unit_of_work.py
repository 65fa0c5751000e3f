"""Explicit commit/rollback scope over an ``AsyncSession``."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .exceptions import StorageError

logger = logging.getLogger(__name__)

_DEPTH_KEY = "noted.uow_depth"


@asynccontextmanager
async def unit_of_work(session: AsyncSession) -> AsyncIterator[AsyncSession]:
    """Run the block as one atomic group of storage operations.

    The outermost scope commits on success and rolls back on any exception.
    Nested scopes join the outer one, so repository methods that open their
    own unit of work can be composed inside a larger one (ingestion).

    ``SQLAlchemyError`` is re-raised as ``StorageError`` after rollback; any
    other exception propagates unchanged.
    """
    depth = session.info.get(_DEPTH_KEY, 0)
    session.info[_DEPTH_KEY] = depth + 1
    try:
        if depth:
            yield session
            return

        try:
            yield session
            await session.commit()
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error("Unit of work rolled back", exc_info=e)
            raise StorageError(str(e)) from e
        except BaseException:
            await session.rollback()
            raise
    finally:
        session.info[_DEPTH_KEY] = depth
