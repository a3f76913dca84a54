"""Shared transaction handling for the SQLAlchemy repositories."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncGenerator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tollgate.core.logging import get_logger
from tollgate.domain.exceptions import StorageError

logger = get_logger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to naive datetimes read back from SQLite."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SQLAlchemyRepository:
    """Base class for repositories that own one unit of work per call."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: SQLAlchemy async session.
        """
        self._session = session

    @asynccontextmanager
    async def _write(self, operation: str) -> AsyncGenerator[None, None]:
        """Run the block as one transaction and commit it.

        IntegrityError is re-raised untouched so callers can translate it;
        any other database failure becomes StorageError. Both roll back.
        """
        try:
            yield
            await self._session.commit()
        except IntegrityError:
            await self._session.rollback()
            raise
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.error("Database write failed", operation=operation, error=str(e))
            raise StorageError() from e
        except Exception:
            await self._session.rollback()
            raise

    @asynccontextmanager
    async def _read(self, operation: str) -> AsyncGenerator[None, None]:
        """Translate database failures during a query into StorageError."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error("Database read failed", operation=operation, error=str(e))
            raise StorageError() from e
