"""Schema management for the document store."""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from banksync.domain.integration.exceptions import DocumentStoreUnavailableError

# Import models to register with Base.metadata
import banksync.infrastructure.persistence.sqlalchemy.models  # noqa: F401
from banksync.infrastructure.persistence.sqlalchemy.models.base import Base

logger = logging.getLogger(__name__)


async def create_tables(engine: AsyncEngine) -> None:
    """Create missing tables. Existing tables and documents are left alone."""
    logger.info("Creating missing tables on %s", engine.url.render_as_string())

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
    except SQLAlchemyError as e:
        logger.error("Cannot create document store schema: %s", e)
        raise DocumentStoreUnavailableError("schema", str(e.__cause__ or e)) from e

    logger.info("Document store schema is up to date")


async def drop_tables(engine: AsyncEngine) -> None:
    """
    Drop every table, deleting all stored documents.

    Used by `banksync db init --reset` and by tests.
    """
    logger.warning("Dropping all document store tables")

    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
    except SQLAlchemyError as e:
        logger.error("Cannot drop document store schema: %s", e)
        raise DocumentStoreUnavailableError("schema", str(e.__cause__ or e)) from e
