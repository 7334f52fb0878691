import logging
from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from laborops.core.config import settings
from laborops.core.errors import OperationFailedError, SchedulingError
from laborops.models.base import Base

log = logging.getLogger(__name__)

if not settings.database_url:
    raise ValueError("DATABASE_URL is not set")

# Create engine
engine = create_async_engine(settings.database_url, echo=settings.sql_echo)

# Async session maker
async_session = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Dependency
async def get_db():
    async with async_session() as session:
        yield session

async def create_db_and_tables():
    import laborops.models  # registers every table on Base.metadata

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


@asynccontextmanager
async def transaction(db: AsyncSession, operation: str):
    """Run a multi-step write as one unit: commit on success, roll back on any failure.

    Domain errors raised inside the block propagate unchanged after the
    rollback; database errors surface as ``OperationFailedError``.
    """
    try:
        yield db
        await db.commit()
    except SchedulingError:
        await db.rollback()
        raise
    except SQLAlchemyError as exc:
        await db.rollback()
        log.exception("%s rolled back", operation)
        raise OperationFailedError(f"{operation} failed") from exc
    except Exception:
        await db.rollback()
        log.exception("%s rolled back", operation)
        raise
