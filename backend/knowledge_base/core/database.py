"""Database configuration and session management."""

from collections.abc import AsyncGenerator
from functools import wraps
from typing import Any, Callable, ParamSpec, TypeVar

from sqlalchemy import event, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from knowledge_base.config import settings
from knowledge_base.core.base_model import Base
from knowledge_base.core.exceptions import ConflictError


def _engine_kwargs() -> dict[str, Any]:
    """Pool options; SQLite drivers do not accept sizing arguments."""
    if settings.is_sqlite:
        return {"echo": settings.database_echo}
    return {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "echo": settings.database_echo,
        "pool_pre_ping": True,
    }


def enable_sqlite_foreign_keys(async_engine: AsyncEngine) -> None:
    """SQLite leaves FOREIGN KEY enforcement off unless asked per connection."""

    @event.listens_for(async_engine.sync_engine, "connect")
    def _set_pragma(dbapi_connection: Any, _: Any) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


# Create async engine
engine: AsyncEngine = create_async_engine(settings.database_url, **_engine_kwargs())
if settings.is_sqlite:
    enable_sqlite_foreign_keys(engine)

# Create async session factory
async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autocommit=False,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Usage:
        @router.get("/faqs")
        async def list_faqs(db: AsyncSession = Depends(get_db)):
            ...
    """
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


# Type variables for transactional decorator
P = ParamSpec("P")
R = TypeVar("R")


def transactional(func: Callable[P, R]) -> Callable[P, R]:
    """Decorator for automatic transaction management.

    Commits on success, rolls back on any exception (cancellation included).
    Works with both standalone functions (with db arg) and service methods (with self.db).
    A unique-constraint violation that survives the upserts is reported as
    ConflictError so the caller can retry.

    Usage:
        class FAQService:
            def __init__(self, db: AsyncSession):
                self.db = db

            @transactional
            async def delete(self, faq_id: UUID) -> None:
                ...  # Auto-committed
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        db: AsyncSession | None = None

        for arg in args:
            if isinstance(arg, AsyncSession):
                db = arg
                break

        if db is None:
            db = kwargs.get("db")

        if db is None and args:
            first_arg = args[0]
            if hasattr(first_arg, "db") and isinstance(first_arg.db, AsyncSession):
                db = first_arg.db

        if db is None:
            raise ValueError("No AsyncSession found in function arguments")

        try:
            result = await func(*args, **kwargs)
            await db.commit()
            return result
        except IntegrityError as exc:
            await db.rollback()
            raise ConflictError(str(exc.orig)) from exc
        except BaseException:
            await db.rollback()
            raise

    return wrapper  # type: ignore


async def check_db_connection() -> bool:
    """Check database connectivity for health checks."""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
            return True
    except Exception:
        return False


async def init_db(bind: AsyncEngine | None = None) -> None:
    """Initialize database (create tables).

    Note: In production, use Alembic migrations instead.
    """
    # Register all models with Base.metadata
    from knowledge_base.modules.faqs import models  # noqa: F401

    async with (bind or engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
