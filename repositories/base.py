"""
Translation of SQLAlchemy failures into the application's StorageError.
"""
import functools
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from core.exceptions import StorageError
from utils.logger import get_logger

logger = get_logger(__name__)


def _session_from(args, kwargs) -> AsyncSession | None:
    if isinstance(kwargs.get("db"), AsyncSession):
        return kwargs["db"]
    return next((arg for arg in args if isinstance(arg, AsyncSession)), None)


def storage_call(passthrough: tuple[type[SQLAlchemyError], ...] = ()):
    """
    Decorate an async function taking an AsyncSession.

    Any SQLAlchemyError not listed in `passthrough` rolls the session back
    and is re-raised as StorageError with the driver error chained.
    """
    def decorator(func):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except passthrough:
                raise
            except SQLAlchemyError as e:
                logger.error(
                    f"Storage call failed: {func.__qualname__}",
                    extra={"operation": func.__qualname__, "error_type": type(e).__name__},
                    exc_info=True
                )
                db = _session_from(args, kwargs)
                if db is not None:
                    await db.rollback()
                raise StorageError(str(e)) from e
        return wrapper
    return decorator
