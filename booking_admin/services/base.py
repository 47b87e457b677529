"""
Service base class and shared service helpers.
"""

from abc import ABC
from contextlib import contextmanager
from datetime import datetime
from functools import wraps
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from booking_admin.config.logging import get_logger
from booking_admin.core.exceptions import RepositoryError

logger = get_logger(__name__)


def track_performance(operation_name: str):
    """Decorator logging how long a service operation took."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            start_time = datetime.now()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                duration = (datetime.now() - start_time).total_seconds()
                logger.warning(
                    f"Operation '{operation_name}' failed after {duration:.3f}s: {e}",
                    extra={"operation": operation_name, "duration_seconds": duration},
                )
                raise
            duration = (datetime.now() - start_time).total_seconds()
            logger.info(
                f"Operation '{operation_name}' completed in {duration:.3f}s",
                extra={"operation": operation_name, "duration_seconds": duration},
            )
            return result
        return wrapper
    return decorator


class BaseService(ABC):
    """
    Base for services working on one request scoped session.

    Services group repository writes with ``commit=False`` and close the
    unit of work through ``transaction()``.
    """

    def __init__(self, db: Session):
        self.db = db

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit when the block succeeds, roll back when it raises"""
        try:
            yield self.db
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Transaction rolled back: {e}", exc_info=True)
            raise RepositoryError(operation="transaction") from e
        except Exception:
            self.db.rollback()
            raise
