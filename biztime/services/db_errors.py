"""
BizTime Backend — Storage Error Translation
=============================================

What:  Context manager that turns SQLAlchemy failures into application
       exceptions for the global handlers.

    IntegrityError   → ConflictError  (409, message chosen by the caller)
    SQLAlchemyError  → DatabaseError  (500, generic message, details logged)

Application exceptions raised inside the block (NotFoundError,
BadRequestError) pass through untouched.
"""

import logging
from contextlib import contextmanager
from typing import Any, Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from biztime.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


@contextmanager
def translate_db_errors(
    operation: str,
    conflict_message: str = "The request conflicts with existing data",
    **context: Any,
) -> Iterator[None]:
    """
    Usage:
        with translate_db_errors("create company", code=code):
            db.add(company)
            await db.flush()
    """
    try:
        yield
    except IntegrityError as e:
        logger.warning("Integrity violation during %s: %s", operation, e.orig)
        raise ConflictError(
            message=conflict_message,
            context={"operation": operation, **context},
        ) from e
    except SQLAlchemyError as e:
        logger.error("Database error during %s: %s", operation, str(e), exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(e).__name__, **context},
        ) from e
