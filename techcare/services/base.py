"""Shared helpers for the database-backed stores."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from techcare.core.exceptions import CollaboratorError

logger = logging.getLogger(__name__)


@contextmanager
def collaborator_errors(operation: str) -> Iterator[None]:
    """Turn driver/database failures into ``CollaboratorError``.

    The database's own diagnostic is kept for the response; connection
    parameters are not part of it.
    """
    try:
        yield
    except SQLAlchemyError as e:
        diagnostic = str(getattr(e, "orig", None) or e).splitlines()[0]
        logger.error(f"Database error during {operation}: {diagnostic}", exc_info=True)
        raise CollaboratorError(diagnostic) from e
