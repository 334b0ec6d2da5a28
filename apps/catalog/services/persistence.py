"""Commit boundary between the catalog services and the database."""

import logging
from contextlib import contextmanager

from django.db import DatabaseError, transaction

from .exceptions import SaveFailedError

logger = logging.getLogger(__name__)


@contextmanager
def committing():
    """
    Run a block of writes as one transaction.

    Any database failure rolls the whole block back and surfaces as
    SaveFailedError, so callers see either every change or none.

    Raises:
        SaveFailedError: If the database rejects the changes
    """
    try:
        with transaction.atomic():
            yield
    except DatabaseError as e:
        logger.error("Unresolved database error: %s", e, exc_info=True)
        raise SaveFailedError(str(e)) from e


def refresh(store):
    """Reload the caller's snapshot after a successful commit."""
    if store is not None:
        store.load_data()
