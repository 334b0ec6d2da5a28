"""Key/value access to the preference table."""

import json
import logging
from typing import Any

from django.db import DatabaseError, transaction

from ..models import Preference
from .exceptions import PreferencesServiceError, InvalidPreferenceError

logger = logging.getLogger(__name__)


def get_preference(key: str, default: Any = None) -> Any:
    """
    Read a stored value.

    Returns default when the key is unset or the table can't be read.
    """
    try:
        preference = Preference.objects.filter(key=key).first()
    except DatabaseError as e:
        logger.warning("Failed to read preference %s: %s", key, e)
        return default

    if preference is None or preference.value is None:
        return default
    return preference.value


def set_preference(key: str, value: Any) -> None:
    """
    Store a JSON-serializable value under key.

    Raises:
        InvalidPreferenceError: If the value can't be stored as JSON
        PreferencesServiceError: If the database write fails
    """
    try:
        json.dumps(value)
    except (TypeError, ValueError) as e:
        raise InvalidPreferenceError(f"Value for {key} is not JSON serializable: {e}")

    try:
        with transaction.atomic():
            Preference.objects.update_or_create(key=key, defaults={'value': value})
    except DatabaseError as e:
        logger.error("Failed to save preference %s: %s", key, e)
        raise PreferencesServiceError(f"Failed to save preference {key}") from e


def delete_preference(key: str) -> None:
    """Remove key; unknown keys are ignored."""
    try:
        Preference.objects.filter(key=key).delete()
    except DatabaseError as e:
        logger.error("Failed to delete preference %s: %s", key, e)
        raise PreferencesServiceError(f"Failed to delete preference {key}") from e
