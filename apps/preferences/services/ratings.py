"""User ratings of service providers."""

import logging
from decimal import Decimal, InvalidOperation

from .exceptions import InvalidPreferenceError
from .store import get_preference, set_preference

logger = logging.getLogger(__name__)

RATINGS_KEY = 'providerRatings'

DEFAULT_RATING = 5.0
MIN_RATING = 1.0
MAX_RATING = 5.0


def load_provider_ratings() -> dict:
    """Provider name -> rating (float). Invalid entries are skipped."""
    stored = get_preference(RATINGS_KEY, {})
    if not isinstance(stored, dict):
        logger.warning("Ignoring invalid stored provider ratings: %r", stored)
        return {}

    ratings = {}
    for provider, value in stored.items():
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            logger.warning("Skipping invalid rating for provider %s: %r", provider, value)
            continue
        ratings[provider] = float(value)
    return ratings


def rate_provider(*, provider: str, rating) -> dict:
    """
    Store a rating for a provider.

    Returns:
        All ratings after the change

    Raises:
        InvalidPreferenceError: If provider is blank or rating is outside 1..5
    """
    provider = (provider or '').strip()
    if not provider:
        raise InvalidPreferenceError("Provider name cannot be empty")

    try:
        value = float(Decimal(str(rating)))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPreferenceError("Rating must be a number")

    if not MIN_RATING <= value <= MAX_RATING:
        raise InvalidPreferenceError(
            f"Rating must be between {MIN_RATING:g} and {MAX_RATING:g}"
        )

    ratings = load_provider_ratings()
    ratings[provider] = value
    set_preference(RATINGS_KEY, ratings)
    return ratings
