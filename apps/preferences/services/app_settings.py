"""
User-facing application settings.

Each setting is stored under its own preference key. Reading never fails:
a missing or invalid stored value falls back to its default (and is
logged), so a corrupted row can't break the API.
"""

import logging
from typing import Optional

from django.conf import settings

from apps.catalog.services.filtering import SortOrder

from .exceptions import InvalidPreferenceError
from .store import get_preference, set_preference

logger = logging.getLogger(__name__)

CURRENCY_KEY = 'selectedCurrency'
SORT_ORDER_KEY = 'defaultSortOrder'
THEME_KEY = 'selectedThemeId'
ONBOARDING_KEY = 'hasCompletedOnboarding'

AVAILABLE_CURRENCIES = [
    'USD', 'EUR', 'GBP', 'JPY', 'CNY', 'AUD', 'CAD', 'CHF', 'INR', 'RUB',
    'BRL', 'MXN', 'KRW', 'SGD', 'HKD', 'NOK', 'SEK', 'DKK', 'PLN', 'NZD',
    'TRY', 'ZAR', 'THB', 'MYR', 'PHP', 'IDR', 'VND', 'AED', 'SAR', 'ILS',
    'CLP', 'ARS', 'COP', 'PEN', 'UAH', 'CZK', 'HUF', 'RON', 'BGN', 'HRK',
]

THEME_IDS = ['auto', 'light', 'dark']

DEFAULT_SORT_ORDER = SortOrder.DATE.value
DEFAULT_THEME_ID = 'auto'


def default_currency() -> str:
    configured = getattr(settings, 'DEFAULT_CURRENCY', 'USD')
    return configured if configured in AVAILABLE_CURRENCIES else 'USD'


class AppSettings:
    """
    Snapshot of the user's settings.

    Attributes:
        currency: ISO code used when a service has none
        default_sort_order: price, date or name
        theme_id: auto, light or dark
        has_completed_onboarding: Whether the intro was dismissed
    """

    def __init__(
        self,
        currency: Optional[str] = None,
        default_sort_order: Optional[str] = None,
        theme_id: Optional[str] = None,
        has_completed_onboarding: bool = False
    ):
        self.currency = currency or default_currency()
        self.default_sort_order = default_sort_order or DEFAULT_SORT_ORDER
        self.theme_id = theme_id or DEFAULT_THEME_ID
        self.has_completed_onboarding = has_completed_onboarding

    def as_dict(self) -> dict:
        return {
            'currency': self.currency,
            'default_sort_order': self.default_sort_order,
            'theme_id': self.theme_id,
            'has_completed_onboarding': self.has_completed_onboarding,
        }

    def __repr__(self):
        return f"AppSettings({self.as_dict()!r})"


def _read_choice(key: str, allowed, default):
    value = get_preference(key)
    if value is None:
        return default
    if value not in allowed:
        logger.warning("Ignoring invalid stored value for %s: %r", key, value)
        return default
    return value


def load_app_settings() -> AppSettings:
    """Read settings, substituting defaults for anything missing or invalid."""
    onboarding = get_preference(ONBOARDING_KEY, False)

    return AppSettings(
        currency=_read_choice(CURRENCY_KEY, AVAILABLE_CURRENCIES, default_currency()),
        default_sort_order=_read_choice(SORT_ORDER_KEY, SortOrder.values, DEFAULT_SORT_ORDER),
        theme_id=_read_choice(THEME_KEY, THEME_IDS, DEFAULT_THEME_ID),
        has_completed_onboarding=onboarding is True,
    )


def save_app_settings(
    *,
    currency: Optional[str] = None,
    default_sort_order: Optional[str] = None,
    theme_id: Optional[str] = None,
    has_completed_onboarding: Optional[bool] = None
) -> AppSettings:
    """
    Update the given settings; omitted ones keep their stored value.

    Every value is validated before anything is written.

    Returns:
        Settings after the update

    Raises:
        InvalidPreferenceError: If a value is outside its allowed set
        PreferencesServiceError: If the database write fails
    """
    updates = {}

    if currency is not None:
        currency = currency.strip().upper()
        if currency not in AVAILABLE_CURRENCIES:
            raise InvalidPreferenceError(f"Unsupported currency: {currency}")
        updates[CURRENCY_KEY] = currency

    if default_sort_order is not None:
        if default_sort_order not in SortOrder.values:
            raise InvalidPreferenceError(
                f"Invalid sort order: '{default_sort_order}'. "
                f"Valid options: {', '.join(SortOrder.values)}"
            )
        updates[SORT_ORDER_KEY] = default_sort_order

    if theme_id is not None:
        if theme_id not in THEME_IDS:
            raise InvalidPreferenceError(
                f"Invalid theme: '{theme_id}'. Valid options: {', '.join(THEME_IDS)}"
            )
        updates[THEME_KEY] = theme_id

    if has_completed_onboarding is not None:
        updates[ONBOARDING_KEY] = bool(has_completed_onboarding)

    for key, value in updates.items():
        set_preference(key, value)

    return load_app_settings()
