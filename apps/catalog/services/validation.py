"""Input validation and normalization for catalog writes."""

from datetime import date as date_type, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Optional, Union

from django.conf import settings
from django.utils import timezone

from ..models import MAX_SERVICE_PRICE
from .exceptions import (
    EmptyNameError,
    InvalidPriceError,
    PriceTooLargeError,
    PhotoTooLargeError,
)


def clean_name(name: Optional[str]) -> str:
    """
    Trim a display name.

    Raises:
        EmptyNameError: If nothing is left after trimming
    """
    cleaned = (name or '').strip()
    if not cleaned:
        raise EmptyNameError()
    return cleaned


def clean_optional_text(value: Optional[str]) -> Optional[str]:
    """Trim free text; empty-after-trim becomes None."""
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def clean_price(price: Union[Decimal, int, float, str]) -> Decimal:
    """
    Convert and bound-check a price.

    Args:
        price: Any number-like value

    Returns:
        Decimal price

    Raises:
        InvalidPriceError: If price is not a number or is negative
        PriceTooLargeError: If price exceeds 1,000,000,000
    """
    try:
        value = Decimal(str(price))
    except (InvalidOperation, ValueError, TypeError):
        raise InvalidPriceError()

    if not value.is_finite() or value < 0:
        raise InvalidPriceError()

    if value > MAX_SERVICE_PRICE:
        raise PriceTooLargeError()

    return value


def clean_currency(currency: Optional[str]) -> str:
    """Uppercase currency code, falling back to the configured default."""
    cleaned = (currency or '').strip().upper()
    return cleaned or settings.DEFAULT_CURRENCY


def clean_date(value: Optional[Union[datetime, date_type]]) -> datetime:
    """Return an aware datetime; None means now, plain dates mean midnight."""
    if value is None:
        return timezone.now()

    if not isinstance(value, datetime):
        value = datetime.combine(value, time.min)

    if timezone.is_naive(value):
        value = timezone.make_aware(value)

    return value


def clean_photo(photo_data: Optional[bytes]) -> Optional[bytes]:
    """
    Check photo size against SERVICE_PHOTO_MAX_BYTES.

    Raises:
        PhotoTooLargeError: If the blob is over the cap
    """
    if not photo_data:
        return None

    photo_data = bytes(photo_data)
    if len(photo_data) > settings.SERVICE_PHOTO_MAX_BYTES:
        raise PhotoTooLargeError(
            f"Photo is too large ({len(photo_data)} bytes, "
            f"max {settings.SERVICE_PHOTO_MAX_BYTES})"
        )
    return photo_data


def validate_service_input(
    *,
    name: Optional[str],
    price,
    currency: Optional[str] = None,
    date=None,
    provider: Optional[str] = None,
    location: Optional[str] = None,
    note: Optional[str] = None,
    photo_data: Optional[bytes] = None
) -> dict:
    """
    Validate and normalize every writable service field.

    Name is checked first, then price, so the first failing rule wins.

    Returns:
        Dict of cleaned field values ready for the model

    Raises:
        EmptyNameError, InvalidPriceError, PriceTooLargeError,
        PhotoTooLargeError
    """
    return {
        'name': clean_name(name),
        'price': clean_price(price),
        'currency': clean_currency(currency),
        'date': clean_date(date),
        'provider': clean_optional_text(provider),
        'location': clean_optional_text(location),
        'note': clean_optional_text(note),
        'photo_data': clean_photo(photo_data),
    }
