"""Service CRUD operations."""

import logging
from uuid import UUID
from typing import Optional

from django.core.exceptions import ValidationError as DjangoValidationError
from django.utils import timezone

from ..models import Service, Category
from .exceptions import ServiceNotFoundError, CategoryNotFoundError
from .persistence import committing, refresh
from .validation import validate_service_input

logger = logging.getLogger(__name__)


def _resolve_category(category) -> Category:
    """Accept a Category or its id."""
    if category is None:
        raise CategoryNotFoundError("Category is required")

    if isinstance(category, Category):
        category_id = category.id
    else:
        category_id = category

    try:
        return Category.objects.get(id=category_id)
    except (Category.DoesNotExist, DjangoValidationError, ValueError):
        raise CategoryNotFoundError(f"Category {category_id} not found")


def _get_service(service_id: UUID) -> Service:
    try:
        return Service.objects.select_related('category').get(id=service_id)
    except (Service.DoesNotExist, DjangoValidationError, ValueError):
        raise ServiceNotFoundError(f"Service {service_id} not found")


def add_service(
    *,
    name: str,
    category,
    price,
    currency: Optional[str] = None,
    date=None,
    provider: Optional[str] = None,
    location: Optional[str] = None,
    photo_data: Optional[bytes] = None,
    note: Optional[str] = None,
    store=None
) -> Service:
    """
    Record a new service payment.

    This operation:
    1. Validates name and price bounds
    2. Trims free text, turning empty values into None
    3. Creates the record in one transaction
    4. Reloads the given store

    Args:
        name: Display name (trimmed, required)
        category: Category instance or id (required)
        price: 0 <= price <= 1,000,000,000
        currency: ISO code, defaults to DEFAULT_CURRENCY
        date: When it was paid, defaults to now
        provider: Optional provider name
        location: Optional location
        photo_data: Optional photo blob (max 2 MB)
        note: Optional note
        store: CatalogStore to refresh after commit

    Returns:
        Created Service instance

    Raises:
        EmptyNameError: If name is blank
        InvalidPriceError: If price is negative
        PriceTooLargeError: If price is over the cap
        PhotoTooLargeError: If photo is over the cap
        CategoryNotFoundError: If category is missing or unknown
        SaveFailedError: If the database write fails
    """
    fields = validate_service_input(
        name=name,
        price=price,
        currency=currency,
        date=date,
        provider=provider,
        location=location,
        note=note,
        photo_data=photo_data,
    )

    with committing():
        fields['category'] = _resolve_category(category)
        service = Service.objects.create(is_favorite=False, **fields)

    logger.info("Added service %s (%s %s)", service.id, service.price, service.currency)
    refresh(store)
    return service


def update_service(
    *,
    service_id: UUID,
    name: str,
    category,
    price,
    currency: Optional[str] = None,
    date=None,
    provider: Optional[str] = None,
    location: Optional[str] = None,
    photo_data: Optional[bytes] = None,
    note: Optional[str] = None,
    store=None
) -> Service:
    """
    Replace every editable field of an existing service.

    Validation is identical to add_service. The favorite flag is kept.

    Raises:
        ServiceNotFoundError: If service doesn't exist
        EmptyNameError, InvalidPriceError, PriceTooLargeError,
        PhotoTooLargeError, CategoryNotFoundError, SaveFailedError
    """
    fields = validate_service_input(
        name=name,
        price=price,
        currency=currency,
        date=date,
        provider=provider,
        location=location,
        note=note,
        photo_data=photo_data,
    )

    with committing():
        service = _get_service(service_id)
        fields['category'] = _resolve_category(category)

        for field, value in fields.items():
            setattr(service, field, value)

        service.save()

    refresh(store)
    return service


def delete_service(*, service_id: UUID, store=None) -> None:
    """
    Delete a service.

    Raises:
        ServiceNotFoundError: If service doesn't exist
        SaveFailedError: If the database write fails
    """
    with committing():
        service = _get_service(service_id)
        service.delete()

    logger.info("Deleted service %s", service_id)
    refresh(store)


def toggle_favorite(*, service_id: UUID, store=None) -> Service:
    """
    Flip the favorite flag.

    Raises:
        ServiceNotFoundError: If service doesn't exist
        SaveFailedError: If the database write fails
    """
    with committing():
        service = _get_service(service_id)
        service.is_favorite = not service.is_favorite
        service.save(update_fields=['is_favorite', 'updated_at'])

    refresh(store)
    return service


def duplicate_service(*, service_id: UUID, store=None) -> Service:
    """
    Copy a service as a new record.

    The copy gets a new id, is not a favorite and is dated now; every
    other field, photo included, is carried over.

    Raises:
        ServiceNotFoundError: If service doesn't exist
        SaveFailedError: If the database write fails
    """
    with committing():
        original = _get_service(service_id)
        copy = Service.objects.create(
            name=original.name,
            category=original.category,
            price=original.price,
            currency=original.currency,
            date=timezone.now(),
            provider=original.provider,
            location=original.location,
            photo_data=original.photo_data,
            note=original.note,
            is_favorite=False,
        )

    refresh(store)
    return copy
