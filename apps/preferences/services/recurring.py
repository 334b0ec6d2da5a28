"""
Recurring services: subscriptions and regular appointments that can be
turned into a recorded service with one call.

Stored under the ``recurringServices`` preference as a list of::

    {"id", "name", "categoryId", "price", "frequency", "provider", "lastAdded"}

where lastAdded is epoch seconds or null.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from django.db import models
from django.utils import timezone

from apps.catalog.models import Category
from apps.catalog.services.service_management import add_service
from apps.statistics.periods import add_months

from .app_settings import load_app_settings
from .exceptions import RecurringServiceError, RecurringServiceNotFoundError
from .store import get_preference, set_preference

logger = logging.getLogger(__name__)

RECURRING_KEY = 'recurringServices'
RECURRING_NOTE = 'Recurring service'


class Frequency(models.TextChoices):
    WEEKLY = 'weekly', 'Weekly'
    MONTHLY = 'monthly', 'Monthly'
    QUARTERLY = 'quarterly', 'Quarterly'
    YEARLY = 'yearly', 'Yearly'


def next_due(recurring: dict) -> Optional[datetime]:
    """When the next entry is due, or None if none was ever added."""
    last_added = recurring.get('last_added')
    if last_added is None:
        return None

    frequency = recurring['frequency']
    if frequency == Frequency.WEEKLY:
        return last_added + timedelta(days=7)
    if frequency == Frequency.MONTHLY:
        return add_months(last_added, 1)
    if frequency == Frequency.QUARTERLY:
        return add_months(last_added, 3)
    return add_months(last_added, 12)


def _parse_price(value) -> Optional[Decimal]:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return price if price.is_finite() else None


def _from_stored(data: dict) -> Optional[dict]:
    try:
        recurring_id = str(UUID(str(data['id'])))
    except (KeyError, ValueError, TypeError):
        return None

    frequency = data.get('frequency')
    if frequency not in Frequency.values:
        frequency = Frequency.MONTHLY.value

    last_added = data.get('lastAdded')
    if last_added is not None:
        try:
            last_added = datetime.fromtimestamp(float(last_added), tz=dt_timezone.utc)
        except (ValueError, TypeError, OverflowError, OSError):
            last_added = None

    return {
        'id': recurring_id,
        'name': data.get('name') or '',
        'category_id': data.get('categoryId'),
        'price': _parse_price(data.get('price')) or Decimal('0'),
        'frequency': frequency,
        'provider': data.get('provider') or '',
        'last_added': last_added,
    }


def _to_stored(recurring: dict) -> dict:
    last_added = recurring.get('last_added')
    return {
        'id': recurring['id'],
        'name': recurring['name'],
        'categoryId': recurring.get('category_id'),
        'price': float(recurring['price']),
        'frequency': recurring['frequency'],
        'provider': recurring.get('provider') or '',
        'lastAdded': last_added.timestamp() if last_added else None,
    }


def load_recurring_services() -> list[dict]:
    """Stored recurring services, each with its computed next_due."""
    stored = get_preference(RECURRING_KEY, [])
    if not isinstance(stored, list):
        logger.warning("Ignoring invalid stored recurring services")
        return []

    recurring_services = []
    for data in stored:
        recurring = _from_stored(data) if isinstance(data, dict) else None
        if recurring is None:
            logger.warning("Skipping unreadable recurring service: %r", data)
            continue
        recurring['next_due'] = next_due(recurring)
        recurring_services.append(recurring)
    return recurring_services


def _save(recurring_services: list[dict]) -> None:
    set_preference(RECURRING_KEY, [_to_stored(r) for r in recurring_services])


def get_recurring_service(recurring_id: UUID) -> dict:
    for recurring in load_recurring_services():
        if recurring['id'] == str(recurring_id):
            return recurring
    raise RecurringServiceNotFoundError(f"Recurring service {recurring_id} not found")


def _clean(name, price, frequency) -> tuple:
    name = (name or '').strip()
    if not name:
        raise RecurringServiceError("Name cannot be empty")

    parsed = _parse_price(price)
    if parsed is None or parsed < 0:
        raise RecurringServiceError("Price must be a positive number")

    if frequency not in Frequency.values:
        raise RecurringServiceError(
            f"Invalid frequency: '{frequency}'. Valid options: {', '.join(Frequency.values)}"
        )

    return name, parsed, frequency


def create_recurring_service(
    *,
    name: str,
    price,
    frequency: str = Frequency.MONTHLY,
    category_id: Optional[UUID] = None,
    provider: str = ''
) -> dict:
    """
    Add a recurring service definition.

    Raises:
        RecurringServiceError: If name is blank, price is negative or
            frequency is unknown
    """
    name, price, frequency = _clean(name, price, frequency)

    recurring = {
        'id': str(uuid.uuid4()),
        'name': name,
        'category_id': str(category_id) if category_id else None,
        'price': price,
        'frequency': frequency,
        'provider': (provider or '').strip(),
        'last_added': None,
    }

    recurring_services = load_recurring_services()
    recurring_services.append(recurring)
    _save(recurring_services)

    recurring['next_due'] = None
    return recurring


def update_recurring_service(
    *,
    recurring_id: UUID,
    name: str,
    price,
    frequency: str,
    category_id: Optional[UUID] = None,
    provider: str = ''
) -> dict:
    """
    Replace a recurring service definition; lastAdded is kept.

    Raises:
        RecurringServiceError: If not found or input is invalid
    """
    name, price, frequency = _clean(name, price, frequency)

    recurring_services = load_recurring_services()
    for recurring in recurring_services:
        if recurring['id'] == str(recurring_id):
            recurring.update(
                name=name,
                price=price,
                frequency=frequency,
                category_id=str(category_id) if category_id else None,
                provider=(provider or '').strip(),
            )
            recurring['next_due'] = next_due(recurring)
            _save(recurring_services)
            return recurring

    raise RecurringServiceNotFoundError(f"Recurring service {recurring_id} not found")


def delete_recurring_service(*, recurring_id: UUID) -> None:
    recurring_services = load_recurring_services()
    remaining = [r for r in recurring_services if r['id'] != str(recurring_id)]

    if len(remaining) == len(recurring_services):
        raise RecurringServiceNotFoundError(f"Recurring service {recurring_id} not found")

    _save(remaining)


def add_service_from_recurring(*, recurring_id: UUID, store=None, now: Optional[datetime] = None):
    """
    Record a service from a recurring definition.

    This operation:
    1. Checks the definition still points at an existing category
    2. Checks price is greater than zero
    3. Records a service dated now, noted as a recurring entry, in the
       configured currency
    4. Stamps lastAdded so next_due moves forward

    Args:
        recurring_id: Recurring service to use
        store: CatalogStore to refresh after commit
        now: Override for the entry date (defaults to now)

    Returns:
        (created Service, updated recurring dict)

    Raises:
        RecurringServiceError: If not found, category is missing or price <= 0
        CatalogServiceError: If recording the service fails
    """
    recurring = get_recurring_service(recurring_id)

    if not recurring['category_id']:
        raise RecurringServiceError("Please select a category for this recurring service")

    try:
        category = Category.objects.filter(id=UUID(str(recurring['category_id']))).first()
    except ValueError:
        category = None
    if category is None:
        raise RecurringServiceError("Category not found. Please update this recurring service.")

    if recurring['price'] <= 0:
        raise RecurringServiceError("Price must be greater than zero")

    now = now or timezone.now()
    service = add_service(
        name=recurring['name'],
        category=category,
        price=recurring['price'],
        currency=load_app_settings().currency,
        date=now,
        provider=recurring['provider'] or None,
        note=RECURRING_NOTE,
        store=store,
    )

    recurring_services = load_recurring_services()
    for item in recurring_services:
        if item['id'] == recurring['id']:
            item['last_added'] = now
            item['next_due'] = next_due(item)
            recurring = item
    _save(recurring_services)

    logger.info("Added service %s from recurring %s", service.id, recurring['id'])
    return service, recurring
