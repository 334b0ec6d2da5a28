"""
Service search, filtering and sorting.

Every function here works on an in-memory list (usually a CatalogStore
snapshot) and returns a new list; input order is preserved unless a sort
is requested.
"""

from datetime import date as date_type, datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Iterable

from django.db import models
from django.utils import timezone


class SortOrder(models.TextChoices):
    PRICE = 'price', 'Price'
    DATE = 'date', 'Date'
    NAME = 'name', 'Name'


SEARCH_FIELDS = ('name', 'provider', 'note', 'location')


def parse_price_bound(value) -> Optional[Decimal]:
    """
    Read a min/max price bound.

    Returns None (no constraint) for empty, malformed or non-positive input.
    """
    if value is None or value == '':
        return None

    try:
        bound = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return None

    if not bound.is_finite() or bound <= 0:
        return None
    return bound


def normalize_date_range(date_from, date_to):
    """Return the bounds in ascending order; reversed input is swapped."""
    if date_from is not None and date_to is not None and _sort_key(date_from) > _sort_key(date_to):
        return date_to, date_from
    return date_from, date_to


def _sort_key(value):
    """Comparable form for a date or datetime bound."""
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            value = timezone.localtime(value)
        return value.replace(tzinfo=None)
    return datetime.combine(value, datetime.min.time())


def _matches_text(service, needle: str) -> bool:
    for field in SEARCH_FIELDS:
        value = getattr(service, field, None)
        if value and needle in value.casefold():
            return True
    return False


def _in_date_range(service, date_from, date_to) -> bool:
    moment = service.date
    if timezone.is_aware(moment):
        moment = timezone.localtime(moment)

    if date_from is not None:
        if isinstance(date_from, datetime):
            if moment.replace(tzinfo=None) < _sort_key(date_from):
                return False
        elif moment.date() < date_from:
            return False

    if date_to is not None:
        if isinstance(date_to, datetime):
            if moment.replace(tzinfo=None) > _sort_key(date_to):
                return False
        elif moment.date() > date_to:
            return False

    return True


def sort_services(services: Iterable, sort: Optional[str]) -> list:
    """
    Sort services; ties keep their original relative order.

    price: cheapest first, date: newest first, name: A to Z.
    """
    services = list(services)

    if sort == SortOrder.PRICE:
        return sorted(services, key=lambda s: s.price)
    if sort == SortOrder.DATE:
        return sorted(services, key=lambda s: s.date, reverse=True)
    if sort == SortOrder.NAME:
        return sorted(services, key=lambda s: (s.name or '').casefold())
    return services


def filter_services(
    services: Iterable,
    *,
    search: Optional[str] = None,
    category=None,
    date_from: Optional[date_type] = None,
    date_to: Optional[date_type] = None,
    min_price=None,
    max_price=None,
    sort: Optional[str] = None
) -> list:
    """
    Filter a service snapshot.

    Args:
        services: Services to filter
        search: Case-insensitive substring of name, provider, note or location
        category: Category instance or id to match
        date_from: Inclusive lower bound (date or datetime)
        date_to: Inclusive upper bound (date or datetime)
        min_price: Lower price bound, ignored unless a positive number
        max_price: Upper price bound, ignored unless a positive number
        sort: One of SortOrder values, or None to keep input order

    Returns:
        Filtered list of services

    Note:
        A reversed date range is swapped rather than rejected, and
        unparseable price bounds are ignored rather than rejected.
    """
    filtered = list(services)

    if search:
        needle = search.casefold()
        filtered = [s for s in filtered if _matches_text(s, needle)]

    if category is not None:
        category_id = str(getattr(category, 'id', category))
        filtered = [s for s in filtered if str(s.category_id) == category_id]

    if date_from is not None or date_to is not None:
        date_from, date_to = normalize_date_range(date_from, date_to)
        filtered = [s for s in filtered if _in_date_range(s, date_from, date_to)]

    low = parse_price_bound(min_price)
    if low is not None:
        filtered = [s for s in filtered if s.price >= low]

    high = parse_price_bound(max_price)
    if high is not None:
        filtered = [s for s in filtered if s.price <= high]

    return sort_services(filtered, sort)


def search_categories(categories: Iterable, text: Optional[str]) -> list:
    """Categories whose name contains text; empty text matches nothing."""
    if not text:
        return []
    needle = text.casefold()
    return [c for c in categories if needle in (c.name or '').casefold()]


def favorites(services: Iterable) -> list:
    return [s for s in services if s.is_favorite]
