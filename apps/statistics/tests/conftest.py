import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from rest_framework.test import APIClient
from apps.catalog.models import Category, Service


def utc(*args):
    return datetime(*args, tzinfo=dt_timezone.utc)


@pytest.fixture
def api_client():
    """Return an API client."""
    return APIClient()


@pytest.fixture
def now():
    """Fixed reference time for period calculations."""
    return utc(2024, 6, 15, 12, 0)


@pytest.fixture
def stats_food(db):
    return Category.objects.create(name='Food', sort_order=0)


@pytest.fixture
def stats_travel(db):
    return Category.objects.create(name='Travel', sort_order=1)


@pytest.fixture
def build_service():
    """Factory for unsaved services, enough for the pure aggregation functions."""
    def _build(price, category=None, date=None, provider=None, name='Service', is_favorite=False):
        return Service(
            name=name,
            price=Decimal(str(price)),
            category=category,
            date=date or utc(2024, 6, 1, 12, 0),
            provider=provider,
            is_favorite=is_favorite,
        )
    return _build


@pytest.fixture
def make_service(db):
    """Factory for saved services."""
    def _make(price, category=None, date=None, provider=None, name='Service'):
        return Service.objects.create(
            name=name,
            price=Decimal(str(price)),
            category=category,
            date=date or utc(2024, 6, 1, 12, 0),
            provider=provider,
        )
    return _make
