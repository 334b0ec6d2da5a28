import pytest
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from rest_framework.test import APIClient
from apps.catalog.models import Category, Service
from apps.catalog.services import CatalogStore


@pytest.fixture
def api_client():
    """Return an API client (the API is single-owner, no auth)."""
    return APIClient()


@pytest.fixture
def store(db):
    """Return an empty, loaded catalog snapshot."""
    return CatalogStore.load()


@pytest.fixture
def category_hair(db):
    """Create the first category."""
    return Category.objects.create(name='Haircut', icon_name='scissors', color_name='FF6B6B', sort_order=0)


@pytest.fixture
def category_car(db):
    """Create the second category."""
    return Category.objects.create(name='Car Wash', icon_name='car.fill', color_name='4ECDC4', sort_order=1)


@pytest.fixture
def category_dentist(db):
    """Create the third category."""
    return Category.objects.create(name='Dentist', icon_name='cross.case', color_name='95E1D3', sort_order=2)


@pytest.fixture
def make_service(db):
    """Factory creating services directly in the database."""
    def _make(name='Service', price='10.00', category=None, date=None, **kwargs):
        return Service.objects.create(
            name=name,
            price=Decimal(price),
            category=category,
            date=date or datetime(2024, 5, 10, 12, 0, tzinfo=dt_timezone.utc),
            **kwargs
        )
    return _make


@pytest.fixture
def haircut(make_service, category_hair):
    """A haircut with every optional field set."""
    return make_service(
        name='Haircut at Joe',
        price='25.00',
        category=category_hair,
        provider='Joe Barber',
        location='Main Street',
        note='Short on the sides',
    )


@pytest.fixture
def car_wash(make_service, category_car):
    return make_service(
        name='Full wash',
        price='15.50',
        category=category_car,
        date=datetime(2024, 6, 1, 9, 30, tzinfo=dt_timezone.utc),
        provider='Sparkle',
    )
