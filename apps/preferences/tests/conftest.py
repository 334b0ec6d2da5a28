import pytest
from rest_framework.test import APIClient
from apps.catalog.models import Category


@pytest.fixture
def api_client():
    """Return an API client."""
    return APIClient()


@pytest.fixture
def pref_category(db):
    """Create a category for recurring services and templates."""
    return Category.objects.create(name='Subscriptions', icon_name='repeat', sort_order=0)
