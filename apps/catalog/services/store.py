"""In-memory snapshot of the catalog."""

import logging
from uuid import UUID
from typing import Optional

from django.db import DatabaseError

from ..models import Service, Category
from .exceptions import ServiceNotFoundError, CategoryNotFoundError

logger = logging.getLogger(__name__)


class CatalogStore:
    """
    Snapshot of all services and categories.

    Services keep insertion order, categories are ordered by sort_order.
    The database stays the source of truth: every catalog write reloads the
    store it was given, so readers always see a consistent snapshot.

    Example:
        store = CatalogStore.load()
        for category in store.categories:
            print(category.name, len(store.services_in_category(category)))
    """

    def __init__(self):
        self.services: list[Service] = []
        self.categories: list[Category] = []

    @classmethod
    def load(cls) -> 'CatalogStore':
        store = cls()
        store.load_data()
        return store

    def load_data(self) -> None:
        """Refetch the snapshot. On failure the previous snapshot is kept."""
        try:
            services = list(
                Service.objects
                .select_related('category')
                .order_by('created_at')
            )
            categories = list(
                Category.objects.order_by('sort_order', 'created_at')
            )
        except DatabaseError as e:
            logger.error("Failed to load data: %s", e)
            return

        self.services = services
        self.categories = categories

    def services_in_category(self, category) -> list[Service]:
        category_id = str(getattr(category, 'id', category))
        return [s for s in self.services if str(s.category_id) == category_id]

    def favorites(self) -> list[Service]:
        return [s for s in self.services if s.is_favorite]

    def get_service(self, service_id: UUID) -> Service:
        for service in self.services:
            if str(service.id) == str(service_id):
                return service
        raise ServiceNotFoundError(f"Service {service_id} not found")

    def get_category(self, category_id: Optional[UUID]) -> Category:
        for category in self.categories:
            if str(category.id) == str(category_id):
                return category
        raise CategoryNotFoundError(f"Category {category_id} not found")
