"""
Composite reports built from a CatalogStore snapshot and the user's
preferences. Views call these; the maths lives in aggregation.py.
"""

from typing import Optional

from . import aggregation
from .periods import Period

RECENT_SERVICES_LIMIT = 5
TOP_CATEGORIES_LIMIT = 5


def dashboard(store, *, period: str = Period.ALL, now=None) -> dict:
    """
    Quick stats for the statistics screen.

    Args:
        store: Loaded CatalogStore
        period: week, month, year or all
        now: Reference time (defaults to now)

    Returns:
        Dict with totals for the period, monthly totals, the top
        categories and the most recently dated services

    Raises:
        InvalidPeriodError: If period is unknown
    """
    services = aggregation.services_since(store.services, period, now)
    recent = sorted(store.services, key=lambda s: s.date, reverse=True)[:RECENT_SERVICES_LIMIT]

    return {
        'period': period,
        'total_spent': aggregation.total_spent(services),
        'average_per_service': aggregation.average_per_service(services),
        'service_count': len(services),
        'category_count': len(store.categories),
        'favorite_count': len(store.favorites()),
        'monthly_totals': aggregation.monthly_totals(services),
        'top_categories': aggregation.category_breakdown(services)[:TOP_CATEGORIES_LIMIT],
        'recent_services': recent,
    }


def category_report(store, category) -> dict:
    """Statistics and price history for one category."""
    services = store.services_in_category(category)
    report = aggregation.category_stats(services, category)
    report.update({
        'category': category,
        'month_over_month': aggregation.month_over_month(services),
        'year_over_year': aggregation.year_over_year(services),
    })
    return report


def budget_overview(store, budgets: dict, now=None) -> list[dict]:
    """
    Budget status for every category that has a budget, in category order.

    Budgets pointing at deleted categories are ignored.
    """
    overview = []
    for category in store.categories:
        budget = budgets.get(str(category.id))
        if budget is None:
            continue
        status = aggregation.budget_status(store.services, category, budget, now)
        status['category_name'] = category.name
        overview.append(status)
    return overview


def price_comparison(services: list) -> dict:
    """Side-by-side comparison of selected services."""
    cheapest = aggregation.cheapest_service(services)
    return {
        'services': services,
        'cheapest_id': str(cheapest.id) if cheapest else None,
        'average': aggregation.average_price(services),
        'min': aggregation.min_price(services),
        'max': aggregation.max_price(services),
        'spread': aggregation.max_price(services) - aggregation.min_price(services),
    }


def trends(store, category_id: Optional[str] = None) -> dict:
    services = store.services
    if category_id is not None:
        services = store.services_in_category(category_id)

    return {
        'category_id': category_id,
        'monthly_averages': aggregation.monthly_averages(services),
        'monthly_totals': aggregation.monthly_totals(services),
        'yearly_totals': aggregation.yearly_totals(services),
        'total_spent': aggregation.total_spent(services),
        'average': aggregation.average_price(services),
    }
