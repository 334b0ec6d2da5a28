"""
Aggregation Module
==================

Pure functions computing statistics over a list of services, usually a
CatalogStore snapshot or a filtered slice of one. Nothing here touches the
database; every result is derived from the arguments alone, so results can
be recomputed or cached freely.

Conventions:
    - A price is "valid" when it is >= 0. Averages, minimums and maximums
      only consider valid prices.
    - Empty input yields Decimal('0'), never an error.
    - Services without a category are grouped under category_id None and
      named 'Uncategorized'.
    - Windows are half-open ``(start, end)`` pairs, see periods.py.

Example:
    Category statistics::

        from apps.catalog.services import CatalogStore
        from apps.statistics import aggregation

        store = CatalogStore.load()
        services = store.services_in_category(category)
        print(aggregation.average_price(services))
        print(aggregation.category_breakdown(store.services))
"""

from decimal import Decimal, ROUND_DOWN
from typing import Iterable, Optional

from django.utils import timezone

from .periods import (
    month_window,
    previous_month_window,
    year_window,
    previous_year_window,
    period_start,
    start_of_month,
)

ZERO = Decimal('0')
HUNDRED = Decimal('100')
PERCENT_PLACES = Decimal('0.01')

DEFAULT_PROVIDER_RATING = 5.0


def _valid_prices(services: Iterable) -> list[Decimal]:
    return [s.price for s in services if s.price is not None and s.price >= 0]


def _in_category(services: Iterable, category) -> list:
    category_id = getattr(category, 'id', category)
    if category_id is None:
        return [s for s in services if s.category_id is None]
    return [s for s in services if str(s.category_id) == str(category_id)]


# =============================================================================
# Price statistics
# =============================================================================

def average_price(services: Iterable) -> Decimal:
    prices = _valid_prices(services)
    if not prices:
        return ZERO
    return sum(prices, ZERO) / len(prices)


def min_price(services: Iterable) -> Decimal:
    return min(_valid_prices(services), default=ZERO)


def max_price(services: Iterable) -> Decimal:
    return max(_valid_prices(services), default=ZERO)


def average_price_in_category(services: Iterable, category) -> Decimal:
    return average_price(_in_category(services, category))


def min_price_in_category(services: Iterable, category) -> Decimal:
    return min_price(_in_category(services, category))


def max_price_in_category(services: Iterable, category) -> Decimal:
    return max_price(_in_category(services, category))


def total_spent(services: Iterable) -> Decimal:
    return sum(_valid_prices(services), ZERO)


def average_per_service(services: Iterable) -> Decimal:
    """Total spent divided by the number of services."""
    services = list(services)
    if not services:
        return ZERO
    return total_spent(services) / len(services)


def cheapest_service(services: Iterable):
    """Service with the lowest price (first one on ties), or None."""
    return min(services, key=lambda s: s.price, default=None)


def category_stats(services: Iterable, category) -> dict:
    """Average, min, max, total and count for one category."""
    in_category = _in_category(services, category)
    return {
        'average': average_price(in_category),
        'min': min_price(in_category),
        'max': max_price(in_category),
        'total': total_spent(in_category),
        'count': len(in_category),
    }


# =============================================================================
# Breakdown
# =============================================================================

def percentage_of_total(part: Decimal, total: Decimal) -> Decimal:
    """
    part / total * 100, truncated to two decimals.

    Truncating rather than rounding keeps the sum of a breakdown at or
    below 100. A zero total yields 0.
    """
    if not total:
        return ZERO
    return (Decimal(part) / Decimal(total) * HUNDRED).quantize(PERCENT_PLACES, rounding=ROUND_DOWN)


def category_breakdown(services: Iterable) -> list[dict]:
    """
    Spending grouped by category, largest total first.

    Returns:
        List of dicts with category_id, category_name, total, count and
        percentage (share of the overall total). Groups with equal totals
        keep the order in which they first appear in services.
    """
    groups = {}
    for service in services:
        key = str(service.category_id) if service.category_id else None
        group = groups.get(key)
        if group is None:
            group = groups[key] = {
                'category_id': key,
                'category_name': service.category_name,
                'total': ZERO,
                'count': 0,
            }
        if service.price >= 0:
            group['total'] += service.price
        group['count'] += 1

    overall = sum((g['total'] for g in groups.values()), ZERO)

    breakdown = sorted(groups.values(), key=lambda g: g['total'], reverse=True)
    for group in breakdown:
        group['percentage'] = percentage_of_total(group['total'], overall)

    return breakdown


# =============================================================================
# Periods
# =============================================================================

def in_window(services: Iterable, window: tuple) -> list:
    start, end = window
    return [s for s in services if start <= s.date < end]


def services_since(services: Iterable, period: str, now=None) -> list:
    """
    Services inside a rolling period (week, month, year or all).

    Raises:
        InvalidPeriodError: If period is unknown
    """
    start = period_start(period, now)
    if start is None:
        return list(services)
    return [s for s in services if s.date >= start]


def compare_periods(services: Iterable, current: tuple, baseline: tuple) -> dict:
    """
    Compare average price between two windows.

    Args:
        services: Services to compare
        current: (start, end) of the period being evaluated
        baseline: (start, end) of the period compared against

    Returns:
        Dict with 'current' and 'baseline' summaries (start, end, average,
        count), 'change' (current minus baseline average) and
        'change_percent' (0 when the baseline average is 0)
    """
    services = list(services)

    def summarize(window):
        selected = in_window(services, window)
        return {
            'start': window[0],
            'end': window[1],
            'average': average_price(selected),
            'count': len(selected),
        }

    current_summary = summarize(current)
    baseline_summary = summarize(baseline)

    change = current_summary['average'] - baseline_summary['average']
    if baseline_summary['average'] > 0:
        change_percent = change / baseline_summary['average'] * HUNDRED
    else:
        change_percent = ZERO

    return {
        'current': current_summary,
        'baseline': baseline_summary,
        'change': change,
        'change_percent': change_percent,
    }


def month_over_month(services: Iterable, now=None) -> dict:
    return compare_periods(services, month_window(now), previous_month_window(now))


def year_over_year(services: Iterable, now=None) -> dict:
    return compare_periods(services, year_window(now), previous_year_window(now))


def _grouped_by(services: Iterable, key_func) -> dict:
    groups = {}
    for service in services:
        if service.price is None or service.price < 0:
            continue
        key = key_func(timezone.localtime(service.date))
        total, count = groups.get(key, (ZERO, 0))
        groups[key] = (total + service.price, count + 1)
    return dict(sorted(groups.items()))


def monthly_totals(services: Iterable) -> list[dict]:
    """Total and count per calendar month ('YYYY-MM'), oldest first."""
    groups = _grouped_by(services, lambda d: d.strftime('%Y-%m'))
    return [
        {'month': month, 'total': total, 'count': count}
        for month, (total, count) in groups.items()
    ]


def yearly_totals(services: Iterable) -> list[dict]:
    groups = _grouped_by(services, lambda d: d.year)
    return [
        {'year': year, 'total': total, 'count': count}
        for year, (total, count) in groups.items()
    ]


def monthly_averages(services: Iterable) -> list[dict]:
    """Average price per calendar month, oldest first (price trend)."""
    groups = _grouped_by(services, lambda d: d.strftime('%Y-%m'))
    return [
        {'month': month, 'average': total / count, 'count': count}
        for month, (total, count) in groups.items()
    ]


# =============================================================================
# Providers & budgets
# =============================================================================

def provider_summary(services: Iterable, ratings: Optional[dict] = None) -> list[dict]:
    """
    Count, total and rating per provider, best rated first.

    Services without a provider are skipped. Unrated providers get 5.0.
    """
    ratings = ratings or {}
    providers = {}

    for service in services:
        if not service.provider:
            continue
        entry = providers.setdefault(service.provider, {
            'provider': service.provider,
            'count': 0,
            'total': ZERO,
            'rating': ratings.get(service.provider, DEFAULT_PROVIDER_RATING),
        })
        entry['count'] += 1
        entry['total'] += service.price

    return sorted(providers.values(), key=lambda p: p['rating'], reverse=True)


def budget_status(services: Iterable, category, budget: Decimal, now=None) -> dict:
    """
    How much of a monthly budget a category has used.

    Spending counts services dated from the start of the current month.

    Returns:
        Dict with budget, spent, remaining (never negative), percentage
        (capped at 100, 0 when budget <= 0), over_budget and count
    """
    month_start = start_of_month(now)
    this_month = [s for s in _in_category(services, category) if s.date >= month_start]

    spent = total_spent(this_month)
    budget = Decimal(budget)

    if budget > 0:
        percentage = min(spent / budget * HUNDRED, HUNDRED)
    else:
        percentage = ZERO

    return {
        'category_id': str(getattr(category, 'id', category)),
        'budget': budget,
        'spent': spent,
        'remaining': max(budget - spent, ZERO),
        'percentage': percentage,
        'over_budget': spent > budget,
        'count': len(this_month),
    }
