"""CSV export of recorded services."""

import csv
import io
from typing import Iterable, Optional

from django.conf import settings
from django.utils import timezone

CSV_HEADER = ['Name', 'Category', 'Price', 'Currency', 'Date', 'Provider', 'Location', 'Note']


def csv_filename(now=None) -> str:
    now = timezone.localtime(now or timezone.now())
    return f"ServicePrices_{now.strftime('%Y-%m-%d')}.csv"


def _flatten(value: Optional[str]) -> str:
    if not value:
        return ''
    return ' '.join(value.splitlines())


def generate_csv(services: Iterable, default_currency: Optional[str] = None) -> str:
    """
    Render services as CSV, newest first.

    Args:
        services: Services to export
        default_currency: Used for rows with no currency

    Returns:
        CSV text including the header row
    """
    default_currency = default_currency or settings.DEFAULT_CURRENCY
    rows = sorted(services, key=lambda s: s.date, reverse=True)

    output = io.StringIO()
    writer = csv.writer(output)

    writer.writerow(CSV_HEADER)
    for service in rows:
        writer.writerow([
            service.name,
            service.category_name,
            f"{service.price:.2f}",
            service.currency or default_currency,
            timezone.localtime(service.date).strftime('%Y-%m-%d'),
            service.provider or '',
            service.location or '',
            _flatten(service.note),
        ])

    return output.getvalue()
