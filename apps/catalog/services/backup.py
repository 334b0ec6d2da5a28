"""
Backup and restore of the whole catalog as a JSON document.

Document layout::

    {
        "version": "1.0",
        "backupDate": 1734300000.0,
        "services": [{"id", "name", "price", "currency", "date",
                      "provider", "location", "note", "isFavorite",
                      "categoryId", "photoData"?}, ...],
        "categories": [{"id", "name", "iconName", "colorName",
                        "sortOrder"}, ...]
    }

Dates are epoch seconds, photo data is base64 and only present when the
service has a photo.
"""

import base64
import binascii
import json
import logging
import uuid
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal, InvalidOperation
from typing import Iterable, Union

from django.conf import settings
from django.utils import timezone

from ..models import Service, Category, DEFAULT_ICON_NAME, DEFAULT_COLOR_NAME, MAX_SERVICE_PRICE
from .exceptions import SaveFailedError
from .persistence import committing, refresh

logger = logging.getLogger(__name__)

BACKUP_VERSION = '1.0'


def backup_filename(now=None) -> str:
    now = timezone.localtime(now or timezone.now())
    return f"ServicePrices_Backup_{now.strftime('%Y-%m-%d_%H%M%S')}.json"


def _service_to_dict(service: Service) -> dict:
    data = {
        'id': str(service.id),
        'name': service.name,
        'price': float(service.price),
        'currency': service.currency,
        'date': service.date.timestamp() if service.date else None,
        'provider': service.provider,
        'location': service.location,
        'note': service.note,
        'isFavorite': service.is_favorite,
        'categoryId': str(service.category_id) if service.category_id else None,
    }
    if service.photo_data:
        data['photoData'] = base64.b64encode(bytes(service.photo_data)).decode('ascii')
    return data


def _category_to_dict(category: Category) -> dict:
    return {
        'id': str(category.id),
        'name': category.name,
        'iconName': category.icon_name,
        'colorName': category.color_name,
        'sortOrder': category.sort_order,
    }


def create_backup(services: Iterable[Service], categories: Iterable[Category]) -> dict:
    """
    Serialize a catalog snapshot.

    Args:
        services: Services to include
        categories: Categories to include

    Returns:
        Backup document as a plain dict
    """
    return {
        'version': BACKUP_VERSION,
        'backupDate': timezone.now().timestamp(),
        'services': [_service_to_dict(s) for s in services],
        'categories': [_category_to_dict(c) for c in categories],
    }


def dump_backup(services: Iterable[Service], categories: Iterable[Category]) -> str:
    """Backup document as pretty-printed JSON text."""
    return json.dumps(create_backup(services, categories), indent=2, ensure_ascii=False)


def _parse_document(document: Union[str, bytes, dict]) -> dict:
    if isinstance(document, (bytes, bytearray)):
        document = document.decode('utf-8')
    if isinstance(document, str):
        document = json.loads(document)
    if not isinstance(document, dict):
        raise ValueError("Backup root must be a JSON object")

    for key in ('services', 'categories'):
        if not isinstance(document.get(key), list):
            raise ValueError(f"Backup is missing the '{key}' list")

    return document


def _parse_uuid(value):
    try:
        return uuid.UUID(str(value))
    except (ValueError, TypeError):
        return None


def _parse_price(value) -> Decimal:
    """
    Backup price as a Decimal. Unreadable values become 0.

    Raises:
        ValueError: If the price is outside 0..MAX_SERVICE_PRICE
    """
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return Decimal('0')
    if not price.is_finite():
        return Decimal('0')
    if price < 0 or price > MAX_SERVICE_PRICE:
        raise ValueError(f"Service price {value} is out of range")
    return price


def _parse_date(value):
    try:
        return datetime.fromtimestamp(float(value), tz=dt_timezone.utc)
    except (ValueError, TypeError, OverflowError, OSError):
        return timezone.now()


def _parse_photo(value):
    if not isinstance(value, str):
        return None
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError):
        logger.warning("Skipping undecodable photo data in backup")
        return None


def _restore_category(data: dict) -> Category:
    return Category.objects.create(
        id=_parse_uuid(data.get('id')) or uuid.uuid4(),
        name=data.get('name') or '',
        icon_name=data.get('iconName') or DEFAULT_ICON_NAME,
        color_name=data.get('colorName') or DEFAULT_COLOR_NAME,
        sort_order=int(data.get('sortOrder') or 0),
    )


def _restore_service(data: dict, category_map: dict) -> Service:
    return Service.objects.create(
        id=_parse_uuid(data.get('id')) or uuid.uuid4(),
        name=data.get('name') or '',
        price=_parse_price(data.get('price')),
        currency=data.get('currency') or settings.DEFAULT_CURRENCY,
        date=_parse_date(data.get('date')),
        provider=data.get('provider'),
        location=data.get('location'),
        note=data.get('note'),
        is_favorite=bool(data.get('isFavorite', False)),
        category=category_map.get(str(data.get('categoryId'))),
        photo_data=_parse_photo(data.get('photoData')),
    )


def restore_backup(document: Union[str, bytes, dict], *, store=None) -> bool:
    """
    Replace the whole catalog with the contents of a backup.

    This operation:
    1. Parses and shape-checks the document
    2. Deletes every existing service and category
    3. Recreates categories, then services (linked by category id)
    4. Commits everything in one transaction

    Args:
        document: Backup as JSON text, bytes or an already-parsed dict
        store: CatalogStore to refresh after commit

    Returns:
        True if restored, False if the backup was unusable. Failures are
        logged and leave the existing data untouched.
    """
    try:
        backup = _parse_document(document)
    except (ValueError, UnicodeDecodeError) as e:
        logger.error("Failed to restore backup: %s", e)
        return False

    try:
        with committing():
            Service.objects.all().delete()
            Category.objects.all().delete()

            category_map = {}
            for data in backup.get('categories') or []:
                if not isinstance(data, dict):
                    continue
                category = _restore_category(data)
                category_map[str(category.id)] = category

            restored = 0
            for data in backup.get('services') or []:
                if not isinstance(data, dict):
                    continue
                _restore_service(data, category_map)
                restored += 1
    except (SaveFailedError, ValueError, TypeError, ArithmeticError) as e:
        logger.error("Failed to restore backup: %s", e)
        return False

    logger.info(
        "Restored backup version %s: %d categories, %d services",
        backup.get('version'), len(category_map), restored
    )
    refresh(store)
    return True
