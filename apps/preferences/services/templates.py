"""
Service templates: saved presets for services entered often.

Stored under the ``serviceTemplates`` preference as a list of::

    {"id", "name", "categoryId", "price", "provider", "location", "note"}
"""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Optional
from uuid import UUID

from apps.catalog.models import Category
from apps.catalog.services.service_management import add_service

from .app_settings import load_app_settings
from .exceptions import TemplateError, TemplateNotFoundError
from .store import get_preference, set_preference

logger = logging.getLogger(__name__)

TEMPLATES_KEY = 'serviceTemplates'

TEMPLATE_FIELDS = [
    ('id', 'id'),
    ('name', 'name'),
    ('category_id', 'categoryId'),
    ('price', 'price'),
    ('provider', 'provider'),
    ('location', 'location'),
    ('note', 'note'),
]


def _parse_price(value) -> Optional[Decimal]:
    try:
        price = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        return None
    return price if price.is_finite() else None


def _from_stored(data: dict) -> Optional[dict]:
    try:
        template_id = str(UUID(str(data['id'])))
    except (KeyError, ValueError, TypeError):
        return None

    return {
        'id': template_id,
        'name': data.get('name') or '',
        'category_id': data.get('categoryId'),
        'price': _parse_price(data.get('price')) or Decimal('0'),
        'provider': data.get('provider') or '',
        'location': data.get('location') or '',
        'note': data.get('note') or '',
    }


def _to_stored(template: dict) -> dict:
    stored = {key: template.get(field) for field, key in TEMPLATE_FIELDS}
    stored['price'] = float(template['price'])
    return stored


def load_templates() -> list[dict]:
    stored = get_preference(TEMPLATES_KEY, [])
    if not isinstance(stored, list):
        logger.warning("Ignoring invalid stored templates")
        return []

    templates = []
    for data in stored:
        template = _from_stored(data) if isinstance(data, dict) else None
        if template is None:
            logger.warning("Skipping unreadable template: %r", data)
            continue
        templates.append(template)
    return templates


def _save(templates: list[dict]) -> None:
    set_preference(TEMPLATES_KEY, [_to_stored(t) for t in templates])


def get_template(template_id: UUID) -> dict:
    for template in load_templates():
        if template['id'] == str(template_id):
            return template
    raise TemplateNotFoundError(f"Template {template_id} not found")


def _clean(*, name, category_id, price, provider, location, note) -> dict:
    name = (name or '').strip()
    if not name:
        raise TemplateError("Name cannot be empty")

    parsed = _parse_price(price)
    if parsed is None or parsed < 0:
        raise TemplateError("Price must be a positive number")

    return {
        'name': name,
        'category_id': str(category_id) if category_id else None,
        'price': parsed,
        'provider': (provider or '').strip(),
        'location': (location or '').strip(),
        'note': (note or '').strip(),
    }


def create_template(
    *,
    name: str,
    price,
    category_id: Optional[UUID] = None,
    provider: str = '',
    location: str = '',
    note: str = ''
) -> dict:
    """
    Save a new template.

    Raises:
        TemplateError: If name is blank or price is negative
    """
    template = {'id': str(uuid.uuid4())}
    template.update(_clean(
        name=name,
        category_id=category_id,
        price=price,
        provider=provider,
        location=location,
        note=note,
    ))

    templates = load_templates()
    templates.append(template)
    _save(templates)
    return template


def update_template(
    *,
    template_id: UUID,
    name: str,
    price,
    category_id: Optional[UUID] = None,
    provider: str = '',
    location: str = '',
    note: str = ''
) -> dict:
    cleaned = _clean(
        name=name,
        category_id=category_id,
        price=price,
        provider=provider,
        location=location,
        note=note,
    )

    templates = load_templates()
    for template in templates:
        if template['id'] == str(template_id):
            template.update(cleaned)
            _save(templates)
            return template

    raise TemplateNotFoundError(f"Template {template_id} not found")


def delete_template(*, template_id: UUID) -> None:
    templates = load_templates()
    remaining = [t for t in templates if t['id'] != str(template_id)]

    if len(remaining) == len(templates):
        raise TemplateNotFoundError(f"Template {template_id} not found")

    _save(remaining)


def add_service_from_template(*, template_id: UUID, store=None, date=None):
    """
    Record a service from a template, dated now.

    Empty provider, location and note stay unset on the service.

    Returns:
        Created Service

    Raises:
        TemplateError: If the template or its category no longer exists
        CatalogServiceError: If validation or saving fails
    """
    template = get_template(template_id)

    category = None
    if template['category_id']:
        try:
            category = Category.objects.filter(id=UUID(str(template['category_id']))).first()
        except ValueError:
            category = None
    if category is None:
        raise TemplateError("Category not found. Please update this template.")

    service = add_service(
        name=template['name'],
        category=category,
        price=template['price'],
        currency=load_app_settings().currency,
        date=date,
        provider=template['provider'] or None,
        location=template['location'] or None,
        note=template['note'] or None,
        store=store,
    )

    logger.info("Added service %s from template %s", service.id, template['id'])
    return service
