"""Category CRUD and ordering operations."""

import logging
from uuid import UUID
from typing import Optional, Sequence, Iterable

from django.core.exceptions import ValidationError as DjangoValidationError

from ..models import Category, DEFAULT_ICON_NAME, DEFAULT_COLOR_NAME
from .exceptions import CategoryNotFoundError, InvalidReorderError
from .persistence import committing, refresh
from .validation import clean_name

logger = logging.getLogger(__name__)


def _get_category(category_id: UUID) -> Category:
    try:
        return Category.objects.get(id=category_id)
    except (Category.DoesNotExist, DjangoValidationError, ValueError):
        raise CategoryNotFoundError(f"Category {category_id} not found")


def _normalize_id(category_id) -> str:
    try:
        return str(UUID(str(category_id)))
    except ValueError:
        raise CategoryNotFoundError(f"Category {category_id} not found")


def add_category(
    *,
    name: str,
    icon_name: Optional[str] = None,
    color_name: Optional[str] = None,
    store=None
) -> Category:
    """
    Create a category at the end of the current ordering.

    Args:
        name: Display name (trimmed, required)
        icon_name: Icon identifier
        color_name: Hex color without '#'
        store: CatalogStore to refresh after commit

    Returns:
        Created Category instance

    Raises:
        EmptyNameError: If name is blank
        SaveFailedError: If the database write fails
    """
    name = clean_name(name)

    with committing():
        category = Category.objects.create(
            name=name,
            icon_name=icon_name or DEFAULT_ICON_NAME,
            color_name=(color_name or DEFAULT_COLOR_NAME).lstrip('#'),
            sort_order=Category.objects.count(),
        )

    refresh(store)
    return category


def update_category(
    *,
    category_id: UUID,
    name: str,
    icon_name: Optional[str] = None,
    color_name: Optional[str] = None,
    store=None
) -> Category:
    """
    Rename a category and change its display metadata.

    Raises:
        CategoryNotFoundError: If category doesn't exist
        EmptyNameError: If name is blank
        SaveFailedError: If the database write fails
    """
    name = clean_name(name)

    with committing():
        category = _get_category(category_id)
        category.name = name
        category.icon_name = icon_name or DEFAULT_ICON_NAME
        category.color_name = (color_name or DEFAULT_COLOR_NAME).lstrip('#')
        category.save()

    refresh(store)
    return category


def delete_category(*, category_id: UUID, store=None) -> None:
    """
    Delete a category.

    Its services stay, with no category.

    Raises:
        CategoryNotFoundError: If category doesn't exist
        SaveFailedError: If the database write fails
    """
    with committing():
        category = _get_category(category_id)
        orphaned = category.services.count()
        category.delete()

    logger.info("Deleted category %s, %d service(s) left uncategorized", category_id, orphaned)
    refresh(store)


def reorder_categories(*, ordered_ids: Iterable[UUID], store=None) -> list[Category]:
    """
    Persist a new category order.

    sort_order is reassigned to each category's position. Categories not
    named in ordered_ids keep their relative order after the named ones.

    Args:
        ordered_ids: Category ids in their new display order
        store: CatalogStore to refresh after commit

    Returns:
        Categories in their new order

    Raises:
        CategoryNotFoundError: If an id doesn't exist
        InvalidReorderError: If an id is repeated
        SaveFailedError: If the database write fails
    """
    ordered_ids = [_normalize_id(category_id) for category_id in ordered_ids]
    if len(set(ordered_ids)) != len(ordered_ids):
        raise InvalidReorderError("Each category may appear only once")

    with committing():
        current = list(Category.objects.select_for_update().order_by('sort_order', 'created_at'))
        by_id = {str(category.id): category for category in current}

        missing = [category_id for category_id in ordered_ids if category_id not in by_id]
        if missing:
            raise CategoryNotFoundError(f"Category {missing[0]} not found")

        named = [by_id[category_id] for category_id in ordered_ids]
        named_ids = set(ordered_ids)
        rest = [category for category in current if str(category.id) not in named_ids]
        reordered = named + rest

        for index, category in enumerate(reordered):
            category.sort_order = index

        Category.objects.bulk_update(reordered, ['sort_order'])

    refresh(store)
    return reordered


def move_offsets(items: Sequence, source_indices: Iterable[int], destination: int) -> list:
    """
    Move the items at source_indices so they land before position destination.

    destination is an offset into the list as it was before the move, the
    same convention list-based drag and drop uses.

    Example:
        >>> move_offsets(['A', 'B', 'C'], [2], 0)
        ['C', 'A', 'B']
        >>> move_offsets(['A', 'B', 'C'], [0], 3)
        ['B', 'C', 'A']

    Raises:
        InvalidReorderError: If an index is out of range
    """
    items = list(items)
    sources = sorted(set(source_indices))

    if not sources:
        return items
    if sources[0] < 0 or sources[-1] >= len(items):
        raise InvalidReorderError(f"Source index out of range (0..{len(items) - 1})")
    if destination < 0 or destination > len(items):
        raise InvalidReorderError(f"Destination out of range (0..{len(items)})")

    moving = [items[i] for i in sources]
    remaining = [item for i, item in enumerate(items) if i not in sources]
    insert_at = destination - sum(1 for i in sources if i < destination)

    return remaining[:insert_at] + moving + remaining[insert_at:]


def move_categories(*, source_indices: Iterable[int], destination: int, store=None) -> list[Category]:
    """
    Move categories by position, then persist the resulting order.

    Raises:
        InvalidReorderError: If a position is out of range
        SaveFailedError: If the database write fails
    """
    current = list(Category.objects.order_by('sort_order', 'created_at'))
    moved = move_offsets(current, source_indices, destination)
    return reorder_categories(ordered_ids=[category.id for category in moved], store=store)
