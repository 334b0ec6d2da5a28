"""
Service layer unit tests for catalog app.

Tests cover:
- Input normalization and validation on add/update
- Snapshot refresh after writes
- Category ordering
- Filtering and sorting
- Backup / restore, CSV export
- The three-step reset confirmation
"""

import csv
import io
import json
import pytest
from datetime import date, datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch
from uuid import uuid4
from django.db import DatabaseError

from apps.catalog.models import Category, Service
from apps.catalog.services import (
    CatalogStore,
    add_service,
    update_service,
    delete_service,
    toggle_favorite,
    duplicate_service,
    add_category,
    update_category,
    delete_category,
    reorder_categories,
    move_categories,
    move_offsets,
    filter_services,
    search_categories,
    create_backup,
    dump_backup,
    restore_backup,
    generate_csv,
    ResetConfirmation,
    confirm_reset,
    cancel_reset,
    reset_all_data,
    load_confirmation,
)
from apps.catalog.services.exceptions import (
    EmptyNameError,
    InvalidPriceError,
    PriceTooLargeError,
    PhotoTooLargeError,
    CategoryNotFoundError,
    ServiceNotFoundError,
    InvalidReorderError,
    SaveFailedError,
)


# =============================================================================
# Catalog Store Tests
# =============================================================================

@pytest.mark.django_db
class TestCatalogStore:
    """Tests for CatalogStore.load_data()."""

    def test_load_failure_keeps_previous_snapshot(self, store, haircut, car_wash):
        store.load_data()
        services = list(store.services)
        categories = list(store.categories)

        with patch.object(Service.objects, 'select_related', side_effect=DatabaseError('disk I/O error')):
            store.load_data()

        assert store.services == services
        assert store.categories == categories
        assert len(store.services) == 2

    def test_category_load_failure_keeps_previous_snapshot(self, store, haircut):
        store.load_data()
        services = list(store.services)

        with patch.object(Category.objects, 'order_by', side_effect=DatabaseError('disk I/O error')):
            store.load_data()

        assert store.services == services
        assert [c.name for c in store.categories] == ['Haircut']


# =============================================================================
# Service Management Tests
# =============================================================================

@pytest.mark.django_db
class TestAddService:
    """Tests for add_service()."""

    def test_add_service_normalizes_input(self, store, category_hair):
        """Name is trimmed, blank optionals become None, currency is uppercased."""
        service = add_service(
            name='  Haircut  ',
            category=category_hair,
            price='25',
            currency='eur',
            date=datetime(2024, 1, 5, 10, 0, tzinfo=dt_timezone.utc),
            provider='   ',
            location='',
            note='  Short  ',
            store=store,
        )

        assert service.name == 'Haircut'
        assert service.currency == 'EUR'
        assert service.provider is None
        assert service.location is None
        assert service.note == 'Short'
        assert service.is_favorite is False

    def test_add_service_trims_line_breaks(self, store, category_hair):
        """Leading and trailing newlines and tabs count as whitespace; inner ones are kept."""
        service = add_service(
            name='\n\tHaircut\n',
            category=category_hair,
            price='25',
            note='\nline one\nline two\t',
            store=store,
        )

        assert service.name == 'Haircut'
        assert service.note == 'line one\nline two'

    def test_add_service_refreshes_store_once(self, store, category_hair):
        """The new service appears exactly once in the refreshed snapshot."""
        service = add_service(name='Trim', category=category_hair, price='12.50', store=store)

        matching = [s for s in store.services if s.id == service.id]
        assert len(matching) == 1
        assert matching[0].price == Decimal('12.50')
        assert matching[0].category_name == 'Haircut'

    def test_add_service_defaults_currency_and_date(self, store, category_hair, settings):
        settings.DEFAULT_CURRENCY = 'CZK'
        service = add_service(name='Trim', category=category_hair, price=10)

        assert service.currency == 'CZK'
        assert service.date is not None

    def test_add_service_plain_date_is_midnight(self, category_hair):
        service = add_service(name='Trim', category=category_hair, price=10, date=date(2024, 3, 1))

        assert service.date.hour == 0
        assert service.date.day == 1

    def test_negative_price_rejected_and_store_unchanged(self, store, haircut, category_hair):
        """A rejected write leaves the snapshot and database untouched."""
        store.load_data()
        before = [s.id for s in store.services]

        with pytest.raises(InvalidPriceError):
            add_service(name='Bad', category=category_hair, price='-1', store=store)

        assert [s.id for s in store.services] == before
        assert Service.objects.count() == 1

    def test_non_numeric_price_rejected(self, category_hair):
        with pytest.raises(InvalidPriceError):
            add_service(name='Bad', category=category_hair, price='abc')

    def test_price_over_maximum_rejected(self, category_hair):
        with pytest.raises(PriceTooLargeError):
            add_service(name='Yacht', category=category_hair, price='1000000000.01')

    def test_price_at_maximum_accepted(self, category_hair):
        service = add_service(name='Yacht', category=category_hair, price='1000000000')
        assert service.price == Decimal('1000000000')

    def test_blank_name_rejected(self, category_hair):
        with pytest.raises(EmptyNameError):
            add_service(name='   ', category=category_hair, price=10)

    def test_name_checked_before_price(self, category_hair):
        """With both invalid, the name error wins."""
        with pytest.raises(EmptyNameError):
            add_service(name='', category=category_hair, price=-5)

    def test_unknown_category_rejected(self, db):
        with pytest.raises(CategoryNotFoundError):
            add_service(name='Trim', category=uuid4(), price=10)

    def test_missing_category_rejected(self, db):
        with pytest.raises(CategoryNotFoundError):
            add_service(name='Trim', category=None, price=10)

    def test_photo_over_cap_rejected(self, category_hair, settings):
        settings.SERVICE_PHOTO_MAX_BYTES = 8
        with pytest.raises(PhotoTooLargeError):
            add_service(name='Trim', category=category_hair, price=10, photo_data=b'123456789')

    def test_database_failure_surfaces_as_save_failed(self, category_hair):
        with patch.object(Service.objects, 'create', side_effect=DatabaseError('disk full')):
            with pytest.raises(SaveFailedError):
                add_service(name='Trim', category=category_hair, price=10)

        assert Service.objects.count() == 0


@pytest.mark.django_db
class TestUpdateDeleteService:
    """Tests for update, delete, favorite and duplicate."""

    def test_update_service_replaces_fields(self, store, haircut, category_car):
        updated = update_service(
            service_id=haircut.id,
            name='Car polish',
            category=category_car,
            price='40',
            provider=None,
            store=store,
        )

        assert updated.name == 'Car polish'
        assert updated.category == category_car
        assert updated.provider is None
        assert store.get_service(haircut.id).price == Decimal('40.00')

    def test_update_keeps_favorite_flag(self, haircut, category_hair):
        haircut.is_favorite = True
        haircut.save()

        updated = update_service(service_id=haircut.id, name='Trim', category=category_hair, price=20)
        assert updated.is_favorite is True

    def test_update_rejects_invalid_price(self, haircut, category_hair):
        with pytest.raises(InvalidPriceError):
            update_service(service_id=haircut.id, name='Trim', category=category_hair, price=-3)

        haircut.refresh_from_db()
        assert haircut.price == Decimal('25.00')

    def test_update_unknown_service(self, category_hair):
        with pytest.raises(ServiceNotFoundError):
            update_service(service_id=uuid4(), name='Trim', category=category_hair, price=10)

    def test_delete_service(self, store, haircut):
        delete_service(service_id=haircut.id, store=store)

        assert store.services == []
        assert not Service.objects.filter(id=haircut.id).exists()

    def test_delete_unknown_service(self, db):
        with pytest.raises(ServiceNotFoundError):
            delete_service(service_id=uuid4())

    def test_toggle_favorite_twice(self, haircut):
        assert toggle_favorite(service_id=haircut.id).is_favorite is True
        assert toggle_favorite(service_id=haircut.id).is_favorite is False

    def test_duplicate_service(self, store, make_service, category_hair):
        original = make_service(name='Trim', category=category_hair, photo_data=b'\x89PNG', is_favorite=True)

        copy = duplicate_service(service_id=original.id, store=store)

        assert copy.id != original.id
        assert copy.name == original.name
        assert copy.price == original.price
        assert bytes(copy.photo_data) == b'\x89PNG'
        assert copy.is_favorite is False
        assert copy.date > original.date
        assert len(store.services) == 2


# =============================================================================
# Category Management Tests
# =============================================================================

@pytest.mark.django_db
class TestCategoryManagement:
    """Tests for category_management.py service functions."""

    def test_add_category_appends_to_order(self, store, category_hair, category_car):
        category = add_category(name=' Gym ', store=store)

        assert category.name == 'Gym'
        assert category.sort_order == 2
        assert category.icon_name == 'folder.fill'
        assert category.color_name == '4A90E2'
        assert store.categories[-1].id == category.id

    def test_add_category_strips_hash_from_color(self, db):
        category = add_category(name='Gym', color_name='#FF0000')
        assert category.color_name == 'FF0000'

    def test_add_category_blank_name(self, db):
        with pytest.raises(EmptyNameError):
            add_category(name='')

    def test_update_category(self, category_hair):
        category = update_category(category_id=category_hair.id, name='Barber', icon_name='comb')

        assert category.name == 'Barber'
        assert category.icon_name == 'comb'

    def test_update_unknown_category(self, db):
        with pytest.raises(CategoryNotFoundError):
            update_category(category_id=uuid4(), name='Barber')

    def test_delete_category_uncategorizes_services(self, store, haircut, category_hair):
        delete_category(category_id=category_hair.id, store=store)

        service = store.get_service(haircut.id)
        assert service.category_id is None
        assert service.category_name == 'Uncategorized'
        assert store.categories == []

    def test_move_last_category_to_front(self, store, category_hair, category_car, category_dentist):
        """Moving C to index 0 gives C=0, A=1, B=2."""
        move_categories(source_indices=[2], destination=0, store=store)

        assert [c.id for c in store.categories] == [category_dentist.id, category_hair.id, category_car.id]
        assert [c.sort_order for c in store.categories] == [0, 1, 2]

    def test_reorder_by_ids_keeps_unnamed_after(self, category_hair, category_car, category_dentist):
        reordered = reorder_categories(ordered_ids=[category_car.id])

        assert [c.id for c in reordered] == [category_car.id, category_hair.id, category_dentist.id]

    def test_reorder_rejects_duplicates(self, category_hair):
        with pytest.raises(InvalidReorderError):
            reorder_categories(ordered_ids=[category_hair.id, category_hair.id])

    def test_reorder_rejects_unknown_id(self, category_hair):
        with pytest.raises(CategoryNotFoundError):
            reorder_categories(ordered_ids=[uuid4()])

    def test_move_out_of_range(self, category_hair):
        with pytest.raises(InvalidReorderError):
            move_categories(source_indices=[3], destination=0)


class TestMoveOffsets:
    """Tests for the list move helper."""

    def test_move_to_front(self):
        assert move_offsets(['A', 'B', 'C'], [2], 0) == ['C', 'A', 'B']

    def test_move_to_end(self):
        assert move_offsets(['A', 'B', 'C'], [0], 3) == ['B', 'C', 'A']

    def test_move_several(self):
        assert move_offsets(['A', 'B', 'C', 'D'], [0, 2], 4) == ['B', 'D', 'A', 'C']

    def test_no_sources(self):
        assert move_offsets(['A', 'B'], [], 0) == ['A', 'B']

    def test_bad_destination(self):
        with pytest.raises(InvalidReorderError):
            move_offsets(['A', 'B'], [0], 5)


# =============================================================================
# Filtering Tests
# =============================================================================

@pytest.mark.django_db
class TestFiltering:
    """Tests for filter_services() and search_categories()."""

    def test_no_criteria_keeps_everything_in_order(self, haircut, car_wash):
        services = CatalogStore.load().services
        assert filter_services(services) == services

    def test_search_is_case_insensitive_across_fields(self, haircut, car_wash):
        services = CatalogStore.load().services

        assert [s.id for s in filter_services(services, search='joe barber')] == [haircut.id]
        assert [s.id for s in filter_services(services, search='MAIN street')] == [haircut.id]
        assert [s.id for s in filter_services(services, search='sides')] == [haircut.id]
        assert [s.id for s in filter_services(services, search='sparkle')] == [car_wash.id]

    def test_filter_by_category(self, haircut, car_wash, category_car):
        services = CatalogStore.load().services
        result = filter_services(services, category=category_car.id)
        assert [s.id for s in result] == [car_wash.id]

    def test_date_range_inclusive(self, haircut, car_wash):
        services = CatalogStore.load().services
        result = filter_services(services, date_from=date(2024, 5, 10), date_to=date(2024, 5, 10))
        assert [s.id for s in result] == [haircut.id]

    def test_swapped_date_range_gives_same_result(self, haircut, car_wash, make_service):
        make_service(name='Old', date=datetime(2023, 1, 1, tzinfo=dt_timezone.utc))
        services = CatalogStore.load().services

        forward = filter_services(services, date_from=date(2024, 1, 1), date_to=date(2024, 12, 31))
        backward = filter_services(services, date_from=date(2024, 12, 31), date_to=date(2024, 1, 1))

        assert forward == backward
        assert {s.id for s in forward} == {haircut.id, car_wash.id}

    def test_price_bounds(self, haircut, car_wash):
        services = CatalogStore.load().services

        assert [s.id for s in filter_services(services, min_price='20')] == [haircut.id]
        assert [s.id for s in filter_services(services, max_price='20')] == [car_wash.id]

    def test_invalid_price_bounds_are_ignored(self, haircut, car_wash):
        services = CatalogStore.load().services

        assert len(filter_services(services, min_price='abc')) == 2
        assert len(filter_services(services, min_price='0', max_price='-4')) == 2
        assert len(filter_services(services, max_price='')) == 2

    def test_sort_orders(self, haircut, car_wash, make_service):
        cheap = make_service(name='a cheap one', price='1.00', date=datetime(2024, 1, 1, tzinfo=dt_timezone.utc))
        services = CatalogStore.load().services

        assert [s.id for s in filter_services(services, sort='price')] == [cheap.id, car_wash.id, haircut.id]
        assert [s.id for s in filter_services(services, sort='date')] == [car_wash.id, haircut.id, cheap.id]
        assert [s.id for s in filter_services(services, sort='name')] == [cheap.id, car_wash.id, haircut.id]

    def test_sort_by_price_is_stable(self, make_service):
        first = make_service(name='First', price='5.00')
        second = make_service(name='Second', price='5.00')
        services = CatalogStore.load().services

        assert [s.id for s in filter_services(services, sort='price')] == [first.id, second.id]

    def test_search_categories(self, category_hair, category_car, category_dentist):
        categories = CatalogStore.load().categories

        assert [c.name for c in search_categories(categories, 'car')] == ['Car Wash']
        assert search_categories(categories, '') == []


# =============================================================================
# Backup Tests
# =============================================================================

@pytest.mark.django_db
class TestBackup:
    """Tests for create_backup() / restore_backup()."""

    def test_round_trip(self, store, make_service, category_hair, category_car):
        photo = bytes(range(256))
        with_photo = make_service(
            name='Trim',
            price='19.99',
            category=category_hair,
            photo_data=photo,
            note='line one\nline two',
            is_favorite=True,
        )
        uncategorized = make_service(name='Parking', price='3.00')
        store.load_data()

        document = json.loads(dump_backup(store.services, store.categories))
        assert restore_backup(document, store=store) is True

        assert {c.id for c in store.categories} == {category_hair.id, category_car.id}
        restored = store.get_service(with_photo.id)
        assert restored.name == 'Trim'
        assert restored.price == Decimal('19.99')
        assert restored.date == with_photo.date
        assert restored.category_id == category_hair.id
        assert restored.note == 'line one\nline two'
        assert restored.is_favorite is True
        assert bytes(restored.photo_data) == photo
        assert store.get_service(uncategorized.id).category_id is None

    def test_photo_only_included_when_present(self, haircut):
        document = create_backup([haircut], [])
        assert 'photoData' not in document['services'][0]

    def test_restore_replaces_existing_data(self, store, haircut):
        document = {
            'version': '1.0',
            'services': [{'name': 'Imported', 'price': 7, 'date': 1704067200}],
            'categories': [],
        }

        assert restore_backup(json.dumps(document), store=store) is True
        assert [s.name for s in store.services] == ['Imported']
        assert store.services[0].currency == 'USD'
        assert store.services[0].date == datetime(2024, 1, 1, tzinfo=dt_timezone.utc)

    def test_unusable_backup_leaves_data_untouched(self, haircut, category_hair):
        assert restore_backup(b'not json') is False
        assert restore_backup({'services': []}) is False
        assert restore_backup('[1, 2]') is False

        assert Service.objects.count() == 1
        assert Category.objects.count() == 1

    @pytest.mark.parametrize('price', [1e20, '123456789012345', -5])
    def test_out_of_range_price_rejects_backup(self, store, haircut, price):
        document = {
            'services': [{'name': 'Imported', 'price': price, 'date': 0}],
            'categories': [],
        }

        assert restore_backup(document, store=store) is False

        assert [s.name for s in Service.objects.all()] == ['Haircut at Joe']
        assert Category.objects.count() == 1

    def test_maximum_price_is_restored(self, db):
        document = {
            'services': [{'name': 'Yacht', 'price': 1000000000, 'date': 0}],
            'categories': [],
        }

        assert restore_backup(document) is True
        assert Service.objects.get().price == Decimal('1000000000')

    def test_bad_photo_is_skipped(self, db):
        document = {
            'services': [{'name': 'Trim', 'price': 5, 'photoData': '%%%not-base64%%%'}],
            'categories': [],
        }

        assert restore_backup(document) is True
        assert Service.objects.get().photo_data is None


# =============================================================================
# CSV Export Tests
# =============================================================================

@pytest.mark.django_db
class TestCsvExport:

    def test_generate_csv(self, haircut, car_wash, make_service):
        make_service(name='Parking', price='3', note='first\nsecond', currency='')
        services = CatalogStore.load().services

        rows = list(csv.reader(io.StringIO(generate_csv(services, 'EUR'))))

        assert rows[0] == ['Name', 'Category', 'Price', 'Currency', 'Date', 'Provider', 'Location', 'Note']
        assert [row[0] for row in rows[1:]] == ['Full wash', 'Haircut at Joe', 'Parking']
        assert rows[1] == ['Full wash', 'Car Wash', '15.50', 'USD', '2024-06-01', 'Sparkle', '', '']
        assert rows[3] == ['Parking', 'Uncategorized', '3.00', 'EUR', '2024-05-10', '', '', 'first second']

    def test_generate_csv_empty(self):
        assert generate_csv([]).strip() == 'Name,Category,Price,Currency,Date,Provider,Location,Note'


# =============================================================================
# Reset Tests
# =============================================================================

class TestResetConfirmation:
    """Tests for the in-memory confirmation counter."""

    def test_three_confirmations_trigger_reset(self):
        confirmation = ResetConfirmation()
        assert confirmation.state == ResetConfirmation.IDLE
        assert confirmation.remaining == 3

        assert confirmation.confirm() is False
        assert confirmation.state == ResetConfirmation.CONFIRMING
        assert confirmation.remaining == 2

        assert confirmation.confirm() is False
        assert confirmation.remaining == 1

        assert confirmation.confirm() is True
        assert confirmation.state == ResetConfirmation.IDLE
        assert confirmation.count == 0

    def test_cancel_returns_to_idle(self):
        confirmation = ResetConfirmation()
        confirmation.confirm()
        confirmation.cancel()

        assert confirmation.state == ResetConfirmation.IDLE
        assert confirmation.remaining == 3

    def test_count_is_clamped(self):
        assert ResetConfirmation(7).count == 2
        assert ResetConfirmation(-1).count == 0


@pytest.mark.django_db
class TestReset:
    """Tests for the persisted reset flow."""

    def test_reset_all_data(self, store, haircut, car_wash):
        reset_all_data(store=store)

        assert store.services == []
        assert store.categories == []

    def test_confirm_reset_runs_on_third_call(self, haircut):
        performed, confirmation = confirm_reset()
        assert performed is False
        assert confirmation.remaining == 2

        performed, confirmation = confirm_reset()
        assert performed is False
        assert load_confirmation().count == 2
        assert Service.objects.count() == 1

        performed, confirmation = confirm_reset()
        assert performed is True
        assert confirmation.state == ResetConfirmation.IDLE
        assert Service.objects.count() == 0
        assert Category.objects.count() == 0
        assert load_confirmation().count == 0

    def test_cancel_reset(self, haircut):
        confirm_reset()
        confirm_reset()
        cancel_reset()

        assert load_confirmation().count == 0
        performed, _ = confirm_reset()
        assert performed is False
        assert Service.objects.count() == 1
