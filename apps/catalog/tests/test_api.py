import base64
import pytest
from decimal import Decimal
from uuid import uuid4
from django.urls import reverse
from rest_framework import status
from apps.catalog.models import Category, Service
from apps.preferences.services import save_app_settings


# =============================================================================
# Service Tests
# =============================================================================

@pytest.mark.django_db
class TestServiceList:
    """Tests for GET /api/catalog/services/"""

    def test_list_services_newest_first_by_default(self, api_client, haircut, car_wash):
        url = reverse('catalog:service-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [s['id'] for s in response.data] == [str(car_wash.id), str(haircut.id)]
        assert response.data[0]['category_name'] == 'Car Wash'
        assert response.data[0]['has_photo'] is False

    def test_list_uses_saved_sort_order(self, api_client, haircut, car_wash):
        save_app_settings(default_sort_order='price')

        response = api_client.get(reverse('catalog:service-list'))

        assert [s['id'] for s in response.data] == [str(car_wash.id), str(haircut.id)]

    def test_list_sort_by_name(self, api_client, haircut, car_wash):
        response = api_client.get(reverse('catalog:service-list'), {'sort': 'name'})

        assert [s['name'] for s in response.data] == ['Full wash', 'Haircut at Joe']

    def test_list_search(self, api_client, haircut, car_wash):
        response = api_client.get(reverse('catalog:service-list'), {'search': 'JOE'})

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['id'] == str(haircut.id)

    def test_list_filter_by_category(self, api_client, haircut, car_wash, category_hair):
        response = api_client.get(reverse('catalog:service-list'), {'category': str(category_hair.id)})

        assert [s['id'] for s in response.data] == [str(haircut.id)]

    def test_list_reversed_date_range(self, api_client, haircut, car_wash):
        response = api_client.get(
            reverse('catalog:service-list'),
            {'date_from': '2024-05-31', 'date_to': '2024-05-01'}
        )

        assert [s['id'] for s in response.data] == [str(haircut.id)]

    def test_list_ignores_malformed_price_bound(self, api_client, haircut, car_wash):
        response = api_client.get(reverse('catalog:service-list'), {'min_price': 'cheap'})

        assert len(response.data) == 2

    def test_list_favorites_only(self, api_client, haircut, car_wash):
        Service.objects.filter(id=haircut.id).update(is_favorite=True)

        response = api_client.get(reverse('catalog:service-list'), {'favorites': 'true'})

        assert [s['id'] for s in response.data] == [str(haircut.id)]

    def test_list_invalid_sort(self, api_client):
        response = api_client.get(reverse('catalog:service-list'), {'sort': 'rating'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestServiceCreate:
    """Tests for POST /api/catalog/services/"""

    def test_create_service(self, api_client, category_hair):
        url = reverse('catalog:service-list')
        data = {
            'name': '  Trim  ',
            'category': str(category_hair.id),
            'price': '12.5',
            'currency': 'eur',
            'date': '2024-04-01T10:00:00Z',
            'provider': '',
            'photo_data': base64.b64encode(b'jpeg-bytes').decode('ascii'),
        }
        response = api_client.post(url, data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['name'] == 'Trim'
        assert response.data['price'] == '12.50'
        assert response.data['currency'] == 'EUR'
        assert response.data['provider'] is None
        assert response.data['category_name'] == 'Haircut'
        assert base64.b64decode(response.data['photo_data']) == b'jpeg-bytes'

        service = Service.objects.get(id=response.data['id'])
        assert bytes(service.photo_data) == b'jpeg-bytes'

    def test_create_negative_price(self, api_client, category_hair):
        data = {'name': 'Trim', 'category': str(category_hair.id), 'price': '-1'}
        response = api_client.post(reverse('catalog:service-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Price must be a positive number'
        assert Service.objects.count() == 0

    def test_create_price_too_large(self, api_client, category_hair):
        data = {'name': 'Yacht', 'category': str(category_hair.id), 'price': '2000000000'}
        response = api_client.post(reverse('catalog:service-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Price is too large'

    def test_create_blank_name(self, api_client, category_hair):
        data = {'name': '   ', 'category': str(category_hair.id), 'price': '5'}
        response = api_client.post(reverse('catalog:service-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Name cannot be empty'

    def test_create_unknown_category(self, api_client, db):
        data = {'name': 'Trim', 'category': str(uuid4()), 'price': '5'}
        response = api_client.post(reverse('catalog:service-list'), data, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_create_invalid_photo_encoding(self, api_client, category_hair):
        data = {'name': 'Trim', 'category': str(category_hair.id), 'price': '5', 'photo_data': '@@@'}
        response = api_client.post(reverse('catalog:service-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'photo_data' in response.data


@pytest.mark.django_db
class TestServiceDetail:
    """Tests for /api/catalog/services/{id}/"""

    def test_retrieve_service(self, api_client, haircut):
        url = reverse('catalog:service-detail', kwargs={'pk': haircut.id})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Haircut at Joe'
        assert response.data['location'] == 'Main Street'
        assert response.data['photo_data'] is None

    def test_retrieve_missing_service(self, api_client, db):
        url = reverse('catalog:service-detail', kwargs={'pk': uuid4()})
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_update_service(self, api_client, haircut, category_car):
        url = reverse('catalog:service-detail', kwargs={'pk': haircut.id})
        data = {'name': 'Wax', 'category': str(category_car.id), 'price': '30'}
        response = api_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_200_OK
        haircut.refresh_from_db()
        assert haircut.name == 'Wax'
        assert haircut.category_id == category_car.id
        assert haircut.price == Decimal('30.00')

    def test_update_invalid_price_keeps_service(self, api_client, haircut, category_hair):
        url = reverse('catalog:service-detail', kwargs={'pk': haircut.id})
        data = {'name': 'Wax', 'category': str(category_hair.id), 'price': '-30'}
        response = api_client.put(url, data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        haircut.refresh_from_db()
        assert haircut.name == 'Haircut at Joe'

    def test_delete_service(self, api_client, haircut):
        url = reverse('catalog:service-detail', kwargs={'pk': haircut.id})
        response = api_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert not Service.objects.filter(id=haircut.id).exists()

    def test_toggle_favorite(self, api_client, haircut):
        url = reverse('catalog:service-favorite', kwargs={'pk': haircut.id})

        response = api_client.post(url)
        assert response.status_code == status.HTTP_200_OK
        assert response.data['is_favorite'] is True

        response = api_client.get(reverse('catalog:service-favorites'))
        assert [s['id'] for s in response.data] == [str(haircut.id)]

    def test_duplicate_service(self, api_client, haircut):
        url = reverse('catalog:service-duplicate', kwargs={'pk': haircut.id})
        response = api_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['id'] != str(haircut.id)
        assert response.data['name'] == haircut.name
        assert Service.objects.count() == 2


# =============================================================================
# Category Tests
# =============================================================================

@pytest.mark.django_db
class TestCategoryApi:
    """Tests for /api/catalog/categories/"""

    def test_list_categories_in_order(self, api_client, category_car, category_hair):
        response = api_client.get(reverse('catalog:category-list'))

        assert response.status_code == status.HTTP_200_OK
        assert [c['name'] for c in response.data] == ['Haircut', 'Car Wash']

    def test_create_category(self, api_client, category_hair):
        data = {'name': 'Gym', 'icon_name': 'figure.run'}
        response = api_client.post(reverse('catalog:category-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['sort_order'] == 1
        assert response.data['color_name'] == '4A90E2'

    def test_create_category_blank_name(self, api_client, db):
        response = api_client.post(reverse('catalog:category-list'), {'name': ' '}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Name cannot be empty'

    def test_update_category(self, api_client, category_hair):
        url = reverse('catalog:category-detail', kwargs={'pk': category_hair.id})
        response = api_client.put(url, {'name': 'Barber'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Barber'

    def test_delete_category_keeps_services(self, api_client, haircut, category_hair):
        url = reverse('catalog:category-detail', kwargs={'pk': category_hair.id})
        response = api_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        haircut.refresh_from_db()
        assert haircut.category is None

    def test_delete_missing_category(self, api_client, db):
        url = reverse('catalog:category-detail', kwargs={'pk': uuid4()})
        response = api_client.delete(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_reorder_by_move(self, api_client, category_hair, category_car, category_dentist):
        data = {'source_indices': [2], 'destination': 0}
        response = api_client.post(reverse('catalog:category-reorder'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [c['name'] for c in response.data] == ['Dentist', 'Haircut', 'Car Wash']
        assert Category.objects.get(id=category_dentist.id).sort_order == 0

    def test_reorder_by_ids(self, api_client, category_hair, category_car):
        data = {'ordered_ids': [str(category_car.id), str(category_hair.id)]}
        response = api_client.post(reverse('catalog:category-reorder'), data, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert [c['name'] for c in response.data] == ['Car Wash', 'Haircut']

    def test_reorder_requires_one_form(self, api_client, category_hair):
        response = api_client.post(reverse('catalog:category-reorder'), {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_search_categories(self, api_client, category_hair, category_car):
        response = api_client.get(reverse('catalog:category-search'), {'q': 'WASH'})

        assert [c['name'] for c in response.data] == ['Car Wash']

    def test_search_without_text(self, api_client, category_hair):
        response = api_client.get(reverse('catalog:category-search'))

        assert response.data == []


# =============================================================================
# Backup, Export & Reset Tests
# =============================================================================

@pytest.mark.django_db
class TestBackupApi:
    """Tests for /api/catalog/backup/"""

    def test_download_backup(self, api_client, haircut, category_hair):
        response = api_client.get(reverse('catalog:backup'))

        assert response.status_code == status.HTTP_200_OK
        assert 'attachment; filename="ServicePrices_Backup_' in response['Content-Disposition']
        assert response.data['version'] == '1.0'
        assert response.data['services'][0]['id'] == str(haircut.id)
        assert response.data['categories'][0]['iconName'] == 'scissors'

    def test_restore_backup(self, api_client, haircut, category_hair):
        document = api_client.get(reverse('catalog:backup')).data
        Service.objects.all().delete()

        response = api_client.post(reverse('catalog:backup'), document, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data == {'restored': True, 'services': 1, 'categories': 1}
        assert Service.objects.get().id == haircut.id

    def test_restore_invalid_backup(self, api_client, haircut):
        response = api_client.post(reverse('catalog:backup'), {'services': 'nope'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Backup could not be restored'
        assert Service.objects.count() == 1


@pytest.mark.django_db
class TestExportApi:

    def test_export_csv(self, api_client, haircut):
        response = api_client.get(reverse('catalog:export-csv'))

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'].startswith('text/csv')
        lines = response.content.decode('utf-8').splitlines()
        assert lines[0] == 'Name,Category,Price,Currency,Date,Provider,Location,Note'
        assert lines[1] == 'Haircut at Joe,Haircut,25.00,USD,2024-05-10,Joe Barber,Main Street,Short on the sides'


@pytest.mark.django_db
class TestResetApi:
    """Tests for /api/catalog/reset/"""

    def test_three_confirmations_reset_data(self, api_client, haircut):
        url = reverse('catalog:reset-confirm')

        response = api_client.post(url)
        assert response.data == {'reset': False, 'state': 'confirming', 'remaining': 2}

        response = api_client.post(url)
        assert response.data == {'reset': False, 'state': 'confirming', 'remaining': 1}
        assert Service.objects.count() == 1

        response = api_client.post(url)
        assert response.data == {'reset': True, 'state': 'idle', 'remaining': 3}
        assert Service.objects.count() == 0
        assert Category.objects.count() == 0

    def test_cancel_reset(self, api_client, haircut):
        api_client.post(reverse('catalog:reset-confirm'))

        response = api_client.post(reverse('catalog:reset-cancel'))
        assert response.data == {'reset': False, 'state': 'idle', 'remaining': 3}

        response = api_client.post(reverse('catalog:reset-confirm'))
        assert response.data['remaining'] == 2
        assert Service.objects.count() == 1
