import uuid
import pytest
from django.urls import reverse
from rest_framework import status
from apps.products.models import Product


@pytest.mark.django_db
class TestProductList:
    """Tests for GET /api/products/"""

    def test_filter_by_store(self, api_client, product, other_store):
        Product.objects.create(store=other_store, name='Cream Tea', price='12.50')

        response = api_client.get(reverse('products:product-list'), {'store': str(product.store_id)})

        assert response.status_code == status.HTTP_200_OK
        assert [p['name'] for p in response.data['results']] == ['Tasting Flight']

    def test_invalid_store_filter_returns_empty(self, api_client, product):
        response = api_client.get(reverse('products:product-list'), {'store': 'not-a-uuid'})

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 0

    def test_inactive_products_hidden(self, api_client, product):
        product.is_active = False
        product.save()

        response = api_client.get(reverse('products:product-list'))

        assert response.data['count'] == 0


@pytest.mark.django_db
class TestProductWrite:
    """Tests for POST/PATCH/DELETE /api/products/"""

    def test_owner_adds_product(self, manager_client, store):
        data = {'store': str(store.id), 'name': 'Latte Art Class', 'price': '40.00'}
        response = manager_client.post(reverse('products:product-list'), data, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert store.products.filter(name='Latte Art Class').exists()

    def test_cannot_add_product_to_foreign_store(self, other_manager_client, store):
        data = {'store': str(store.id), 'name': 'Sneaky', 'price': '1.00'}
        response = other_manager_client.post(reverse('products:product-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'store' in response.data['errors']

    def test_price_must_be_positive(self, manager_client, store):
        data = {'store': str(store.id), 'name': 'Free Stuff', 'price': '0.00'}
        response = manager_client.post(reverse('products:product-list'), data, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'price' in response.data['errors']

    def test_other_manager_cannot_edit(self, other_manager_client, product):
        url = reverse('products:product-detail', args=[product.id])
        response = other_manager_client.patch(url, {'price': '1.00'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_delete_deactivates(self, manager_client, product):
        url = reverse('products:product-detail', args=[product.id])
        response = manager_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        product.refresh_from_db()
        assert product.is_active is False

    def test_retrieve_missing_product(self, api_client):
        url = reverse('products:product-detail', args=[uuid.uuid4()])
        response = api_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.data['success'] is False
