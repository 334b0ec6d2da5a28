from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'catalog'

# Router for ViewSets
router = DefaultRouter()
router.register(r'services', views.ServiceViewSet, basename='service')
router.register(r'categories', views.CategoryViewSet, basename='category')

urlpatterns = [
    # Service ViewSet routes
    # GET    /api/catalog/services/                 - List services (filters, sort)
    # POST   /api/catalog/services/                 - Record a service
    # GET    /api/catalog/services/{id}/            - Get service details
    # PUT    /api/catalog/services/{id}/            - Replace a service
    # DELETE /api/catalog/services/{id}/            - Delete a service
    # POST   /api/catalog/services/{id}/favorite/   - Toggle favorite
    # POST   /api/catalog/services/{id}/duplicate/  - Duplicate as new record
    # GET    /api/catalog/services/favorites/       - List favorites

    # Category ViewSet routes
    # GET    /api/catalog/categories/               - List categories in order
    # POST   /api/catalog/categories/               - Create category
    # PUT    /api/catalog/categories/{id}/          - Update category
    # DELETE /api/catalog/categories/{id}/          - Delete category
    # POST   /api/catalog/categories/reorder/       - Persist new order
    # GET    /api/catalog/categories/search/?q=     - Search by name

    # Data management
    path('backup/', views.backup, name='backup'),
    path('export/csv/', views.export_csv, name='export-csv'),
    path('reset/confirm/', views.reset_confirm, name='reset-confirm'),
    path('reset/cancel/', views.reset_cancel, name='reset-cancel'),

    # Include router URLs
    path('', include(router.urls)),
]
