from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'preferences'

# Router for ViewSets
router = DefaultRouter()
router.register(r'recurring', views.RecurringServiceViewSet, basename='recurring')
router.register(r'templates', views.TemplateViewSet, basename='template')

urlpatterns = [
    # Settings
    # GET    /api/preferences/settings/                    - Current settings
    # PATCH  /api/preferences/settings/                    - Update settings
    path('settings/', views.app_settings, name='settings'),

    # Budgets & ratings
    path('budgets/', views.budgets, name='budgets'),
    path('budgets/<uuid:category_id>/', views.budget_detail, name='budget-detail'),
    path('provider-ratings/', views.provider_ratings, name='provider-ratings'),

    # Recurring & template routes
    # GET    /api/preferences/recurring/                   - List recurring services
    # POST   /api/preferences/recurring/{id}/add-entry/    - Record a service now
    # GET    /api/preferences/templates/                   - List templates
    # POST   /api/preferences/templates/{id}/use/          - Record a service from template
    path('', include(router.urls)),
]
