from django.urls import path
from . import views

app_name = 'statistics'

urlpatterns = [
    # Category statistics
    path('categories/<uuid:category_id>/', views.category_statistics, name='category-statistics'),

    # Whole-catalog statistics
    path('breakdown/', views.breakdown, name='breakdown'),
    path('comparison/', views.comparison, name='comparison'),
    path('trends/', views.trends, name='trends'),
    path('providers/', views.providers, name='providers'),
    path('budgets/', views.budgets, name='budgets'),
    path('compare/', views.compare, name='compare'),

    # Dashboard
    path('dashboard/', views.dashboard, name='dashboard'),
]
