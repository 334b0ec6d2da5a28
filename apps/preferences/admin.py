from django.contrib import admin
from apps.preferences.models import Preference


@admin.register(Preference)
class PreferenceAdmin(admin.ModelAdmin):
    """Admin interface for stored preferences."""

    list_display = ['key', 'updated_at']
    search_fields = ['key']
    readonly_fields = ['updated_at']
    ordering = ['key']
