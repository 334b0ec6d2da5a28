from django.contrib import admin
from apps.catalog.models import Service, Category


class ServiceInline(admin.TabularInline):
    """Inline admin for services in a category."""
    model = Service
    extra = 0
    fields = ['name', 'price', 'currency', 'date', 'is_favorite']
    show_change_link = True


@admin.register(Category)
class CategoryAdmin(admin.ModelAdmin):
    """Admin interface for Categories."""

    list_display = ['name', 'icon_name', 'color_name', 'sort_order', 'created_at']
    search_fields = ['name']
    readonly_fields = ['created_at', 'updated_at']
    ordering = ['sort_order', 'created_at']
    inlines = [ServiceInline]


@admin.register(Service)
class ServiceAdmin(admin.ModelAdmin):
    """Admin interface for Services."""

    list_display = [
        'name',
        'category',
        'price',
        'currency',
        'date',
        'provider',
        'is_favorite',
    ]
    list_filter = ['is_favorite', 'currency', 'category', 'date']
    search_fields = ['name', 'provider', 'location', 'note']
    readonly_fields = ['created_at', 'updated_at']
    date_hierarchy = 'date'
    ordering = ['-date']

    fieldsets = (
        ('Service', {
            'fields': ('name', 'category', 'is_favorite')
        }),
        ('Payment', {
            'fields': ('price', 'currency', 'date')
        }),
        ('Details', {
            'fields': ('provider', 'location', 'note')
        }),
        ('Metadata', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    actions = ['mark_favorite', 'unmark_favorite']

    def mark_favorite(self, request, queryset):
        count = queryset.update(is_favorite=True)
        self.message_user(request, f"Marked {count} services as favorite")
    mark_favorite.short_description = "Mark selected services as favorite"

    def unmark_favorite(self, request, queryset):
        count = queryset.update(is_favorite=False)
        self.message_user(request, f"Removed {count} services from favorites")
    unmark_favorite.short_description = "Remove selected services from favorites"

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('category')
