from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


MAX_SERVICE_PRICE = Decimal('1000000000')

DEFAULT_ICON_NAME = 'folder.fill'
DEFAULT_COLOR_NAME = '4A90E2'


class Category(models.Model):
    """User-defined grouping of services with display metadata."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100)
    icon_name = models.CharField(max_length=100, default=DEFAULT_ICON_NAME)
    color_name = models.CharField(max_length=9, default=DEFAULT_COLOR_NAME)
    sort_order = models.IntegerField(default=0, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'categories'
        verbose_name_plural = 'categories'
        ordering = ['sort_order', 'created_at']

    def __str__(self):
        return self.name


class Service(models.Model):
    """One recorded payment for a service."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)

    # Deleting a category leaves its services without one
    category = models.ForeignKey(
        Category,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='services'
    )

    price = models.DecimalField(
        max_digits=13,
        decimal_places=2,
        validators=[
            MinValueValidator(Decimal('0.00')),
            MaxValueValidator(MAX_SERVICE_PRICE),
        ]
    )
    currency = models.CharField(max_length=3, default='USD')
    date = models.DateTimeField(db_index=True)

    provider = models.CharField(max_length=200, null=True, blank=True)
    location = models.CharField(max_length=200, null=True, blank=True)
    note = models.TextField(null=True, blank=True)
    photo_data = models.BinaryField(null=True, blank=True)

    is_favorite = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'services'
        indexes = [
            models.Index(fields=['category', 'date'], name='services_category_date_idx'),
            models.Index(fields=['is_favorite'], name='services_is_favorite_idx'),
        ]
        ordering = ['created_at']

    def __str__(self):
        return f"{self.name} - {self.price} {self.currency}"

    @property
    def category_name(self):
        return self.category.name if self.category else 'Uncategorized'
