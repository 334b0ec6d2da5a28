import base64
import binascii

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema_field
from rest_framework import serializers
from .models import Service, Category
from .services.filtering import SortOrder


@extend_schema_field(OpenApiTypes.BYTE)
class Base64BinaryField(serializers.Field):
    """Binary blob carried as a base64 string."""

    default_error_messages = {
        'invalid': 'Photo data must be base64 encoded.',
    }

    def to_representation(self, value):
        if not value:
            return None
        return base64.b64encode(bytes(value)).decode('ascii')

    def to_internal_value(self, data):
        if data in (None, ''):
            return None
        if not isinstance(data, str):
            self.fail('invalid')
        try:
            return base64.b64decode(data, validate=True)
        except (binascii.Error, ValueError):
            self.fail('invalid')


# =============================================================================
# Input Serializers
# =============================================================================

class ServiceFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for service filtering.

    Query Parameters:
        search (str): Substring of name, provider, note or location
        category (UUID): Filter by category ID
        date_from (date): Services paid on or after this day
        date_to (date): Services paid on or before this day
        min_price (str): Lower price bound, ignored unless positive
        max_price (str): Upper price bound, ignored unless positive
        sort (str): price, date or name
        favorites (bool): Only favorites

    A reversed date range is accepted and swapped.
    """

    search = serializers.CharField(required=False, allow_blank=True)
    category = serializers.UUIDField(required=False)
    date_from = serializers.DateField(required=False)
    date_to = serializers.DateField(required=False)
    min_price = serializers.CharField(required=False, allow_blank=True)
    max_price = serializers.CharField(required=False, allow_blank=True)
    sort = serializers.ChoiceField(choices=SortOrder.choices, required=False)
    favorites = serializers.BooleanField(required=False, default=False)


class ServiceInputSerializer(serializers.Serializer):
    """
    Validate input for creating or replacing a service.

    Business rules (non-empty name, price bounds, photo size) are enforced
    by the service layer, so blank names and negative prices pass here.
    """

    name = serializers.CharField(max_length=200, allow_blank=True, trim_whitespace=False)
    category = serializers.UUIDField()
    price = serializers.DecimalField(max_digits=None, decimal_places=None)
    currency = serializers.CharField(max_length=3, required=False, allow_blank=True)
    date = serializers.DateTimeField(required=False)
    provider = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    location = serializers.CharField(max_length=200, required=False, allow_blank=True, allow_null=True)
    note = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    photo_data = Base64BinaryField(required=False, allow_null=True)


class CategoryInputSerializer(serializers.Serializer):
    """Validate input for creating or updating a category."""

    name = serializers.CharField(max_length=100, allow_blank=True, trim_whitespace=False)
    icon_name = serializers.CharField(max_length=100, required=False, allow_blank=True)
    color_name = serializers.CharField(max_length=9, required=False, allow_blank=True)


class CategoryReorderSerializer(serializers.Serializer):
    """
    Validate a reorder request.

    Either a full ordering:
        {"ordered_ids": ["<uuid>", ...]}
    or a list move:
        {"source_indices": [2], "destination": 0}
    """

    ordered_ids = serializers.ListField(child=serializers.UUIDField(), required=False)
    source_indices = serializers.ListField(
        child=serializers.IntegerField(min_value=0),
        required=False
    )
    destination = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        has_order = 'ordered_ids' in attrs
        has_move = 'source_indices' in attrs or 'destination' in attrs

        if has_order == has_move:
            raise serializers.ValidationError(
                'Provide either ordered_ids or source_indices with destination'
            )
        if has_move and ('source_indices' not in attrs or 'destination' not in attrs):
            raise serializers.ValidationError({
                'destination': 'source_indices and destination are both required'
            })

        return attrs


class CategorySearchSerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')


# =============================================================================
# Output Serializers
# =============================================================================

class CategorySerializer(serializers.ModelSerializer):
    """Category with its display metadata."""

    class Meta:
        model = Category
        fields = [
            'id',
            'name',
            'icon_name',
            'color_name',
            'sort_order',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ServiceSerializer(serializers.ModelSerializer):
    """Full service record, photo included as base64."""

    category_name = serializers.CharField(read_only=True)
    photo_data = Base64BinaryField(read_only=True)

    class Meta:
        model = Service
        fields = [
            'id',
            'name',
            'category',
            'category_name',
            'price',
            'currency',
            'date',
            'provider',
            'location',
            'note',
            'photo_data',
            'is_favorite',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ServiceListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for service lists."""

    category_name = serializers.CharField(read_only=True)
    has_photo = serializers.SerializerMethodField()

    class Meta:
        model = Service
        fields = [
            'id',
            'name',
            'category',
            'category_name',
            'price',
            'currency',
            'date',
            'provider',
            'is_favorite',
            'has_photo',
        ]
        read_only_fields = fields

    def get_has_photo(self, obj):
        return bool(obj.photo_data)


class ResetStatusSerializer(serializers.Serializer):
    reset = serializers.BooleanField()
    state = serializers.CharField()
    remaining = serializers.IntegerField()


class RestoreResultSerializer(serializers.Serializer):
    restored = serializers.BooleanField()
    services = serializers.IntegerField()
    categories = serializers.IntegerField()
