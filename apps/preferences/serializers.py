from rest_framework import serializers
from apps.catalog.services.filtering import SortOrder
from .services import AVAILABLE_CURRENCIES, THEME_IDS, Frequency


# =============================================================================
# Input Serializers
# =============================================================================

class AppSettingsInputSerializer(serializers.Serializer):
    """
    Validate a settings update. Every field is optional; omitted fields
    keep their stored value.
    """

    currency = serializers.ChoiceField(choices=AVAILABLE_CURRENCIES, required=False)
    default_sort_order = serializers.ChoiceField(choices=SortOrder.choices, required=False)
    theme_id = serializers.ChoiceField(choices=THEME_IDS, required=False)
    has_completed_onboarding = serializers.BooleanField(required=False)


class BudgetInputSerializer(serializers.Serializer):
    """A zero or negative amount removes the budget."""

    category_id = serializers.UUIDField()
    amount = serializers.DecimalField(max_digits=13, decimal_places=2)


class ProviderRatingInputSerializer(serializers.Serializer):
    provider = serializers.CharField(max_length=200)
    rating = serializers.FloatField()


class RecurringServiceInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, allow_blank=True)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    price = serializers.DecimalField(max_digits=13, decimal_places=2)
    frequency = serializers.ChoiceField(choices=Frequency.choices, default=Frequency.MONTHLY)
    provider = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')


class TemplateInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=200, allow_blank=True)
    category_id = serializers.UUIDField(required=False, allow_null=True)
    price = serializers.DecimalField(max_digits=13, decimal_places=2)
    provider = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    location = serializers.CharField(max_length=200, required=False, allow_blank=True, default='')
    note = serializers.CharField(required=False, allow_blank=True, default='')


class TemplateUseInputSerializer(serializers.Serializer):
    date = serializers.DateTimeField(required=False)


# =============================================================================
# Output Serializers
# =============================================================================

class AppSettingsSerializer(serializers.Serializer):
    currency = serializers.CharField()
    default_sort_order = serializers.CharField()
    theme_id = serializers.CharField()
    has_completed_onboarding = serializers.BooleanField()
    available_currencies = serializers.SerializerMethodField()

    def get_available_currencies(self, obj) -> list[str]:
        return AVAILABLE_CURRENCIES


class RecurringServiceSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    category_id = serializers.UUIDField(allow_null=True)
    price = serializers.DecimalField(max_digits=13, decimal_places=2)
    frequency = serializers.CharField()
    provider = serializers.CharField(allow_blank=True)
    last_added = serializers.DateTimeField(allow_null=True)
    next_due = serializers.DateTimeField(allow_null=True)


class TemplateSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    category_id = serializers.UUIDField(allow_null=True)
    price = serializers.DecimalField(max_digits=13, decimal_places=2)
    provider = serializers.CharField(allow_blank=True)
    location = serializers.CharField(allow_blank=True)
    note = serializers.CharField(allow_blank=True)
