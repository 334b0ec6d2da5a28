"""
Serializers for statistics app.

This module contains:
1. Input serializers - Query parameter validation
2. Response serializers - API documentation and output formatting

Amounts are rendered as strings with two decimals; percentages likewise.
"""

from rest_framework import serializers

from apps.catalog.serializers import ServiceListSerializer, CategorySerializer
from .periods import Period


def amount_field(**kwargs):
    return serializers.DecimalField(max_digits=20, decimal_places=2, **kwargs)


# =============================================================================
# Input Serializers (Query Parameter Validation)
# =============================================================================

class PeriodQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        period (str): week, month, year or all (default all)
    """

    period = serializers.ChoiceField(choices=Period.choices, required=False, default=Period.ALL)


class ComparisonQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        scope (str): month (this vs last month) or year (this vs last year)
        category (UUID): Limit to one category
    """

    scope = serializers.ChoiceField(choices=['month', 'year'], required=False, default='year')
    category = serializers.UUIDField(required=False)


class CategoryQuerySerializer(serializers.Serializer):
    category = serializers.UUIDField(required=False)


class CompareQuerySerializer(serializers.Serializer):
    """
    Query Parameters:
        ids (UUID, repeated): Services to compare, at least two
    """

    ids = serializers.ListField(child=serializers.UUIDField(), min_length=2)


# =============================================================================
# Response Serializers
# =============================================================================

class BreakdownItemSerializer(serializers.Serializer):
    category_id = serializers.UUIDField(allow_null=True)
    category_name = serializers.CharField()
    total = amount_field()
    count = serializers.IntegerField()
    percentage = amount_field()


class MonthlyTotalSerializer(serializers.Serializer):
    month = serializers.CharField()
    total = amount_field()
    count = serializers.IntegerField()


class YearlyTotalSerializer(serializers.Serializer):
    year = serializers.IntegerField()
    total = amount_field()
    count = serializers.IntegerField()


class MonthlyAverageSerializer(serializers.Serializer):
    month = serializers.CharField()
    average = amount_field()
    count = serializers.IntegerField()


class PeriodSummarySerializer(serializers.Serializer):
    start = serializers.DateTimeField()
    end = serializers.DateTimeField()
    average = amount_field()
    count = serializers.IntegerField()


class ComparisonSerializer(serializers.Serializer):
    current = PeriodSummarySerializer()
    baseline = PeriodSummarySerializer()
    change = amount_field()
    change_percent = amount_field()


class CategoryReportSerializer(serializers.Serializer):
    category = CategorySerializer()
    average = amount_field()
    min = amount_field()
    max = amount_field()
    total = amount_field()
    count = serializers.IntegerField()
    month_over_month = ComparisonSerializer()
    year_over_year = ComparisonSerializer()


class TrendsSerializer(serializers.Serializer):
    category_id = serializers.UUIDField(allow_null=True)
    monthly_averages = MonthlyAverageSerializer(many=True)
    monthly_totals = MonthlyTotalSerializer(many=True)
    yearly_totals = YearlyTotalSerializer(many=True)
    total_spent = amount_field()
    average = amount_field()


class DashboardSerializer(serializers.Serializer):
    period = serializers.CharField()
    total_spent = amount_field()
    average_per_service = amount_field()
    service_count = serializers.IntegerField()
    category_count = serializers.IntegerField()
    favorite_count = serializers.IntegerField()
    monthly_totals = MonthlyTotalSerializer(many=True)
    top_categories = BreakdownItemSerializer(many=True)
    recent_services = ServiceListSerializer(many=True)


class ProviderSummarySerializer(serializers.Serializer):
    provider = serializers.CharField()
    count = serializers.IntegerField()
    total = amount_field()
    rating = serializers.FloatField()


class BudgetStatusSerializer(serializers.Serializer):
    category_id = serializers.UUIDField()
    category_name = serializers.CharField()
    budget = amount_field()
    spent = amount_field()
    remaining = amount_field()
    percentage = amount_field()
    over_budget = serializers.BooleanField()
    count = serializers.IntegerField()


class PriceComparisonSerializer(serializers.Serializer):
    services = ServiceListSerializer(many=True)
    cheapest_id = serializers.UUIDField(allow_null=True)
    average = amount_field()
    min = amount_field()
    max = amount_field()
    spread = amount_field()


class ErrorSerializer(serializers.Serializer):
    error = serializers.CharField()
