from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from apps.catalog.services import CatalogStore, CategoryNotFoundError, ServiceNotFoundError
from apps.preferences.services import load_budgets, load_provider_ratings

from . import aggregation, reports
from .exceptions import StatisticsServiceError
from .serializers import (
    # Input serializers
    PeriodQuerySerializer,
    ComparisonQuerySerializer,
    CategoryQuerySerializer,
    CompareQuerySerializer,
    # Response serializers
    BreakdownItemSerializer,
    ComparisonSerializer,
    CategoryReportSerializer,
    TrendsSerializer,
    DashboardSerializer,
    ProviderSummarySerializer,
    BudgetStatusSerializer,
    PriceComparisonSerializer,
    ErrorSerializer,
)


@extend_schema(
    responses={200: CategoryReportSerializer, 404: ErrorSerializer},
    description="Average, min, max and period comparisons for one category.",
    tags=['statistics'],
)
@api_view(['GET'])
def category_statistics(request, category_id):
    """Statistics for one category - thin HTTP handler."""
    store = CatalogStore.load()

    try:
        category = store.get_category(category_id)
    except CategoryNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    report = reports.category_report(store, category)
    return Response(CategoryReportSerializer(report).data)


@extend_schema(
    parameters=[PeriodQuerySerializer],
    responses={200: BreakdownItemSerializer(many=True), 400: ErrorSerializer},
    description="Spending per category as totals and percentages of the overall total.",
    tags=['statistics'],
)
@api_view(['GET'])
def breakdown(request):
    query_serializer = PeriodQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        services = aggregation.services_since(
            CatalogStore.load().services,
            query_serializer.validated_data['period']
        )
    except StatisticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    data = aggregation.category_breakdown(services)
    return Response(BreakdownItemSerializer(data, many=True).data)


@extend_schema(
    parameters=[ComparisonQuerySerializer],
    responses={200: ComparisonSerializer},
    description="Average price this month vs last month, or this year vs last year.",
    tags=['statistics'],
)
@api_view(['GET'])
def comparison(request):
    query_serializer = ComparisonQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)
    params = query_serializer.validated_data

    store = CatalogStore.load()
    services = store.services
    if 'category' in params:
        services = store.services_in_category(params['category'])

    if params['scope'] == 'month':
        data = aggregation.month_over_month(services)
    else:
        data = aggregation.year_over_year(services)

    return Response(ComparisonSerializer(data).data)


@extend_schema(
    parameters=[CategoryQuerySerializer],
    responses={200: TrendsSerializer},
    description="Monthly averages and totals over all time (price trends).",
    tags=['statistics'],
)
@api_view(['GET'])
def trends(request):
    query_serializer = CategoryQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    category_id = query_serializer.validated_data.get('category')
    data = reports.trends(CatalogStore.load(), str(category_id) if category_id else None)
    return Response(TrendsSerializer(data).data)


@extend_schema(
    parameters=[PeriodQuerySerializer],
    responses={200: DashboardSerializer, 400: ErrorSerializer},
    description="Totals, monthly chart data, top categories and recent services.",
    tags=['statistics'],
)
@api_view(['GET'])
def dashboard(request):
    query_serializer = PeriodQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    try:
        data = reports.dashboard(
            CatalogStore.load(),
            period=query_serializer.validated_data['period']
        )
    except StatisticsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(DashboardSerializer(data).data)


@extend_schema(
    responses={200: ProviderSummarySerializer(many=True)},
    description="Providers with service count, total spent and rating, best rated first.",
    tags=['statistics'],
)
@api_view(['GET'])
def providers(request):
    data = aggregation.provider_summary(CatalogStore.load().services, load_provider_ratings())
    return Response(ProviderSummarySerializer(data, many=True).data)


@extend_schema(
    responses={200: BudgetStatusSerializer(many=True)},
    description="This month's spending against each category budget.",
    tags=['statistics'],
)
@api_view(['GET'])
def budgets(request):
    data = reports.budget_overview(CatalogStore.load(), load_budgets())
    return Response(BudgetStatusSerializer(data, many=True).data)


@extend_schema(
    parameters=[CompareQuerySerializer],
    responses={200: PriceComparisonSerializer, 404: ErrorSerializer},
    description="Compare selected services side by side and find the cheapest.",
    tags=['statistics'],
)
@api_view(['GET'])
def compare(request):
    query_serializer = CompareQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    store = CatalogStore.load()
    try:
        services = [store.get_service(service_id) for service_id in query_serializer.validated_data['ids']]
    except ServiceNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(PriceComparisonSerializer(reports.price_comparison(services)).data)
