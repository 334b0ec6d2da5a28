import logging

from django.http import HttpResponse
from drf_spectacular.utils import extend_schema
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view, parser_classes
from rest_framework.parsers import JSONParser, MultiPartParser
from rest_framework.response import Response

from apps.preferences.services import load_app_settings

from .serializers import (
    ServiceSerializer,
    ServiceListSerializer,
    CategorySerializer,
    ResetStatusSerializer,
    RestoreResultSerializer,
    # Input serializers
    ServiceFilterSerializer,
    ServiceInputSerializer,
    CategoryInputSerializer,
    CategoryReorderSerializer,
    CategorySearchSerializer,
)
from .services import (
    CatalogStore,
    add_service,
    update_service,
    delete_service,
    toggle_favorite,
    duplicate_service,
    add_category,
    update_category,
    delete_category,
    reorder_categories,
    move_categories,
    filter_services,
    search_categories,
    create_backup,
    restore_backup,
    backup_filename,
    generate_csv,
    csv_filename,
    confirm_reset,
    cancel_reset,
    # Exceptions
    CatalogServiceError,
    ServiceNotFoundError,
    CategoryNotFoundError,
    PersistenceError,
)

logger = logging.getLogger(__name__)


def error_response(error: CatalogServiceError) -> Response:
    """Translate a catalog error into an HTTP response."""
    if isinstance(error, (ServiceNotFoundError, CategoryNotFoundError)):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(error, PersistenceError):
        return Response({'error': str(error)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)


class ServiceViewSet(viewsets.ViewSet):
    """
    ViewSet for Service CRUD operations.

    All business logic is handled by services.
    Views are thin HTTP handlers only.

    list: Get services (filterable, sortable)
    create: Record a new service
    retrieve: Get a specific service
    update: Replace a service
    destroy: Delete a service
    """

    @extend_schema(
        parameters=[ServiceFilterSerializer],
        responses={200: ServiceListSerializer(many=True)},
    )
    def list(self, request):
        """
        Filter services based on query parameters.

        Without an explicit sort, the saved default sort order is used.
        """
        filter_serializer = ServiceFilterSerializer(data=request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        store = CatalogStore.load()
        services = store.favorites() if params['favorites'] else store.services

        services = filter_services(
            services,
            search=params.get('search'),
            category=params.get('category'),
            date_from=params.get('date_from'),
            date_to=params.get('date_to'),
            min_price=params.get('min_price'),
            max_price=params.get('max_price'),
            sort=params.get('sort') or load_app_settings().default_sort_order,
        )

        serializer = ServiceListSerializer(services, many=True)
        return Response(serializer.data)

    @extend_schema(request=ServiceInputSerializer, responses={201: ServiceSerializer})
    def create(self, request):
        """Record a new service."""
        serializer = ServiceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            service = add_service(**serializer.validated_data)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ServiceSerializer})
    def retrieve(self, request, pk=None):
        try:
            service = CatalogStore.load().get_service(pk)
        except ServiceNotFoundError as e:
            return error_response(e)

        return Response(ServiceSerializer(service).data)

    @extend_schema(request=ServiceInputSerializer, responses={200: ServiceSerializer})
    def update(self, request, pk=None):
        """Replace every editable field of a service."""
        serializer = ServiceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            service = update_service(service_id=pk, **serializer.validated_data)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(ServiceSerializer(service).data)

    def destroy(self, request, pk=None):
        try:
            delete_service(service_id=pk)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={200: ServiceSerializer})
    @action(detail=True, methods=['post'])
    def favorite(self, request, pk=None):
        """Toggle the favorite flag."""
        try:
            service = toggle_favorite(service_id=pk)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(ServiceSerializer(service).data)

    @extend_schema(request=None, responses={201: ServiceSerializer})
    @action(detail=True, methods=['post'])
    def duplicate(self, request, pk=None):
        """Copy a service as a new record dated now."""
        try:
            service = duplicate_service(service_id=pk)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: ServiceListSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def favorites(self, request):
        """Get favorite services in insertion order."""
        serializer = ServiceListSerializer(CatalogStore.load().favorites(), many=True)
        return Response(serializer.data)


class CategoryViewSet(viewsets.ViewSet):
    """
    ViewSet for Category operations.

    list: Get categories in display order
    create: Create a category at the end of the order
    retrieve: Get a specific category
    update: Rename / restyle a category
    destroy: Delete a category (its services become uncategorized)
    """

    @extend_schema(responses={200: CategorySerializer(many=True)})
    def list(self, request):
        serializer = CategorySerializer(CatalogStore.load().categories, many=True)
        return Response(serializer.data)

    @extend_schema(request=CategoryInputSerializer, responses={201: CategorySerializer})
    def create(self, request):
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category = add_category(**serializer.validated_data)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(category).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: CategorySerializer})
    def retrieve(self, request, pk=None):
        try:
            category = CatalogStore.load().get_category(pk)
        except CategoryNotFoundError as e:
            return error_response(e)

        return Response(CategorySerializer(category).data)

    @extend_schema(request=CategoryInputSerializer, responses={200: CategorySerializer})
    def update(self, request, pk=None):
        serializer = CategoryInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            category = update_category(category_id=pk, **serializer.validated_data)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(category).data)

    def destroy(self, request, pk=None):
        try:
            delete_category(category_id=pk)
        except CatalogServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=CategoryReorderSerializer, responses={200: CategorySerializer(many=True)})
    @action(detail=False, methods=['post'])
    def reorder(self, request):
        """
        Persist a new category order.

        POST /api/catalog/categories/reorder/
        Body: {"ordered_ids": [...]} or {"source_indices": [2], "destination": 0}
        """
        serializer = CategoryReorderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        params = serializer.validated_data

        try:
            if 'ordered_ids' in params:
                categories = reorder_categories(ordered_ids=params['ordered_ids'])
            else:
                categories = move_categories(
                    source_indices=params['source_indices'],
                    destination=params['destination']
                )
        except CatalogServiceError as e:
            return error_response(e)

        return Response(CategorySerializer(categories, many=True).data)

    @extend_schema(parameters=[CategorySearchSerializer], responses={200: CategorySerializer(many=True)})
    @action(detail=False, methods=['get'])
    def search(self, request):
        """Categories whose name contains ?q=."""
        serializer = CategorySearchSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        categories = search_categories(CatalogStore.load().categories, serializer.validated_data['q'])
        return Response(CategorySerializer(categories, many=True).data)


@extend_schema(
    methods=['GET'],
    responses={200: {'type': 'object'}},
    description="Download a JSON backup of every service and category.",
    tags=['catalog'],
)
@extend_schema(
    methods=['POST'],
    request={'application/json': {'type': 'object'}},
    responses={200: RestoreResultSerializer},
    description="Replace all data with an uploaded backup (JSON body or 'file' upload).",
    tags=['catalog'],
)
@api_view(['GET', 'POST'])
@parser_classes([JSONParser, MultiPartParser])
def backup(request):
    """Download or restore a backup."""
    if request.method == 'GET':
        store = CatalogStore.load()
        response = Response(create_backup(store.services, store.categories))
        response['Content-Disposition'] = f'attachment; filename="{backup_filename()}"'
        return response

    upload = request.FILES.get('file')
    document = upload.read() if upload else request.data

    store = CatalogStore()
    if not restore_backup(document, store=store):
        return Response(
            {'error': 'Backup could not be restored'},
            status=status.HTTP_400_BAD_REQUEST
        )

    return Response({
        'restored': True,
        'services': len(store.services),
        'categories': len(store.categories),
    })


@extend_schema(
    responses={(200, 'text/csv'): str},
    description="Export every service as CSV, newest first.",
    tags=['catalog'],
)
@api_view(['GET'])
def export_csv(request):
    """Export services as CSV."""
    store = CatalogStore.load()
    content = generate_csv(store.services, load_app_settings().currency)
    logger.info("Exported %d services to CSV", len(store.services))

    response = HttpResponse(content, content_type='text/csv; charset=utf-8')
    response['Content-Disposition'] = f'attachment; filename="{csv_filename()}"'
    return response


@extend_schema(
    request=None,
    responses={200: ResetStatusSerializer},
    description="Confirm a full data reset. The reset runs on the third confirmation.",
    tags=['catalog'],
)
@api_view(['POST'])
def reset_confirm(request):
    try:
        performed, confirmation = confirm_reset()
    except CatalogServiceError as e:
        return error_response(e)

    return Response({
        'reset': performed,
        'state': confirmation.state,
        'remaining': confirmation.remaining,
    })


@extend_schema(
    request=None,
    responses={200: ResetStatusSerializer},
    description="Cancel a pending reset confirmation.",
    tags=['catalog'],
)
@api_view(['POST'])
def reset_cancel(request):
    confirmation = cancel_reset()
    return Response({
        'reset': False,
        'state': confirmation.state,
        'remaining': confirmation.remaining,
    })
