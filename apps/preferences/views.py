from drf_spectacular.utils import extend_schema
from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view
from rest_framework.response import Response

from apps.catalog.serializers import ServiceSerializer
from apps.catalog.services import CatalogServiceError
from apps.catalog.views import error_response as catalog_error_response

from .serializers import (
    AppSettingsSerializer,
    RecurringServiceSerializer,
    TemplateSerializer,
    # Input serializers
    AppSettingsInputSerializer,
    BudgetInputSerializer,
    ProviderRatingInputSerializer,
    RecurringServiceInputSerializer,
    TemplateInputSerializer,
    TemplateUseInputSerializer,
)
from .services import (
    load_app_settings,
    save_app_settings,
    load_budgets,
    set_budget,
    remove_budget,
    load_provider_ratings,
    rate_provider,
    load_recurring_services,
    get_recurring_service,
    create_recurring_service,
    update_recurring_service,
    delete_recurring_service,
    add_service_from_recurring,
    load_templates,
    get_template,
    create_template,
    update_template,
    delete_template,
    add_service_from_template,
    # Exceptions
    PreferencesServiceError,
    InvalidPreferenceError,
    RecurringServiceError,
    RecurringServiceNotFoundError,
    TemplateError,
    TemplateNotFoundError,
)


def error_response(error: PreferencesServiceError) -> Response:
    """Translate a preferences error into an HTTP response."""
    if isinstance(error, (RecurringServiceNotFoundError, TemplateNotFoundError)):
        return Response({'error': str(error)}, status=status.HTTP_404_NOT_FOUND)
    if isinstance(error, (InvalidPreferenceError, RecurringServiceError, TemplateError)):
        return Response({'error': str(error)}, status=status.HTTP_400_BAD_REQUEST)
    return Response({'error': str(error)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


@extend_schema(
    methods=['GET'],
    responses={200: AppSettingsSerializer},
    description="Get the current application settings.",
    tags=['preferences'],
)
@extend_schema(
    methods=['PATCH'],
    request=AppSettingsInputSerializer,
    responses={200: AppSettingsSerializer},
    description="Update some application settings.",
    tags=['preferences'],
)
@api_view(['GET', 'PATCH'])
def app_settings(request):
    if request.method == 'GET':
        return Response(AppSettingsSerializer(load_app_settings()).data)

    serializer = AppSettingsInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        updated = save_app_settings(**serializer.validated_data)
    except PreferencesServiceError as e:
        return error_response(e)

    return Response(AppSettingsSerializer(updated).data)


@extend_schema(
    methods=['GET'],
    responses={200: {'type': 'object', 'additionalProperties': {'type': 'string'}}},
    description="Get monthly budgets keyed by category id.",
    tags=['preferences'],
)
@extend_schema(
    methods=['POST'],
    request=BudgetInputSerializer,
    responses={200: {'type': 'object', 'additionalProperties': {'type': 'string'}}},
    description="Set a category budget. Zero or a negative amount removes it.",
    tags=['preferences'],
)
@api_view(['GET', 'POST'])
def budgets(request):
    if request.method == 'GET':
        return Response({key: str(amount) for key, amount in load_budgets().items()})

    serializer = BudgetInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = set_budget(**serializer.validated_data)
    except PreferencesServiceError as e:
        return error_response(e)

    return Response({key: str(amount) for key, amount in result.items()})


@extend_schema(
    responses={204: None},
    description="Remove a category budget.",
    tags=['preferences'],
)
@api_view(['DELETE'])
def budget_detail(request, category_id):
    try:
        remove_budget(category_id=category_id)
    except PreferencesServiceError as e:
        return error_response(e)

    return Response(status=status.HTTP_204_NO_CONTENT)


@extend_schema(
    methods=['GET'],
    responses={200: {'type': 'object', 'additionalProperties': {'type': 'number'}}},
    description="Get provider ratings (1-5).",
    tags=['preferences'],
)
@extend_schema(
    methods=['POST'],
    request=ProviderRatingInputSerializer,
    responses={200: {'type': 'object', 'additionalProperties': {'type': 'number'}}},
    description="Rate a provider.",
    tags=['preferences'],
)
@api_view(['GET', 'POST'])
def provider_ratings(request):
    if request.method == 'GET':
        return Response(load_provider_ratings())

    serializer = ProviderRatingInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        ratings = rate_provider(**serializer.validated_data)
    except PreferencesServiceError as e:
        return error_response(e)

    return Response(ratings)


class RecurringServiceViewSet(viewsets.ViewSet):
    """
    ViewSet for recurring service definitions.

    list: Get recurring services with their next due date
    create: Add a recurring service
    retrieve: Get one recurring service
    update: Replace a recurring service
    destroy: Delete a recurring service
    add_entry: Record a service from the definition
    """

    @extend_schema(responses={200: RecurringServiceSerializer(many=True)})
    def list(self, request):
        return Response(RecurringServiceSerializer(load_recurring_services(), many=True).data)

    @extend_schema(request=RecurringServiceInputSerializer, responses={201: RecurringServiceSerializer})
    def create(self, request):
        serializer = RecurringServiceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            recurring = create_recurring_service(**serializer.validated_data)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(RecurringServiceSerializer(recurring).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: RecurringServiceSerializer})
    def retrieve(self, request, pk=None):
        try:
            recurring = get_recurring_service(pk)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(RecurringServiceSerializer(recurring).data)

    @extend_schema(request=RecurringServiceInputSerializer, responses={200: RecurringServiceSerializer})
    def update(self, request, pk=None):
        serializer = RecurringServiceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            recurring = update_recurring_service(recurring_id=pk, **serializer.validated_data)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(RecurringServiceSerializer(recurring).data)

    def destroy(self, request, pk=None):
        try:
            delete_recurring_service(recurring_id=pk)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None, responses={201: ServiceSerializer})
    @action(detail=True, methods=['post'], url_path='add-entry')
    def add_entry(self, request, pk=None):
        """
        Record a service from this recurring definition.

        POST /api/preferences/recurring/{id}/add-entry/
        """
        try:
            service, _ = add_service_from_recurring(recurring_id=pk)
        except PreferencesServiceError as e:
            return error_response(e)
        except CatalogServiceError as e:
            return catalog_error_response(e)

        return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)


class TemplateViewSet(viewsets.ViewSet):
    """
    ViewSet for service templates.

    list: Get templates
    create: Save a template
    retrieve: Get one template
    update: Replace a template
    destroy: Delete a template
    use: Record a service from the template
    """

    @extend_schema(responses={200: TemplateSerializer(many=True)})
    def list(self, request):
        return Response(TemplateSerializer(load_templates(), many=True).data)

    @extend_schema(request=TemplateInputSerializer, responses={201: TemplateSerializer})
    def create(self, request):
        serializer = TemplateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            template = create_template(**serializer.validated_data)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(TemplateSerializer(template).data, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: TemplateSerializer})
    def retrieve(self, request, pk=None):
        try:
            template = get_template(pk)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(TemplateSerializer(template).data)

    @extend_schema(request=TemplateInputSerializer, responses={200: TemplateSerializer})
    def update(self, request, pk=None):
        serializer = TemplateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            template = update_template(template_id=pk, **serializer.validated_data)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(TemplateSerializer(template).data)

    def destroy(self, request, pk=None):
        try:
            delete_template(template_id=pk)
        except PreferencesServiceError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=TemplateUseInputSerializer, responses={201: ServiceSerializer})
    @action(detail=True, methods=['post'])
    def use(self, request, pk=None):
        """
        Record a service from this template.

        POST /api/preferences/templates/{id}/use/
        """
        serializer = TemplateUseInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            service = add_service_from_template(template_id=pk, **serializer.validated_data)
        except PreferencesServiceError as e:
            return error_response(e)
        except CatalogServiceError as e:
            return catalog_error_response(e)

        return Response(ServiceSerializer(service).data, status=status.HTTP_201_CREATED)
