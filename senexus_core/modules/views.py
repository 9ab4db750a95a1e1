"""
Module System Views
"""

from rest_framework import permissions, status, viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from senexus_core.accounts.permissions import IsPlatformAdmin
from senexus_core.core.services import NotFoundServiceError
from senexus_core.core.views import ServiceErrorMixin
from senexus_core.firms.models import Firm

from .models import Module
from .serializers import (
    FirmModuleSerializer,
    FirmModuleStatusSerializer,
    ModuleConfigurationSerializer,
    ModuleEventSerializer,
    ModuleSerializer,
    ToggleModuleSerializer,
)
from .services import ModuleService


class ModuleViewSet(ServiceErrorMixin, viewsets.ModelViewSet):
    """
    Module catalogue.

    Any authenticated user can browse; only platform admins can edit
    definitions.
    """
    serializer_class = ModuleSerializer
    lookup_field = 'slug'
    filterset_fields = ['category', 'pricing_tier', 'is_core', 'is_active']
    search_fields = ['slug', 'display_name', 'description']
    ordering_fields = ['sort_order', 'display_name', 'category']

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            return [permissions.IsAuthenticated()]
        return [IsPlatformAdmin()]

    def get_queryset(self):
        queryset = Module.objects.all()
        if not self.request.user.is_platform_admin:
            queryset = queryset.active()
        return queryset.order_by('category', 'sort_order', 'display_name')

    def perform_destroy(self, instance):
        # Firm history references modules, so they are retired rather than deleted
        instance.is_active = False
        instance.save(update_fields=['is_active', 'updated_at'])


class FirmModuleView(ServiceErrorMixin, APIView):
    """Base view for endpoints scoped to ``/firms/<firm_slug>/``"""
    permission_classes = [permissions.IsAuthenticated]

    def get_firm(self, firm_slug):
        firm = Firm.objects.active().filter(slug=firm_slug).first()
        if firm is None:
            raise NotFoundServiceError("Firm not found")
        return firm

    def get_service(self, firm):
        return ModuleService(user=self.request.user, context={'firm': firm, 'request': self.request})


class FirmModuleListView(FirmModuleView):
    """All active modules with their status for a firm"""

    def get(self, request, firm_slug):
        firm = self.get_firm(firm_slug)
        data = self.get_service(firm).get_firm_modules(firm)
        return Response({
            'modules': FirmModuleStatusSerializer(data['modules'], many=True).data,
            'enabled_modules': data['enabled_modules'],
        })


class ToggleFirmModuleView(FirmModuleView):

    def post(self, request, firm_slug, module_slug):
        firm = self.get_firm(firm_slug)
        serializer = ToggleModuleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        firm_module = self.get_service(firm).toggle_firm_module(
            firm, module_slug, serializer.validated_data['enabled']
        )
        if firm_module is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(FirmModuleSerializer(firm_module).data)


class ModuleConfigurationView(FirmModuleView):

    def put(self, request, firm_slug, module_slug):
        firm = self.get_firm(firm_slug)
        serializer = ModuleConfigurationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        firm_module = self.get_service(firm).update_module_configuration(
            firm, module_slug, serializer.validated_data['configuration']
        )
        return Response(FirmModuleSerializer(firm_module).data)

    patch = put


class ModulePermissionsView(FirmModuleView):
    """Permission keys the current user holds in a firm"""

    def get(self, request, firm_slug):
        firm = self.get_firm(firm_slug)
        keys = self.get_service(firm).get_user_module_permissions(firm)
        return Response({'permissions': keys})


class InstallDefaultModulesView(FirmModuleView):

    def post(self, request, firm_slug):
        firm = self.get_firm(firm_slug)
        installed = self.get_service(firm).install_default_modules(firm)
        return Response(
            FirmModuleSerializer(installed, many=True).data,
            status=status.HTTP_201_CREATED
        )


class ModuleAnalyticsView(FirmModuleView):

    def get(self, request, firm_slug, module_slug):
        firm = self.get_firm(firm_slug)
        return Response(self.get_service(firm).get_module_analytics(firm, module_slug))


class ModuleEventsView(FirmModuleView):
    """Module audit log for a firm; ``?module=<slug>`` narrows it to one module"""

    def get(self, request, firm_slug):
        firm = self.get_firm(firm_slug)
        events = self.get_service(firm).get_module_events(
            firm, module_slug=request.query_params.get('module')
        )
        return Response(ModuleEventSerializer(events, many=True).data)
