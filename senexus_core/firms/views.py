"""
Firm Views
"""

from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from senexus_core.accounts.access import get_user_firm_access
from senexus_core.core.services import NotFoundServiceError
from senexus_core.core.views import ServiceErrorMixin

from .models import Firm
from .serializers import (
    CreateFirmSerializer,
    EntitySerializer,
    FirmSerializer,
    UpdateFirmSerializer,
)
from .services import FirmService


class FirmViewSet(ServiceErrorMixin, viewsets.ViewSet):
    """
    Firms visible to the current user.

    Creation and deletion are admin-only; the service enforces this.
    """
    permission_classes = [permissions.IsAuthenticated]
    lookup_field = 'slug'

    def get_service(self, firm=None):
        return FirmService(user=self.request.user, context={'firm': firm, 'request': self.request})

    def _get_active_firm(self, slug):
        firm = Firm.objects.active().filter(slug=slug).first()
        if firm is None:
            raise NotFoundServiceError("Firm not found")
        return firm

    def list(self, request):
        firms = self.get_service().list_user_firms()
        return Response(FirmSerializer(firms, many=True).data)

    def retrieve(self, request, slug=None):
        firm = self.get_service().get_firm_by_slug(slug)
        return Response(FirmSerializer(firm).data)

    def create(self, request):
        serializer = CreateFirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        firm = self.get_service().create_firm_with_modules(serializer.validated_data)
        return Response(FirmSerializer(firm).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, slug=None):
        firm = self._get_active_firm(slug)
        serializer = UpdateFirmSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        firm = self.get_service(firm).update_firm(firm, serializer.validated_data)
        return Response(FirmSerializer(firm).data)

    update = partial_update

    def destroy(self, request, slug=None):
        firm = self._get_active_firm(slug)
        self.get_service(firm).delete_firm(firm)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def entities(self, request, slug=None):
        firm = self.get_service().get_firm_by_slug(slug)
        entities = firm.entities.filter(is_active=True)
        return Response(EntitySerializer(entities, many=True).data)

    @action(detail=False, methods=['get'])
    def access(self, request):
        """Firm access summary for the current user"""
        return Response(get_user_firm_access(request.user).to_dict())
