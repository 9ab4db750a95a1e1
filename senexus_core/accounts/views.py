from dataclasses import asdict

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from senexus_core.core.views import ServiceErrorMixin

from .access import get_user_firm_access
from .permissions import RoleBasedPermission, UserPermissions
from .serializers import (
    FirmAssignmentSerializer,
    RoleSerializer,
    UserCreateSerializer,
    UserFirmAssignmentSerializer,
    UserSerializer,
    UserUpdateSerializer,
)
from .services import UserService


class UserViewSet(ServiceErrorMixin, viewsets.ViewSet):
    """User management and firm assignments"""
    permission_classes = [RoleBasedPermission]
    lookup_value_regex = '[0-9a-f-]{36}'

    def get_service(self):
        return UserService(user=self.request.user, context={'request': self.request})

    def list(self, request):
        users = self.get_service().list_users_with_assignments(role=request.query_params.get('role'))
        return Response(UserSerializer(users, many=True).data)

    def retrieve(self, request, pk=None):
        user = self.get_service().get_user_with_assignments(pk)
        return Response(UserSerializer(user).data)

    def create(self, request):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self.get_service().create_user(serializer.validated_data)
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = UserUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = self.get_service().update_user(pk, serializer.validated_data)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        user = self.get_service().activate_user(pk)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        user = self.get_service().deactivate_user(pk)
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'])
    def role(self, request, pk=None):
        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = self.get_service().update_user_role(pk, serializer.validated_data['role'])
        return Response(UserSerializer(user).data)

    @action(detail=True, methods=['post'], url_path='assign-firm')
    def assign_firm(self, request, pk=None):
        serializer = FirmAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        assignment = self.get_service().assign_user_to_firm(pk, serializer.validated_data['firm'])
        return Response(UserFirmAssignmentSerializer(assignment).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='remove-firm')
    def remove_firm(self, request, pk=None):
        serializer = FirmAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        removed = self.get_service().remove_user_from_firm(pk, serializer.validated_data['firm'])
        return Response({'removed': removed})

    @action(detail=False, methods=['get'])
    def me(self, request):
        """Current user with role capabilities and firm access"""
        user = self.get_service().get_user_with_assignments(request.user.pk)
        return Response({
            'user': UserSerializer(user).data,
            'permissions': asdict(UserPermissions.for_user(request.user)),
            'access': get_user_firm_access(request.user).to_dict(),
        })
