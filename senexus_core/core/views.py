"""
Helpers shared by the API views.
"""

import logging

from rest_framework import status
from rest_framework.response import Response

from .services import (
    ServiceError,
    PermissionServiceError,
    NotFoundServiceError,
)

logger = logging.getLogger(__name__)


def service_error_status(error: ServiceError) -> int:
    """Map a service error onto an HTTP status code."""
    if isinstance(error, NotFoundServiceError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(error, PermissionServiceError):
        return status.HTTP_403_FORBIDDEN
    return status.HTTP_400_BAD_REQUEST


class ServiceErrorMixin:
    """
    Turn ServiceError exceptions raised by services into JSON error responses.

    Usage:
        class FirmViewSet(ServiceErrorMixin, viewsets.ViewSet):
            ...
    """

    def handle_exception(self, exc):
        if isinstance(exc, ServiceError):
            code = service_error_status(exc)
            logger.info(f"{self.__class__.__name__} rejected request: {exc}")
            body = {'error': str(exc)}
            extra = getattr(exc, 'details', None)
            if extra:
                body.update(extra)
            return Response(body, status=code)
        return super().handle_exception(exc)
