"""
Base service class for business logic operations.

Provides common functionality for all service classes including
error handling, logging, and transaction management.
"""

import logging
from typing import Any, Dict, Optional, List, Type, TypeVar, Callable
from django.db import transaction
from django.core.exceptions import ValidationError, PermissionDenied

T = TypeVar('T')


class ServiceError(Exception):
    """Base exception for service errors."""
    pass


class ValidationServiceError(ServiceError):
    """Service error for validation failures."""
    pass


class PermissionServiceError(ServiceError):
    """Service error for permission failures."""
    pass


class NotFoundServiceError(ServiceError):
    """Service error for not found resources."""
    pass


class BaseService:
    """
    Base service class providing common functionality.

    Every workflow (firm creation, module toggling, user management) runs
    through a service bound to the acting user, so permission checks,
    logging and transactions are handled the same way everywhere.
    """

    def __init__(self, user: Optional['User'] = None, context: Optional[Dict[str, Any]] = None):
        """
        Initialize service with user context.

        Args:
            user: The user performing the operation
            context: Additional context for the operation (e.g. firm, request)
        """
        self.user = user
        self.context = context or {}
        self.logger = logging.getLogger(f"{self.__class__.__module__}.{self.__class__.__name__}")

        self.firm = self.context.get('firm')
        self.request = self.context.get('request')

    def _log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None, level: str = 'info'):
        """
        Log service operation.

        Args:
            operation: Name of the operation
            details: Additional details to log
            level: Logging level (debug, info, warning, error)
        """
        user_info = f"user={self.user.email if self.user else 'anonymous'}"
        context_str = f"firm={getattr(self.firm, 'slug', self.firm)}" if self.firm else "no context"
        details_str = f" details={details}" if details else ""

        message = f"{operation} - {user_info}, {context_str}{details_str}"

        log_method = getattr(self.logger, level, self.logger.info)
        log_method(message)

    def _require_user(self) -> 'User':
        """Return the acting user or raise if the service is anonymous."""
        if not self.user or not self.user.is_authenticated:
            raise PermissionServiceError("Authentication required")
        return self.user

    @transaction.atomic
    def _execute_with_transaction(self, operation_func: Callable, *args, **kwargs) -> Any:
        """
        Execute operation within a database transaction.

        Args:
            operation_func: Function to execute
            *args: Arguments for function
            **kwargs: Keyword arguments for function

        Returns:
            Result of operation_func

        Raises:
            ServiceError: If operation fails
        """
        try:
            return operation_func(*args, **kwargs)
        except ValidationError as e:
            self._handle_validation_error(e)
        except PermissionDenied as e:
            raise PermissionServiceError(str(e))
        except ServiceError:
            raise
        except Exception as e:
            self.logger.error(f"Transaction failed: {str(e)}", exc_info=True)
            raise ServiceError(f"Operation failed: {str(e)}")

    def _handle_validation_error(self, error: ValidationError) -> None:
        """
        Convert a Django ValidationError into a ValidationServiceError.
        """
        if hasattr(error, 'message_dict'):
            raise ValidationServiceError(f"Validation failed: {error.message_dict}")
        elif hasattr(error, 'messages'):
            raise ValidationServiceError(f"Validation failed: {'; '.join(error.messages)}")
        else:
            raise ValidationServiceError(f"Validation failed: {str(error)}")

    def validate_required_fields(self, data: Dict[str, Any], required_fields: List[str]) -> None:
        """
        Validate that required fields are present in data.

        Raises:
            ValidationServiceError: If required fields are missing
        """
        missing_fields = [field for field in required_fields if not data.get(field)]

        if missing_fields:
            raise ValidationServiceError(
                f"Missing required fields: {', '.join(missing_fields)}"
            )

    def get_or_404(self, model_class: Type[T], **kwargs) -> T:
        """
        Get object or raise NotFoundServiceError.

        Args:
            model_class: Model class to query
            **kwargs: Query parameters

        Returns:
            Model instance

        Raises:
            NotFoundServiceError: If object not found
        """
        try:
            return model_class.objects.get(**kwargs)
        except model_class.DoesNotExist:
            model_name = model_class.__name__
            raise NotFoundServiceError(f"{model_name} not found")
        except model_class.MultipleObjectsReturned:
            model_name = model_class.__name__
            raise ValidationServiceError(f"Multiple {model_name} objects found")

    def safe_update(self, instance: Any, **kwargs) -> Any:
        """
        Update a model instance with full_clean() validation.

        Keys whose value is None are skipped so partial payloads leave
        existing values untouched.

        Raises:
            ValidationServiceError: If validation fails
        """
        for field, value in kwargs.items():
            if value is not None:
                setattr(instance, field, value)

        try:
            instance.full_clean()
        except ValidationError as e:
            self._handle_validation_error(e)

        instance.save()
        return instance
