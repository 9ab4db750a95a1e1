"""
Module System Exceptions

Custom exceptions for the module system. They extend the service error
hierarchy so API views map them onto HTTP responses.
"""

from senexus_core.core.services import (
    ServiceError,
    NotFoundServiceError,
    PermissionServiceError,
)


class ModuleError(ServiceError):
    """Base exception for module system errors"""
    pass


class ModuleNotFoundError(ModuleError, NotFoundServiceError):
    """Raised when a module cannot be found"""
    pass


class ModuleValidationError(ModuleError):
    """Raised when a module cannot be enabled because of missing dependencies or conflicts"""

    def __init__(self, message, result=None, module=None):
        super().__init__(message)
        self.result = result
        self.module = module

    @property
    def details(self):
        if self.result is None:
            return {}
        return {'validation': self.result.to_dict()}


class DependentModulesError(ModuleError):
    """Raised when disabling a module that other enabled modules require"""

    def __init__(self, message, dependents=None):
        super().__init__(message)
        self.dependents = list(dependents or [])

    @property
    def details(self):
        return {'dependents': self.dependents}


class ModuleStateError(ModuleError):
    """Raised when module is in an invalid state for the requested operation"""
    pass


class ModuleConfigurationError(ModuleError):
    """Raised when module configuration is invalid"""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors

    @property
    def details(self):
        if not self.errors:
            return {}
        return {'configuration': self.errors}


class ModulePermissionError(ModuleError, PermissionServiceError):
    """Raised when the user may not manage modules for a firm"""
    pass
