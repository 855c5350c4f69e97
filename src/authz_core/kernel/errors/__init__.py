"""Kernel errors.

::

    BaseError
    ├── DomainError            ValidationError, NotFoundError, ConflictError
    ├── ApplicationError       AuthenticationError, ForbiddenError, PolicyViolationError
    └── InfrastructureError    DirectoryUnavailableError, ChannelDisconnectedError,
                               SerializationError
"""
from authz_core.kernel.errors.application import (
    ApplicationError,
    AuthenticationError,
    ForbiddenError,
    PolicyViolationError,
)
from authz_core.kernel.errors.base import BaseError
from authz_core.kernel.errors.domain import ConflictError, DomainError, NotFoundError, ValidationError
from authz_core.kernel.errors.infrastructure import (
    ChannelDisconnectedError,
    DirectoryUnavailableError,
    InfrastructureError,
    SerializationError,
)

__all__ = [
    "ApplicationError",
    "AuthenticationError",
    "BaseError",
    "ChannelDisconnectedError",
    "ConflictError",
    "DirectoryUnavailableError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "NotFoundError",
    "PolicyViolationError",
    "SerializationError",
    "ValidationError",
]
