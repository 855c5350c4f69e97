"""Kernel – framework-agnostic permission model, errors and messaging ports."""

from authz_core.kernel.errors import (
    ApplicationError,
    AuthenticationError,
    BaseError,
    ChannelDisconnectedError,
    ConflictError,
    DirectoryUnavailableError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    NotFoundError,
    PolicyViolationError,
    SerializationError,
    ValidationError,
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
