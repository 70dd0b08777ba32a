"""Domain exceptions for business rule violations."""


class DomainError(Exception):
    """Base exception for domain layer."""


class ValidationError(DomainError):
    """Raised when input validation fails."""


class ObjectNotFoundError(DomainError):
    """Raised when no object record exists for an identifier."""


class InfrastructureError(DomainError):
    """Raised when infrastructure operations fail (blob store, metadata index, signing)."""
