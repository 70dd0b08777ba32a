"""Domain layer exports."""

from domain.exceptions import (
    DomainError,
    InfrastructureError,
    ObjectNotFoundError,
    ValidationError,
)
from domain.services.key_allocator import KeyAllocator
from domain.value_objects import ObjectRecord

__all__ = [
    "DomainError",
    "InfrastructureError",
    "KeyAllocator",
    "ObjectNotFoundError",
    "ObjectRecord",
    "ValidationError",
]
