from .object_record import ObjectRecord

__all__ = [
    "ObjectRecord",
]
