from abc import ABC, abstractmethod

from domain.value_objects.object_record import ObjectRecord


class ObjectIndex(ABC):
    """Port for the metadata index holding object records."""

    @abstractmethod
    async def commit(self, record: ObjectRecord) -> ObjectRecord:
        """Persist ``record`` keyed by its identifier and return it stamped with the commit time.

        A record already stored under the same identifier is replaced.
        """

    @abstractmethod
    async def get_by_id(self, identifier: str) -> ObjectRecord | None:
        pass

    @abstractmethod
    async def list_by_created_desc(self) -> list[ObjectRecord]:
        """Return every record, most recently created first."""

    async def ensure_indexes(self) -> None:  # noqa: B027
        """Prepare backing indexes. Stores that need none keep this no-op."""
