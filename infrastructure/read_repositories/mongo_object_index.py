from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog
from pymongo import DESCENDING, ReturnDocument

from application.ports.repositories.object_index import ObjectIndex
from domain.exceptions import InfrastructureError
from domain.value_objects.object_record import ObjectRecord

if TYPE_CHECKING:
    from motor.motor_asyncio import AsyncIOMotorClient

    from infrastructure.config import Settings

logger = structlog.get_logger()

CREATED_AT_FIELD = "createdAt"


class MongoObjectIndex(ObjectIndex):
    """Object records stored one document per identifier (``_id``) in MongoDB."""

    def __init__(self, client: AsyncIOMotorClient, settings: Settings) -> None:
        self.client = client
        self.db = self.client[settings.mongo_db]
        self.uploads = self.db[settings.mongo_uploads_collection]

    async def ensure_indexes(self) -> None:
        await self.uploads.create_index([(CREATED_AT_FIELD, DESCENDING)])
        logger.info("object_index_indexes_ensured", collection=self.uploads.name)

    async def commit(self, record: ObjectRecord) -> ObjectRecord:
        fields = record.model_dump(by_alias=True, exclude={"created_at"})
        # createdAt comes from the server clock, not ours
        doc = await self.uploads.find_one_and_update(
            {"_id": record.identifier},
            {"$set": fields, "$currentDate": {CREATED_AT_FIELD: True}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        committed = self._to_record(doc)
        if not committed.is_committed:
            msg = f"Commit of {record.identifier} returned no {CREATED_AT_FIELD}"
            raise InfrastructureError(msg)
        return committed

    async def get_by_id(self, identifier: str) -> ObjectRecord | None:
        doc = await self.uploads.find_one({"_id": identifier})
        if not doc:
            return None
        return self._to_record(doc)

    async def list_by_created_desc(self) -> list[ObjectRecord]:
        cursor = self.uploads.find().sort(CREATED_AT_FIELD, DESCENDING)
        return [self._to_record(doc) async for doc in cursor]

    @staticmethod
    def _to_record(doc: dict[str, Any]) -> ObjectRecord:
        doc = dict(doc)
        identifier = doc.pop("_id")
        doc.setdefault("identifier", identifier)
        return ObjectRecord.model_validate(doc)
