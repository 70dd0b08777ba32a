"""Tests for MongoObjectIndex against a fake motor collection."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from types import SimpleNamespace
from typing import Any

import pytest
from pymongo import DESCENDING, ReturnDocument

from domain.exceptions import InfrastructureError
from domain.value_objects.object_record import ObjectRecord
from infrastructure.read_repositories.mongo_object_index import MongoObjectIndex


class FakeCursor:
    def __init__(self, docs: list[dict[str, Any]]) -> None:
        self._docs = docs

    def sort(self, field: str, direction: int) -> FakeCursor:
        self._docs = sorted(self._docs, key=lambda d: d[field], reverse=direction == DESCENDING)
        return self

    def __aiter__(self) -> FakeCursor:
        self._iter = iter(self._docs)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iter)
        except StopIteration:
            raise StopAsyncIteration from None


class FakeCollection:
    """Implements the subset of AsyncIOMotorCollection used by MongoObjectIndex."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.docs: dict[str, dict[str, Any]] = {}
        self.indexes: list[list[tuple[str, int]]] = []
        self.update_calls: list[dict[str, Any]] = []
        self._ticks = 0

    def _server_now(self) -> datetime:
        self._ticks += 1
        return datetime(2025, 1, 1, tzinfo=UTC) + timedelta(seconds=self._ticks)

    async def create_index(self, keys: list[tuple[str, int]]) -> str:
        self.indexes.append(keys)
        return "_".join(f"{k}_{d}" for k, d in keys)

    async def find_one_and_update(
        self,
        filter: dict[str, Any],  # noqa: A002
        update: dict[str, Any],
        *,
        upsert: bool,
        return_document: ReturnDocument,
    ) -> dict[str, Any] | None:
        self.update_calls.append(
            {"filter": filter, "update": update, "upsert": upsert, "return_document": return_document},
        )
        key = filter["_id"]
        if key not in self.docs and not upsert:
            return None
        doc = dict(self.docs.get(key, {"_id": key}))
        doc.update(update.get("$set", {}))
        for field in update.get("$currentDate", {}):
            stamp = self._server_now()
            if stamp is not None:
                doc[field] = stamp
        self.docs[key] = doc
        return dict(doc)

    async def find_one(self, filter: dict[str, Any]) -> dict[str, Any] | None:  # noqa: A002
        doc = self.docs.get(filter["_id"])
        return dict(doc) if doc else None

    def find(self) -> FakeCursor:
        return FakeCursor([dict(d) for d in self.docs.values()])


class UnstampedCollection(FakeCollection):
    """A collection whose server ignores $currentDate."""

    def _server_now(self) -> datetime | None:  # type: ignore[override]
        return None


class FakeMotorClient:
    def __init__(self) -> None:
        self.databases: dict[str, dict[str, FakeCollection]] = {}

    def __getitem__(self, db_name: str) -> _FakeDatabase:
        return _FakeDatabase(self.databases.setdefault(db_name, {}))


class _FakeDatabase:
    def __init__(self, collections: dict[str, FakeCollection]) -> None:
        self._collections = collections

    def __getitem__(self, name: str) -> FakeCollection:
        return self._collections.setdefault(name, FakeCollection(name))


@pytest.fixture
def mongo_client() -> FakeMotorClient:
    return FakeMotorClient()


@pytest.fixture
def mongo_index(mongo_client: FakeMotorClient) -> MongoObjectIndex:
    settings = SimpleNamespace(mongo_db="object_index_test", mongo_uploads_collection="uploads")
    return MongoObjectIndex(client=mongo_client, settings=settings)  # type: ignore[arg-type]


def _record(identifier: str) -> ObjectRecord:
    return ObjectRecord(
        identifier=identifier,
        display_name=identifier.split("_", 1)[1],
        storage_path=f"images/{identifier}",
        content_type="text/plain",
        url=f"mock://bucket/images/{identifier}",
    )


class TestMongoObjectIndex:
    """Test MongoObjectIndex."""

    @pytest.mark.asyncio
    async def test_commit_stamps_server_time(self, mongo_index: MongoObjectIndex) -> None:
        committed = await mongo_index.commit(_record("1_a.txt"))

        assert committed.identifier == "1_a.txt"
        assert committed.created_at == datetime(2025, 1, 1, 0, 0, 1, tzinfo=UTC)

    @pytest.mark.asyncio
    async def test_commit_uses_upsert_and_current_date(self, mongo_index: MongoObjectIndex) -> None:
        await mongo_index.commit(_record("1_a.txt"))

        call = mongo_index.uploads.update_calls[0]
        assert call["filter"] == {"_id": "1_a.txt"}
        assert call["upsert"] is True
        assert call["return_document"] == ReturnDocument.AFTER
        assert call["update"]["$currentDate"] == {"createdAt": True}
        assert "createdAt" not in call["update"]["$set"]
        assert call["update"]["$set"]["storagePath"] == "images/1_a.txt"
        assert call["update"]["$set"]["contentType"] == "text/plain"

    @pytest.mark.asyncio
    async def test_get_by_id(self, mongo_index: MongoObjectIndex) -> None:
        committed = await mongo_index.commit(_record("1_a.txt"))

        assert await mongo_index.get_by_id("1_a.txt") == committed

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, mongo_index: MongoObjectIndex) -> None:
        assert await mongo_index.get_by_id("nonexistent") is None

    @pytest.mark.asyncio
    async def test_list_by_created_desc(self, mongo_index: MongoObjectIndex) -> None:
        for identifier in ("1_a.txt", "2_b.txt", "3_c.txt"):
            await mongo_index.commit(_record(identifier))

        records = await mongo_index.list_by_created_desc()

        assert [r.identifier for r in records] == ["3_c.txt", "2_b.txt", "1_a.txt"]

    @pytest.mark.asyncio
    async def test_list_empty(self, mongo_index: MongoObjectIndex) -> None:
        assert await mongo_index.list_by_created_desc() == []

    @pytest.mark.asyncio
    async def test_recommit_overwrites(self, mongo_index: MongoObjectIndex) -> None:
        await mongo_index.commit(_record("1_a.txt"))
        second = await mongo_index.commit(_record("1_a.txt"))

        records = await mongo_index.list_by_created_desc()
        assert records == [second]

    @pytest.mark.asyncio
    async def test_ensure_indexes(self, mongo_index: MongoObjectIndex) -> None:
        await mongo_index.ensure_indexes()

        assert mongo_index.uploads.indexes == [[("createdAt", DESCENDING)]]

    @pytest.mark.asyncio
    async def test_commit_without_server_stamp_fails(self, mongo_index: MongoObjectIndex) -> None:
        mongo_index.uploads = UnstampedCollection("uploads")

        with pytest.raises(InfrastructureError, match="createdAt"):
            await mongo_index.commit(_record("1_a.txt"))
