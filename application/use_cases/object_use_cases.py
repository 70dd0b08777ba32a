import asyncio
from datetime import timedelta

import structlog
from returns.result import Failure, Result, Success

from application.dtos.errors import AppError
from application.dtos.object_dtos import UploadObjectRequest
from application.ports.blob_store import BlobStore, StoredBlob
from application.ports.repositories.object_index import ObjectIndex
from domain.exceptions import ValidationError
from domain.services.key_allocator import KeyAllocator
from domain.value_objects.object_record import ObjectRecord

logger = structlog.get_logger()


class UploadObjectUseCase:
    """Store a blob and commit the object record that points at it.

    The two writes are not atomic. The blob is always written first and the
    record is only committed once the blob write has returned, so every record a
    reader can see has a backing blob. A failed commit leaves an orphaned blob
    behind; it is never rolled back.
    """

    def __init__(
        self,
        object_index: ObjectIndex,
        blob_store: BlobStore,
        key_allocator: KeyAllocator,
        key_prefix: str = "images",
    ) -> None:
        self.object_index = object_index
        self.blob_store = blob_store
        self.key_allocator = key_allocator
        self.key_prefix = key_prefix.strip("/")

    def _storage_path(self, identifier: str) -> str:
        return f"{self.key_prefix}/{identifier}" if self.key_prefix else identifier

    async def execute(
        self,
        payload: bytes,
        request: UploadObjectRequest,
    ) -> Result[ObjectRecord, AppError]:
        """Upload ``payload`` and index it.

        Args:
            payload: Raw bytes of the uploaded file
            request: Display name and declared content type

        Returns:
            Result containing the committed record or an error

        """
        if not payload:
            return Failure(AppError("validation", "Uploaded file is empty"))

        try:
            identifier = self.key_allocator.allocate(request.display_name)
        except ValidationError as e:
            return Failure(AppError("validation", f"Validation error: {e!s}"))

        storage_path = self._storage_path(identifier)

        # Step 1: blob write must fully succeed before the record exists
        try:
            stored: StoredBlob = await asyncio.to_thread(
                self.blob_store.put_bytes,
                storage_path,
                payload,
                mime_type=request.content_type,
            )
        except Exception as e:
            logger.exception("blob_write_failed", storage_path=storage_path)
            return Failure(AppError("storage_error", f"Failed to upload blob: {e!s}"))

        record = ObjectRecord(
            identifier=identifier,
            display_name=request.display_name,
            storage_path=stored.key,
            content_type=request.content_type,
            url=self.blob_store.public_url(stored.key),
        )

        # Step 2: commit metadata
        try:
            committed = await self.object_index.commit(record)
        except Exception as e:
            logger.exception(
                "metadata_commit_failed",
                identifier=identifier,
                orphaned_blob=stored.key,
            )
            return Failure(AppError("storage_error", f"Failed to index object: {e!s}"))

        logger.info(
            "object_uploaded",
            identifier=identifier,
            storage_path=stored.key,
            size_bytes=stored.size_bytes,
            sha256=stored.sha256,
            content_type=request.content_type,
        )
        return Success(committed)


class ResolveObjectUrlUseCase:
    """Look up an object record and issue a signed read URL for its blob."""

    def __init__(
        self,
        object_index: ObjectIndex,
        blob_store: BlobStore,
        url_ttl: timedelta,
    ) -> None:
        self.object_index = object_index
        self.blob_store = blob_store
        self.url_ttl = url_ttl

    async def execute(self, identifier: str) -> Result[str, AppError]:
        if not identifier or not identifier.strip():
            return Failure(AppError("validation", "File name is required"))

        try:
            record = await self.object_index.get_by_id(identifier)
        except Exception as e:
            logger.exception("object_lookup_failed", identifier=identifier)
            return Failure(AppError("storage_error", f"Failed to look up object: {e!s}"))

        if record is None:
            logger.info("object_not_found", identifier=identifier)
            return Failure(AppError("not_found", "File not found"))

        try:
            url = await asyncio.to_thread(
                self.blob_store.signed_read_url,
                record.storage_path,
                self.url_ttl,
            )
        except Exception as e:
            logger.exception("signed_url_failed", storage_path=record.storage_path)
            return Failure(AppError("storage_error", f"Failed to sign URL: {e!s}"))

        logger.info("signed_url_issued", identifier=identifier, storage_path=record.storage_path)
        return Success(url)


class ListObjectsUseCase:
    """List every object record, newest first."""

    def __init__(self, object_index: ObjectIndex) -> None:
        self.object_index = object_index

    async def execute(self) -> Result[list[ObjectRecord], AppError]:
        try:
            records = await self.object_index.list_by_created_desc()
        except Exception as e:
            logger.exception("object_listing_failed")
            return Failure(AppError("storage_error", f"Failed to list objects: {e!s}"))

        logger.info("objects_listed", count=len(records))
        return Success(records)
