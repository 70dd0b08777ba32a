from __future__ import annotations

import secrets
from datetime import timedelta

from lagom import Container
from motor.motor_asyncio import AsyncIOMotorClient

from application.ports.blob_store import BlobStore
from application.ports.repositories.object_index import ObjectIndex
from application.use_cases.object_use_cases import (
    ListObjectsUseCase,
    ResolveObjectUrlUseCase,
    UploadObjectUseCase,
)
from domain.services.key_allocator import KeyAllocator
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from infrastructure.blob_stores.hmac_url_signer import HmacUrlSigner
from infrastructure.config import Settings, settings
from infrastructure.read_repositories.mongo_object_index import MongoObjectIndex


def create_container(app_settings: Settings = settings) -> Container:
    container = Container()

    container[Settings] = app_settings

    # Locally signed URLs (memory://, file://); GCS and S3 sign natively
    url_signer = HmacUrlSigner(
        secret=app_settings.url_signing_secret or secrets.token_hex(32),
        base_url=app_settings.public_base_url,
    )
    container[HmacUrlSigner] = url_signer

    # Blob storage (fsspec)
    container[BlobStore] = FsspecBlobStore(
        base_url=app_settings.blob_base_url,
        storage_options=app_settings.blob_storage_options,
        url_signer=url_signer,
        public_base_url=app_settings.blob_public_base_url,
    )

    # One MongoDB client per container; closed by the app lifespan
    container[AsyncIOMotorClient] = AsyncIOMotorClient(app_settings.mongo_uri, tz_aware=True)
    container[ObjectIndex] = MongoObjectIndex(
        client=container[AsyncIOMotorClient],
        settings=app_settings,
    )

    container[KeyAllocator] = KeyAllocator()

    # Register Use Cases
    container[UploadObjectUseCase] = lambda c: UploadObjectUseCase(
        object_index=c[ObjectIndex],
        blob_store=c[BlobStore],
        key_allocator=c[KeyAllocator],
        key_prefix=app_settings.blob_key_prefix,
    )
    container[ResolveObjectUrlUseCase] = lambda c: ResolveObjectUrlUseCase(
        object_index=c[ObjectIndex],
        blob_store=c[BlobStore],
        url_ttl=timedelta(seconds=app_settings.signed_url_ttl_seconds),
    )
    container[ListObjectsUseCase] = lambda c: ListObjectsUseCase(
        object_index=c[ObjectIndex],
    )

    return container
