"""Shared test fixtures and configuration."""

from __future__ import annotations

from collections.abc import Iterator
from uuid import uuid4

import fsspec
import pytest

from domain.services.key_allocator import KeyAllocator
from domain.value_objects.object_record import ObjectRecord
from infrastructure.blob_stores.fsspec_blob_store import FsspecBlobStore
from infrastructure.blob_stores.hmac_url_signer import HmacUrlSigner
from tests.mocks import MockBlobStore, MockObjectIndex

SIGNING_SECRET = "test-signing-secret"  # noqa: S105


@pytest.fixture
def object_index() -> MockObjectIndex:
    return MockObjectIndex()


@pytest.fixture
def blob_store() -> MockBlobStore:
    return MockBlobStore()


@pytest.fixture
def key_allocator() -> KeyAllocator:
    """KeyAllocator whose clock advances one millisecond per call."""
    ticks = iter(range(1_700_000_000_000_000_000, 1_800_000_000_000_000_000, 1_000_000))
    return KeyAllocator(clock_ns=lambda: next(ticks))


@pytest.fixture
def url_signer() -> HmacUrlSigner:
    return HmacUrlSigner(secret=SIGNING_SECRET, base_url="http://testserver")


@pytest.fixture
def memory_blob_store(url_signer: HmacUrlSigner) -> Iterator[FsspecBlobStore]:
    """Real FsspecBlobStore on an isolated memory:// root."""
    root = f"memory://blobs-{uuid4().hex}"
    yield FsspecBlobStore(base_url=root, url_signer=url_signer)

    fs, path = fsspec.core.url_to_fs(root)
    if fs.exists(path):
        fs.rm(path, recursive=True)


@pytest.fixture
def sample_record() -> ObjectRecord:
    """Create an uncommitted ObjectRecord."""
    return ObjectRecord(
        identifier="1700000000000000_a.txt",
        display_name="a.txt",
        storage_path="images/1700000000000000_a.txt",
        content_type="text/plain",
        url="mock://bucket/images/1700000000000000_a.txt",
    )
