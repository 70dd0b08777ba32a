from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from datetime import timedelta


@dataclass(frozen=True)
class StoredBlob:
    key: str
    size_bytes: int
    sha256: str
    mime_type: str | None


class BlobStore(Protocol):
    def put_bytes(
        self,
        key: str,
        data: bytes,
        *,
        mime_type: str | None = None,
    ) -> StoredBlob:
        """Write ``data`` under ``key``.

        Returns only after every byte has been written; raises on any failure.
        """
        ...

    def get_bytes(self, key: str) -> bytes: ...
    def exists(self, key: str) -> bool: ...
    def public_url(self, key: str) -> str:
        """Durable, unsigned reference to the blob stored under ``key``."""
        ...

    def signed_read_url(self, key: str, expires_in: timedelta) -> str:
        """Issue a read-only URL for ``key`` that stops working after ``expires_in``."""
        ...
