from __future__ import annotations

import hashlib
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

import fsspec
import structlog

from application.ports.blob_store import BlobStore, StoredBlob
from domain.exceptions import InfrastructureError

if TYPE_CHECKING:
    from infrastructure.blob_stores.hmac_url_signer import HmacUrlSigner

logger = structlog.get_logger()

_GCS_PROTOCOLS = {"gs", "gcs"}
_S3_PROTOCOLS = {"s3", "s3a"}


class FsspecBlobStore(BlobStore):
    def __init__(
        self,
        base_url: str,
        *,
        storage_options: dict | None = None,
        url_signer: HmacUrlSigner | None = None,
        public_base_url: str | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.storage_options = storage_options or {}
        self.url_signer = url_signer
        self.public_base_url = public_base_url.rstrip("/") if public_base_url else None
        self.protocol = fsspec.utils.get_protocol(self.base_url)

    def _url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def _open_kwargs(self, mime_type: str | None) -> dict[str, Any]:
        """Per-file ``fs.open`` kwargs carrying the content type.

        These must not go into the storage options, where gcsfs ignores them
        and fsspec would cache one filesystem per distinct MIME type.
        """
        if not mime_type:
            return {}
        if self.protocol in _GCS_PROTOCOLS:
            return {"content_type": mime_type}
        if self.protocol in _S3_PROTOCOLS:
            # s3fs merges unknown open kwargs into the PutObject call
            return {"ContentType": mime_type}
        return {}

    def put_bytes(self, key: str, data: bytes, *, mime_type: str | None = None) -> StoredBlob:
        fs, path = fsspec.core.url_to_fs(self._url(key), **self.storage_options)
        fs.makedirs(fs._parent(path), exist_ok=True)  # noqa: SLF001
        with fs.open(path, "wb", **self._open_kwargs(mime_type)) as out:
            out.write(data)

        return StoredBlob(
            key=key,
            size_bytes=len(data),
            sha256=hashlib.sha256(data).hexdigest(),
            mime_type=mime_type,
        )

    def get_bytes(self, key: str) -> bytes:
        with fsspec.open(self._url(key), "rb", **self.storage_options) as f:
            return f.read()

    def exists(self, key: str) -> bool:
        fs, path = fsspec.core.url_to_fs(self._url(key), **self.storage_options)
        return fs.exists(path)

    def public_url(self, key: str) -> str:
        if self.public_base_url:
            return f"{self.public_base_url}/{key}"
        return self._url(key)

    def signed_read_url(self, key: str, expires_in: timedelta) -> str:
        """Sign with the backend when it can (GCS, S3), else with the HMAC signer."""
        fs, path = fsspec.core.url_to_fs(self._url(key), **self.storage_options)
        try:
            return fs.sign(path, expiration=int(expires_in.total_seconds()))
        except NotImplementedError:
            if self.url_signer is None:
                msg = f"Blob backend '{self.protocol}' cannot sign URLs and no signer is configured"
                raise InfrastructureError(msg) from None

        logger.debug("blob_url_signed_locally", key=key, protocol=self.protocol)
        return self.url_signer.sign(key, datetime.now(tz=UTC) + expires_in)
