"""HMAC-SHA256 signed read URLs for blob backends that cannot sign natively.

The canonical string joins ``key``, ``expires`` and ``nonce`` with newlines. Nonces
are restricted to ``token_urlsafe`` characters, so no field can absorb another. The
signature is the hex digest of HMAC-SHA256 over it with the shared secret. URLs
point at the service's own ``/blobs/{key}`` route, which verifies them before
streaming the blob.
"""

from __future__ import annotations

import hashlib
import hmac
import re
import secrets
from datetime import UTC, datetime
from urllib.parse import quote, urlencode

BLOB_ROUTE_PREFIX = "/blobs"

_NONCE_PATTERN = re.compile(r"[A-Za-z0-9_-]{8,64}")


def compute_signature(secret: str, key: str, expires: int, nonce: str) -> str:
    canonical = f"{key}\n{expires}\n{nonce}".encode()
    return hmac.new(
        key=secret.encode("utf-8"),
        msg=canonical,
        digestmod=hashlib.sha256,
    ).hexdigest()


class HmacUrlSigner:
    def __init__(self, secret: str, base_url: str) -> None:
        if not secret:
            msg = "URL signing secret cannot be empty"
            raise ValueError(msg)
        self._secret = secret
        self.base_url = base_url.rstrip("/")

    def sign(self, key: str, expires_at: datetime) -> str:
        """Build a signed read URL for ``key`` valid until ``expires_at``.

        A fresh random nonce goes into every URL, so two URLs for the same key
        and expiry never compare equal.
        """
        expires = int(expires_at.timestamp())
        nonce = secrets.token_urlsafe(12)
        signature = compute_signature(self._secret, key, expires, nonce)
        query = urlencode({"expires": expires, "nonce": nonce, "signature": signature})
        return f"{self.base_url}{BLOB_ROUTE_PREFIX}/{quote(key)}?{query}"

    def verify(
        self,
        key: str,
        expires: int,
        nonce: str,
        signature: str,
        now: datetime | None = None,
    ) -> bool:
        now = now or datetime.now(tz=UTC)
        if not _NONCE_PATTERN.fullmatch(nonce):
            return False
        if expires <= int(now.timestamp()):
            return False
        expected = compute_signature(self._secret, key, expires, nonce)
        return hmac.compare_digest(expected, signature)
