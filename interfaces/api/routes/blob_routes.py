import asyncio
import mimetypes
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from lagom import Container

from application.ports.blob_store import BlobStore
from infrastructure.blob_stores.hmac_url_signer import BLOB_ROUTE_PREFIX, HmacUrlSigner
from interfaces.dependencies import get_container

logger = structlog.get_logger()

router = APIRouter(prefix=BLOB_ROUTE_PREFIX, tags=["blobs"])


@router.get("/{key:path}", status_code=status.HTTP_200_OK)
async def download_blob(
    key: str,
    container: Annotated[Container, Depends(get_container)],
    expires: Annotated[int | None, Query()] = None,
    nonce: Annotated[str | None, Query()] = None,
    signature: Annotated[str | None, Query()] = None,
) -> Response:
    """Serve a blob through a locally signed URL.

    Returns:
        200 OK: Blob bytes
        403 Forbidden: Missing, invalid or expired signature
        404 Not Found: No blob under the key

    """
    signer = container[HmacUrlSigner]
    if (
        expires is None
        or not nonce
        or not signature
        or not signer.verify(key, expires, nonce, signature)
    ):
        logger.info("blob_download_rejected", key=key)
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid or expired signature",
        )

    blob_store = container[BlobStore]
    try:
        data = await asyncio.to_thread(blob_store.get_bytes, key)
    except FileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="File not found",
        ) from None
    except Exception as exc:
        logger.exception("blob_download_failed", key=key)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error",
        ) from exc

    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
