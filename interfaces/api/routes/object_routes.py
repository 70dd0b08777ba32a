from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from lagom import Container

from application.dtos.object_dtos import (
    DEFAULT_CONTENT_TYPE,
    SignedUrlResponse,
    UploadObjectRequest,
    UploadObjectResponse,
)
from application.use_cases.object_use_cases import (
    ListObjectsUseCase,
    ResolveObjectUrlUseCase,
    UploadObjectUseCase,
)
from domain.value_objects.object_record import ObjectRecord
from interfaces.api.middleware import handle_use_case_errors
from interfaces.dependencies import get_container

logger = structlog.get_logger()

router = APIRouter(tags=["objects"])


@router.post("/uploadImage", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def upload_image(
    container: Annotated[Container, Depends(get_container)],
    image: Annotated[UploadFile | None, File()] = None,
) -> UploadObjectResponse:
    """Store the ``image`` multipart part and index it.

    Returns:
        200 OK: Blob stored and record committed
        400 Bad Request: No file, empty file or empty filename
        405 Method Not Allowed: Anything but POST
        500 Internal Server Error: Blob store or metadata index failure

    """
    if image is None or not image.filename:
        logger.info("upload_rejected_no_file")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error uploading file or no file provided.",
        )

    payload = await image.read()
    if not payload:
        logger.info("upload_rejected_empty_file", filename=image.filename)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Error uploading file or no file provided.",
        )

    use_case = container[UploadObjectUseCase]
    result = await use_case.execute(
        payload,
        UploadObjectRequest(
            display_name=image.filename,
            content_type=image.content_type or DEFAULT_CONTENT_TYPE,
        ),
    )
    return result.map(
        lambda record: UploadObjectResponse(url=record.url, identifier=record.identifier),
    )


@router.get("/getImageUrl", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def get_image_url(
    container: Annotated[Container, Depends(get_container)],
    file_name: Annotated[str | None, Query(alias="fileName")] = None,
) -> SignedUrlResponse:
    """Issue a time-limited signed read URL for an uploaded object."""
    use_case = container[ResolveObjectUrlUseCase]
    result = await use_case.execute(file_name or "")
    return result.map(lambda url: SignedUrlResponse(url=url))


@router.get("/listUploads", status_code=status.HTTP_200_OK)
@handle_use_case_errors
async def list_uploads(
    container: Annotated[Container, Depends(get_container)],
) -> list[ObjectRecord]:
    """List all uploaded objects, most recent first."""
    use_case = container[ListObjectsUseCase]
    return await use_case.execute()
