from pydantic import BaseModel, Field

DEFAULT_CONTENT_TYPE = "application/octet-stream"


class UploadObjectRequest(BaseModel):
    display_name: str = Field(..., description="Original filename supplied by the client")
    content_type: str = Field(
        DEFAULT_CONTENT_TYPE,
        description="MIME type declared by the uploader",
    )


class UploadObjectResponse(BaseModel):
    """Response DTO returned after a successful upload."""

    message: str = Field("Upload successful!", description="Human readable status")
    url: str = Field(..., description="Durable unsigned reference to the stored blob")
    identifier: str = Field(..., description="Identifier to pass to the resolve endpoint")


class SignedUrlResponse(BaseModel):
    url: str = Field(..., description="Time-limited signed read URL")
