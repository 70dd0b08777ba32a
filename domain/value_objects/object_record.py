from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class ObjectRecord(BaseModel):
    """Metadata index entry describing one stored blob.

    Records are immutable once built. ``created_at`` stays ``None`` until the
    metadata index commits the record and stamps it with the commit time.
    """

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    identifier: str = Field(..., description="Allocated object key, primary key of the index")
    display_name: str = Field(..., description="Original client-supplied name")
    storage_path: str = Field(..., description="Location of the blob in the blob store")
    content_type: str = Field(..., description="MIME type declared by the uploader")
    url: str = Field(..., description="Durable unsigned reference to the blob")
    created_at: datetime | None = Field(
        None,
        description="Server-assigned commit time, used for listing order",
    )

    @field_validator("identifier", "display_name", "storage_path")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            msg = "Value cannot be blank or empty"
            raise ValueError(msg)
        return v

    @property
    def is_committed(self) -> bool:
        return self.created_at is not None

    def committed_at(self, created_at: datetime) -> "ObjectRecord":
        """Return a copy of this record stamped with its commit time."""
        return self.model_copy(update={"created_at": created_at})
