# storefront/schemas/upload.py
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel, Field


class UploadedImage(SQLModel):
    """
    URL/id pair returned by the asset host.

    image_public_id is the file name inside the upload folder and is what
    DELETE /upload/image/{public_id} expects.
    """

    image_url: str
    image_public_id: str


class HostedImage(UploadedImage):
    size: int | None = None
    created_at: str | None = None


class ImageTransform(SQLModel):
    """
    Render options for an already uploaded image.
    """

    model_config = ConfigDict(extra="forbid")

    public_id: str = Field(min_length=1)
    width: int | None = Field(default=None, ge=1, le=2500)
    height: int | None = Field(default=None, ge=1, le=2500)
    resize: Literal["cover", "contain", "fill"] | None = None
    quality: int | None = Field(default=None, ge=20, le=100)


class TransformedImage(SQLModel):
    original_public_id: str
    transformed_url: str
