# storefront/routers/upload.py
from fastapi import APIRouter, Depends, File, Query, UploadFile

from storefront.core.auth import require_admin
from storefront.schemas.common import ApiResponse, ok
from storefront.schemas.upload import (
    HostedImage,
    ImageTransform,
    TransformedImage,
    UploadedImage,
)
from storefront.services.upload_service import UploadService

router = APIRouter(
    prefix="/upload",
    tags=["Upload"],
    dependencies=[Depends(require_admin)],
)

service = UploadService()


@router.post("/image", response_model=ApiResponse[UploadedImage])
def upload_image(file: UploadFile = File(...)):
    """
    Upload one image to the asset host (admin only).

    - Accepts JPEG, PNG, WEBP, GIF up to 5MB.
    """
    uploaded = service.upload_image(file.content_type, file.file.read())
    return ok(uploaded, message="Image uploaded successfully")


@router.post("/images", response_model=ApiResponse[list[UploadedImage]])
def upload_images(files: list[UploadFile] = File(...)):
    """
    Upload up to 5 images at once (admin only).
    """
    payload = [(f.content_type, f.file.read()) for f in files]
    uploaded = service.upload_images(payload)
    return ok(uploaded, message=f"{len(uploaded)} images uploaded successfully")


@router.post("/transform", response_model=ApiResponse[TransformedImage])
def transform_image(payload: ImageTransform):
    """
    URL of a resized or recompressed variant of an uploaded image (admin only).
    """
    return ok(service.transform_image(payload), message="Transformation created")


@router.get("/images", response_model=ApiResponse[list[HostedImage]])
def list_images(
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """
    Images currently stored in the upload folder (admin only).
    """
    return ok(service.list_images(limit=limit, offset=offset))


@router.delete("/image/{public_id}", response_model=ApiResponse[None])
def delete_image(public_id: str):
    """
    Remove an image from the asset host (admin only).
    """
    service.delete_image(public_id)
    return ok(message="Image deleted successfully")
