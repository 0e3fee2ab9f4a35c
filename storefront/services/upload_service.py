# storefront/services/upload_service.py
import logging

from storefront.core.config import get_settings
from storefront.core.errors import BadRequest, ImageNotFound, InvalidImage, PayloadTooLarge
from storefront.core.storage_utils import (
    delete_from_storage,
    generate_filename,
    list_storage_folder,
    transformed_url,
    upload_to_storage,
)
from storefront.schemas.upload import (
    HostedImage,
    ImageTransform,
    TransformedImage,
    UploadedImage,
)

logger = logging.getLogger(__name__)

settings = get_settings()

# --- Image config ---

MAX_IMAGE_BYTES = 5 * 1024 * 1024  # 5MB per image
MAX_FILES_PER_UPLOAD = 5

ALLOWED_IMAGE_CONTENT_TYPES: dict[str, str] = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}


def object_path(public_id: str) -> str:
    """
    Bucket path of an image given its public id (the file name).
    """
    return f"{settings.STORAGE_FOLDER}/{public_id}"


class UploadService:
    """
    Proxies image bytes to the asset host.

    An image's public id is its file name inside STORAGE_FOLDER; it is
    what clients store on a product and later pass back for deletion.
    """

    @staticmethod
    def _validate_and_get_ext(content_type: str | None, file_bytes: bytes) -> str:
        if content_type not in ALLOWED_IMAGE_CONTENT_TYPES:
            raise InvalidImage("Only image files are allowed (JPEG, PNG, WEBP, GIF)")

        if len(file_bytes) > MAX_IMAGE_BYTES:
            raise PayloadTooLarge()

        return ALLOWED_IMAGE_CONTENT_TYPES[content_type]

    def upload_image(self, content_type: str | None, file_bytes: bytes) -> UploadedImage:
        ext = self._validate_and_get_ext(content_type, file_bytes)
        public_id = generate_filename(ext)
        url = upload_to_storage(object_path(public_id), file_bytes, content_type)
        logger.info("Uploaded image %s", public_id)
        return UploadedImage(image_url=url, image_public_id=public_id)

    def upload_images(self, files: list[tuple[str | None, bytes]]) -> list[UploadedImage]:
        """
        Upload several images.

        Args:
            files: list of (content_type, file_bytes)

        Every file is validated before the first one is sent.
        """
        if not files:
            raise BadRequest("No files uploaded")
        if len(files) > MAX_FILES_PER_UPLOAD:
            raise BadRequest(f"At most {MAX_FILES_PER_UPLOAD} files per upload")

        for content_type, file_bytes in files:
            self._validate_and_get_ext(content_type, file_bytes)

        return [self.upload_image(content_type, file_bytes) for content_type, file_bytes in files]

    def list_images(self, limit: int = 100, offset: int = 0) -> list[HostedImage]:
        entries = list_storage_folder(settings.STORAGE_FOLDER, limit=limit, offset=offset)
        return [
            HostedImage(
                image_url=entry["url"],
                image_public_id=entry["path"].rsplit("/", 1)[-1],
                size=entry["size"],
                created_at=entry["created_at"],
            )
            for entry in entries
        ]

    def delete_image(self, public_id: str) -> None:
        if not delete_from_storage(object_path(public_id)):
            raise ImageNotFound()
        logger.info("Deleted image %s", public_id)

    def transform_image(self, payload: ImageTransform) -> TransformedImage:
        """
        Build a resized / recompressed URL for an uploaded image.

        Nothing is re-uploaded; the asset host renders the variant on request.
        """
        options = payload.model_dump(exclude={"public_id"}, exclude_none=True)
        if not options:
            raise BadRequest("At least one transformation option is required")

        url = transformed_url(object_path(payload.public_id), options)
        return TransformedImage(original_public_id=payload.public_id, transformed_url=url)
