# storefront/core/storage_utils.py
import uuid
from typing import Any

from storefront.core.config import get_settings
from storefront.core.supabase_client import supabase_admin

settings = get_settings()


def _bucket():
    # Resolved per call so the app can start without storage credentials.
    return supabase_admin().storage.from_(settings.STORAGE_BUCKET)


def upload_to_storage(path: str, file_bytes: bytes, content_type: str) -> str:
    """
    Upload raw bytes to Supabase Storage and return a public URL.

    Args:
        path: Full object path inside the bucket.
              Example: "products/<uuid>.png"
        file_bytes: File content in bytes.
        content_type: MIME type stored with the object.

    Returns:
        Public URL to the uploaded file.

    Raises:
        Any exception raised by Supabase client if upload fails.
    """
    bucket = _bucket()
    bucket.upload(path, file_bytes, {"content-type": content_type, "upsert": "true"})
    return bucket.get_public_url(path)


def delete_from_storage(path: str) -> bool:
    """
    Delete a file from Supabase Storage by its object path.

    Returns:
        True if the host reported the object as removed.
    """
    # Supabase Python client expects a list of paths.
    removed = _bucket().remove([path])
    return bool(removed)


def list_storage_folder(folder: str, limit: int = 100, offset: int = 0) -> list[dict[str, Any]]:
    """
    List objects directly under `folder`, newest first.

    Each entry carries the object path, public URL, size and creation time.
    """
    bucket = _bucket()
    entries = bucket.list(
        folder,
        {
            "limit": limit,
            "offset": offset,
            "sortBy": {"column": "created_at", "order": "desc"},
        },
    )
    files: list[dict[str, Any]] = []
    for entry in entries:
        # Sub-folders come back without an id
        if not entry.get("id"):
            continue
        path = f"{folder}/{entry['name']}"
        metadata = entry.get("metadata") or {}
        files.append(
            {
                "path": path,
                "url": bucket.get_public_url(path),
                "size": metadata.get("size"),
                "created_at": entry.get("created_at"),
            }
        )
    return files


def generate_filename(ext: str) -> str:
    """
    Generate a random filename using UUID4.

    Args:
        ext: File extension without dot (e.g. "png", "jpg")

    Returns:
        A filename like "<uuid4>.png"
    """
    return f"{uuid.uuid4()}.{ext}"


def transformed_url(path: str, transform: dict[str, Any]) -> str:
    """
    Public URL that serves `path` through the storage image renderer.

    Args:
        path: Full object path inside the bucket.
        transform: Render options, e.g. {"width": 400, "resize": "cover"}.
    """
    return _bucket().get_public_url(path, {"transform": transform})
