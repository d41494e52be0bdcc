# app/core/storage.py

import time
import uuid
from supabase import create_client, Client
from fastapi import UploadFile
from loguru import logger

from app.core.config import settings
from app.core.constants import ALLOWED_DOCUMENT_MIME_TYPES, MAX_DOCUMENT_SIZE
from app.core.exceptions import PersistenceError, PortalError

# Init Client (Graceful Failure)
try:
    supabase: Client = (
        create_client(settings.SUPABASE_URL, settings.SUPABASE_KEY)
        if settings.SUPABASE_URL and settings.SUPABASE_KEY
        else None
    )
except Exception as e:
    logger.warning(f"Supabase Init Failed: {e}")
    supabase = None

BUCKET_NAME = settings.DOCUMENTS_BUCKET


def build_document_path(user_id: uuid.UUID, document_type: str, extension: str) -> tuple[str, str]:
    """
    Returns (file_name, storage_path).
    Layout: <document_type>s/<user_id>_<document_type>_<epoch_ms>.<ext>
    The candidate's original filename is ignored.
    """
    file_name = f"{user_id}_{document_type}_{int(time.time() * 1000)}.{extension}"
    return file_name, f"{document_type}s/{file_name}"


async def read_document_upload(file: UploadFile) -> tuple[bytes, str]:
    """
    Validates type and size of an uploaded document.
    Returns the file bytes and the extension to store it under.
    """
    extension = ALLOWED_DOCUMENT_MIME_TYPES.get(file.content_type or "")
    if extension is None:
        raise PortalError("Only JPEG, PNG or PDF files are allowed.", title="Invalid File")

    # Documents are small (photo/signature), reading into memory is fine
    file_content = await file.read()

    if not file_content:
        raise PortalError("File is required", title="Invalid File")

    if len(file_content) > MAX_DOCUMENT_SIZE:
        raise PortalError(
            f"File too large. Maximum size is {MAX_DOCUMENT_SIZE // (1024*1024)}MB.",
            title="Invalid File",
        )

    await file.seek(0)
    return file_content, extension


def upload_document(storage_path: str, content: bytes, content_type: str) -> str:
    """
    Uploads a candidate document to Supabase Storage and returns its public URL.
    """
    if not supabase:
        logger.error("Supabase credentials missing in env vars.")
        raise PersistenceError("Storage service unavailable.")

    try:
        supabase.storage.from_(BUCKET_NAME).upload(
            path=storage_path,
            file=content,
            file_options={"content-type": content_type, "upsert": "true"}
        )
    except Exception as e:
        logger.error(f"Storage Upload Error: {e}")
        raise PersistenceError("Failed to upload document to cloud storage.")

    public_url = supabase.storage.from_(BUCKET_NAME).get_public_url(storage_path)

    # Handle different Supabase Python SDK response versions
    if isinstance(public_url, dict):
        return public_url.get("publicURL") or public_url.get("publicUrl") or ""
    return str(public_url)


def remove_document(storage_path: str) -> None:
    if not storage_path or not supabase:
        return

    try:
        supabase.storage.from_(BUCKET_NAME).remove([storage_path])
    except Exception as e:
        # the metadata row is already gone; an orphaned object is harmless
        logger.warning(f"Failed to remove {storage_path} from storage: {e}")
