import logging
import os
import random
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import FormData, UploadFile

from app.constants.constants import (
    ALLOWED_DOCUMENT_EXTENSIONS,
    ALLOWED_DOCUMENT_TYPES,
    RESUME_FIELD,
)
from app.core.exceptions import FileRejected

logger = logging.getLogger(__name__)


@dataclass
class StoredUpload:
    """A resume written to the upload directory for the lifetime of one request."""
    path: Path
    original_filename: str
    content_type: str


def extract_resume(form: FormData, field_name: str = RESUME_FIELD) -> Optional[UploadFile]:
    """
    Pick the single resume file out of a parsed form.

    Returns None when no file was attached. An empty file input posts a part
    without a filename, which counts as no file.
    """
    resume = None
    for key, value in form.multi_items():
        if not isinstance(value, UploadFile):
            continue
        if not value.filename:
            continue
        if key != field_name:
            raise FileRejected(f"Unexpected file field: {key}")
        if resume is not None:
            raise FileRejected("Only one file may be uploaded")
        resume = value
    return resume


def is_allowed_document(filename: str, content_type: Optional[str]) -> bool:
    """Both the extension and the declared content type must be allowed."""
    file_ext = os.path.splitext(filename)[1].lower()
    is_valid_ext = file_ext in ALLOWED_DOCUMENT_EXTENSIONS
    is_valid_type = content_type in ALLOWED_DOCUMENT_TYPES if content_type else False
    return is_valid_ext and is_valid_type


def build_upload_name(filename: str, field_name: str = RESUME_FIELD) -> str:
    """resume-<epoch ms>-<random int><original extension>"""
    unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
    return f"{field_name}-{unique_suffix}{os.path.splitext(filename)[1]}"


async def store_resume(file: UploadFile, upload_dir: str, max_size: int) -> StoredUpload:
    """
    Validate the resume and write it to the upload directory.

    Raises FileRejected for a disallowed type or a file over max_size. Nothing
    is written to disk unless every check passes.
    """
    logger.info(f"Resume upload: {file.filename} ({file.content_type})")

    if not is_allowed_document(file.filename, file.content_type):
        logger.warning(f"Rejected upload {file.filename}: content type {file.content_type}")
        raise FileRejected("Only PDF and Word documents are allowed")

    # read at most one byte past the cap
    content = await file.read(max_size + 1)
    if len(content) > max_size:
        logger.warning(f"Rejected upload {file.filename}: over {max_size} bytes")
        raise FileRejected(f"File too large. Maximum size is {max_size // (1024 * 1024)}MB.")

    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / build_upload_name(file.filename)

    await run_in_threadpool(path.write_bytes, content)
    logger.info(f"Resume stored at {path} ({len(content)} bytes)")

    return StoredUpload(
        path=path,
        original_filename=file.filename,
        content_type=file.content_type,
    )


def cleanup_file(path: Optional[Path]) -> None:
    """Delete an uploaded file if it is still on disk. Failures are only logged."""
    if path is None:
        return
    try:
        if os.path.exists(path):
            os.remove(path)
            logger.info(f"File cleaned up: {path}")
    except OSError as e:
        logger.error(f"Error deleting file {path}: {str(e)}")
