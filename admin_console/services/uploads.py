import logging
import os
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, UploadFile

from admin_console.schemas.bulk_import import BulkImportResult

logger = logging.getLogger(__name__)

MB = 1024 * 1024

IMAGE_TYPES = ["image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"]
SPREADSHEET_TYPES = [
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "text/csv",
]
SPREADSHEET_EXTENSIONS = [".xls", ".xlsx", ".csv"]

IMPORT_KINDS = ("students", "teachers", "classes")


def validate_image_file(filename: str, content_type: Optional[str], size: int, max_size_mb: int = 5):
    if content_type not in IMAGE_TYPES:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Please upload an image file (JPEG, PNG, GIF, or WebP)."
        )
    if size > max_size_mb * MB:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {max_size_mb}MB limit. Please choose a smaller file."
        )


def validate_spreadsheet_file(filename: str, content_type: Optional[str], size: int, max_size_mb: int = 10):
    extension = os.path.splitext(filename or "")[1].lower()
    if content_type not in SPREADSHEET_TYPES and extension not in SPREADSHEET_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail="Invalid file type. Please upload an Excel file (.xls, .xlsx) or CSV file."
        )
    if size > max_size_mb * MB:
        raise HTTPException(
            status_code=400,
            detail=f"File size exceeds {max_size_mb}MB limit. Please choose a smaller file."
        )
    if size == 0:
        raise HTTPException(status_code=400, detail="File is empty. Please choose a valid file.")


def check_import_kind(kind: str):
    if kind not in IMPORT_KINDS:
        raise HTTPException(status_code=404, detail=f"Unknown import type: {kind}")


async def read_upload(file: UploadFile) -> bytes:
    content = await file.read()
    logger.info(f"Read {len(content)} bytes from uploaded file {file.filename}")
    return content


def normalise_import_result(response: Any) -> BulkImportResult:
    """The v1 endpoints nest their tally under ``results``."""
    results: Dict[str, Any] = {}
    if isinstance(response, dict):
        results = response.get("results") or response
    errors: List[Any] = results.get("errors") or []
    return BulkImportResult(
        total=results.get("total") or 0,
        successful=results.get("successful") or 0,
        failed=results.get("failed") or 0,
        errors=errors,
    )
