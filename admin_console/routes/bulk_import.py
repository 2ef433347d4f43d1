from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile
from pydantic import ValidationError
from typing import Optional
import logging

from admin_console.dependencies.auth import admin_context
from admin_console.schemas.bulk_import import BulkImportResult, ImportErrors, ImportOptions
from admin_console.services.uploads import (
    check_import_kind,
    normalise_import_result,
    read_upload,
    validate_spreadsheet_file,
)
from admin_console.utils.responses import download

logger = logging.getLogger(__name__)

router = APIRouter()


async def _spreadsheet(kind: str, file: UploadFile) -> bytes:
    check_import_kind(kind)
    content = await read_upload(file)
    validate_spreadsheet_file(file.filename, file.content_type, len(content))
    return content


# -------- v1 --------

@router.post("/{kind}",
    summary="Bulk import",
    description="Upload a spreadsheet of students, teachers or classes.",
    response_model=BulkImportResult
)
async def bulk_import(kind: str, file: UploadFile = File(...), context=Depends(admin_context)):
    content = await _spreadsheet(kind, file)
    response = context["api"].bulk_import(kind, file.filename, content, file.content_type)
    result = normalise_import_result(response)
    logger.info(f"Imported {kind}: {result.successful} of {result.total} rows succeeded, {result.failed} failed")
    return result


@router.get("/{kind}/template")
def download_template(kind: str, context=Depends(admin_context)):
    check_import_kind(kind)
    content, media_type, filename = context["api"].download_import_template(kind)
    return download(content, filename or f"{kind}_template.xlsx", media_type)


# -------- v2 --------

@router.get("/v2/history")
def get_history(limit: int = 20, offset: int = 0, context=Depends(admin_context)):
    return context["api"].get_import_history(limit, offset)


@router.get("/v2/history/{history_id}")
def get_history_detail(history_id: int, context=Depends(admin_context)):
    return context["api"].get_import_history_detail(history_id)


# Spreadsheet of the rows a v2 import rejected
@router.post("/v2/errors")
def export_errors(kind: str, body: ImportErrors, context=Depends(admin_context)):
    check_import_kind(kind)
    content, media_type, filename = context["api"].export_import_errors(body.errors, kind)
    return download(content, filename or f"{kind}_import_errors.xlsx", media_type)


@router.get("/v2/{kind}/template")
def download_template_v2(kind: str, context=Depends(admin_context)):
    check_import_kind(kind)
    content, media_type, filename = context["api"].download_import_template_v2(kind)
    return download(content, filename or f"{kind}_template.xlsx", media_type)


# Dry run: the backend reports what an import would create, update or reject
@router.post("/v2/{kind}/validate")
async def validate_import(kind: str, file: UploadFile = File(...), context=Depends(admin_context)):
    content = await _spreadsheet(kind, file)
    return context["api"].validate_import_v2(kind, file.filename, content, file.content_type)


@router.post("/v2/{kind}")
async def import_v2(
    kind: str,
    file: UploadFile = File(...),
    mode: str = Form("upsert"),
    autoCreateClasses: bool = Form(True),
    useSheetNames: bool = Form(True),
    academicYear: Optional[str] = Form(None),
    context=Depends(admin_context),
):
    try:
        options = ImportOptions(
            mode=mode,
            autoCreateClasses=autoCreateClasses,
            useSheetNames=useSheetNames,
            academicYear=academicYear or None,
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.errors()[0]["msg"])

    content = await _spreadsheet(kind, file)
    result = context["api"].import_v2(kind, file.filename, content, file.content_type, options.as_form(kind))
    summary = (result or {}).get("summary") if isinstance(result, dict) else None
    logger.info(f"v2 import of {kind} ({options.mode}) finished: {summary}")
    return result
