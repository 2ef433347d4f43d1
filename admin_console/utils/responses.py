from fastapi import Response

from admin_console.services.exports import CSV_MEDIA_TYPE, XLSX_MEDIA_TYPE


def download(content: bytes, filename: str, media_type: str) -> Response:
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


def csv_download(content: bytes, filename: str) -> Response:
    return download(content, filename, CSV_MEDIA_TYPE)


def xlsx_download(content: bytes, filename: str) -> Response:
    return download(content, filename, XLSX_MEDIA_TYPE)
