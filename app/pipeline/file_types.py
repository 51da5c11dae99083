from app.pipeline.exceptions import UploadRejectedError
from app.pipeline.models import FileKind

ALLOWED_MIME_TYPES: frozenset[str] = frozenset({
    "application/pdf",
    "image/png",
    "image/jpeg",
    "image/jpg",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
})

MAX_FILE_SIZE_BYTES = 10 * 1024 * 1024


def _base_mime_type(mime_type: str) -> str:
    return mime_type.split(";", 1)[0].strip().lower()


def classify_file_type(mime_type: str) -> FileKind:
    """Map a MIME type to the extraction route that handles it.

    Unknown types map to FileKind.UNSUPPORTED; nothing is guessed.
    """
    base = _base_mime_type(mime_type)
    if base == "application/pdf":
        return FileKind.PDF
    if base.startswith("image/"):
        return FileKind.IMAGE
    if "sheet" in base or "excel" in base:
        return FileKind.SPREADSHEET
    return FileKind.UNSUPPORTED


def validate_upload(
    mime_type: str,
    size: int,
    max_size_bytes: int = MAX_FILE_SIZE_BYTES,
) -> None:
    """Check an upload against the accepted types and size limit.

    Raises:
        UploadRejectedError: if the type is not accepted or the file is too large.
    """
    if _base_mime_type(mime_type) not in ALLOWED_MIME_TYPES:
        raise UploadRejectedError(
            "Invalid file type. Please upload PDF, Excel, or Image files."
        )
    if size > max_size_bytes:
        limit_mb = max_size_bytes // (1024 * 1024)
        raise UploadRejectedError(f"File too large. Maximum size is {limit_mb}MB.")
