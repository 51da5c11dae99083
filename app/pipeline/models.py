from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from app.pipeline.error_classifier import ErrorCategory


class FileStatus(str, Enum):
    """Lifecycle states of one uploaded file's pipeline."""

    QUEUED = "queued"
    EXTRACTING = "extracting"
    AI_EXTRACTING = "ai_extracting"
    NORMALIZING = "normalizing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (FileStatus.COMPLETED, FileStatus.FAILED)


class FileKind(str, Enum):
    """Extraction route for a file, derived from its MIME type."""

    PDF = "pdf"
    IMAGE = "image"
    SPREADSHEET = "spreadsheet"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class FileUpload:
    """A file as submitted by the caller."""

    name: str
    mime_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class UploadedFile:
    """Processing record for one submitted file (the pipeline job)."""

    id: str
    name: str
    size: int
    mime_type: str
    status: FileStatus = FileStatus.QUEUED
    progress: int = 0
    error: str | None = None
    error_detail: str | None = None
    error_category: ErrorCategory | None = None
    extracted_invoice_ids: list[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
