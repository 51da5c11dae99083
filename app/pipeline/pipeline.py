from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import ClassVar

from app.entities.models import NormalizedEntities
from app.pipeline.models import FileKind, FileStatus, UploadedFile
from app.pipeline.progress import ProgressChannel
from app.validation.models import SanitizedDocument, ValidationReport


@dataclass(slots=True)
class PipelineContext:
    file: UploadedFile
    content: bytes
    progress: ProgressChannel
    kind: FileKind = FileKind.UNSUPPORTED
    text: str = ""
    structured: dict[str, object] = field(default_factory=dict)
    report: ValidationReport | None = None
    sanitized: SanitizedDocument | None = None
    entities: NormalizedEntities | None = None


class PipelineStep(ABC):
    """One stage of a file's pipeline.

    ``stage`` is the status the file must be in while the step runs (None
    keeps the current status). ``progress_on_start`` and
    ``progress_on_complete`` are reported around ``run``.
    """

    stage: ClassVar[FileStatus | None] = None
    progress_on_start: ClassVar[int | None] = None
    progress_on_complete: ClassVar[int | None] = None

    @abstractmethod
    async def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
