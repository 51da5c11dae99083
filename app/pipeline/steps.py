import asyncio

from app.entities.normalizer import EntityNormalizer
from app.entities.repository import EntityRepository
from app.extraction.service import TextExtractionService
from app.logging.logger import Log
from app.pipeline.exceptions import (
    EmptyExtractionError,
    ResponseValidationError,
    UnsupportedFileTypeError,
)
from app.pipeline.file_types import classify_file_type
from app.pipeline.models import FileKind, FileStatus
from app.pipeline.pipeline import PipelineContext, PipelineStep
from app.pipeline.progress import ProgressBand
from app.structuring.base import BaseStructurer
from app.validation.sanitizer import sanitize_document
from app.validation.validator import validate_document


class ClassifyStep(PipelineStep):
    progress_on_complete = 0

    async def run(self, context: PipelineContext) -> PipelineContext:
        kind = classify_file_type(context.file.mime_type)
        if kind is FileKind.UNSUPPORTED:
            raise UnsupportedFileTypeError(
                f"Unsupported file type: {context.file.mime_type or '<empty>'}"
            )
        context.kind = kind
        Log.info("Classified file", file_id=context.file.id, kind=kind.value)
        return context


class ExtractTextStep(PipelineStep):
    stage = FileStatus.EXTRACTING
    progress_on_start = 10
    progress_on_complete = 60

    BANDS: dict[FileKind, ProgressBand] = {
        FileKind.IMAGE: ProgressBand(30, 60),
    }
    DEFAULT_BAND = ProgressBand(10, 60)

    def __init__(self, extraction_service: TextExtractionService) -> None:
        self._extraction_service = extraction_service

    async def run(self, context: PipelineContext) -> PipelineContext:
        band = self.BANDS.get(context.kind, self.DEFAULT_BAND)

        def on_progress(fraction: float) -> None:
            context.progress.report(band.scale(fraction))

        text = await self._extraction_service.extract(context.content, context.kind, on_progress)
        if not text.strip():
            raise EmptyExtractionError(f"No text extracted from {context.file.name}")
        context.text = text
        Log.info(
            f"Extracted {len(text)} chars",
            file_id=context.file.id,
            kind=context.kind.value,
        )
        return context


class StructureStep(PipelineStep):
    stage = FileStatus.AI_EXTRACTING
    progress_on_complete = 70

    def __init__(self, structurer: BaseStructurer) -> None:
        self._structurer = structurer

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.structured = await asyncio.to_thread(self._structurer.structure, context.text)
        Log.info("Structured document received", file_id=context.file.id)
        return context


class ValidateStep(PipelineStep):
    async def run(self, context: PipelineContext) -> PipelineContext:
        report = validate_document(context.structured)
        context.report = report
        if not report.valid:
            raise ResponseValidationError(report.violations)
        for violation in report.violations:
            Log.warning(f"Structured document issue: {violation}", file_id=context.file.id)
        return context


class SanitizeStep(PipelineStep):
    progress_on_complete = 80

    async def run(self, context: PipelineContext) -> PipelineContext:
        context.sanitized = sanitize_document(context.structured)
        if context.sanitized.rejected_fields:
            Log.warning(
                "Rejected structured values",
                file_id=context.file.id,
                fields=", ".join(context.sanitized.rejected_fields),
            )
        return context


class NormalizeStep(PipelineStep):
    stage = FileStatus.NORMALIZING
    progress_on_complete = 90

    def __init__(self, normalizer: EntityNormalizer) -> None:
        self._normalizer = normalizer

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.sanitized is None:
            raise ValueError("PipelineContext.sanitized must be set before normalization")
        context.entities = self._normalizer.normalize(context.sanitized, context.file.id)
        Log.info(
            f"Normalized {len(context.entities.products)} products",
            file_id=context.file.id,
            invoice_id=context.entities.invoice.id,
        )
        return context


class CommitStep(PipelineStep):
    progress_on_complete = 95

    def __init__(self, repository: EntityRepository) -> None:
        self._repository = repository

    async def run(self, context: PipelineContext) -> PipelineContext:
        if context.entities is None:
            raise ValueError("PipelineContext.entities must be set before commit")
        self._repository.commit_extraction(context.entities, context.file.id)
        return context
