"""Runs each uploaded file through classify -> extract -> structure -> normalize -> commit."""

import asyncio
import uuid
from collections.abc import Callable, Iterable

from app.config.settings import Settings
from app.entities.memory_store import InMemoryEntityStore
from app.entities.normalizer import EntityNormalizer
from app.entities.repository import EntityRepository
from app.extraction.factory import TextExtractorFactory
from app.extraction.service import TextExtractionService
from app.logging.logger import Log
from app.pipeline.error_classifier import MESSAGES, ClassifiedError, ErrorCategory, classify_error
from app.pipeline.exceptions import InvalidStatusTransitionError
from app.pipeline.models import FileStatus, FileUpload, UploadedFile
from app.pipeline.pipeline import PipelineContext, PipelineStep
from app.pipeline.progress import ProgressChannel, ProgressSink
from app.pipeline.state_machine import FileStateMachine
from app.pipeline.steps import (
    ClassifyStep,
    CommitStep,
    ExtractTextStep,
    NormalizeStep,
    SanitizeStep,
    StructureStep,
    ValidateStep,
)
from app.structuring.base import BaseStructurer
from app.structuring.factory import StructurerFactory


class PipelineOrchestrator:
    """Owns per-file status, progress and failure handling.

    Every file runs its pipeline exactly once. A failure in one file marks
    only that file FAILED. Entities are committed only by the last step.
    """

    def __init__(
        self,
        *,
        extraction_service: TextExtractionService,
        structurer: BaseStructurer,
        repository: EntityRepository,
        normalizer: EntityNormalizer | None = None,
        max_concurrent_files: int = 4,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        if max_concurrent_files < 1:
            raise ValueError("max_concurrent_files must be at least 1")
        self._repository = repository
        self._max_concurrent_files = max_concurrent_files
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._sinks: list[ProgressSink] = []
        self._steps: list[PipelineStep] = [
            ClassifyStep(),
            ExtractTextStep(extraction_service),
            StructureStep(structurer),
            ValidateStep(),
            SanitizeStep(),
            NormalizeStep(normalizer or EntityNormalizer()),
            CommitStep(repository),
        ]

    def subscribe(self, sink: ProgressSink) -> None:
        """Register an observer called with ``(file_id, progress)``."""
        self._sinks.append(sink)

    def submit(self, upload: FileUpload) -> UploadedFile:
        """Create the QUEUED record for *upload* and register it with the repository."""
        file = UploadedFile(
            id=self._id_factory(),
            name=upload.name,
            size=upload.size,
            mime_type=upload.mime_type,
        )
        self._repository.add_file(file)
        Log.info("File queued", file_id=file.id, name=file.name, size=file.size)
        return file

    async def process_upload(self, upload: FileUpload) -> UploadedFile:
        return await self.process(self.submit(upload), upload.content)

    async def process_many(self, uploads: Iterable[FileUpload]) -> list[UploadedFile]:
        """Process *uploads* concurrently; results keep submission order."""
        pending = [(self.submit(upload), upload.content) for upload in uploads]
        semaphore = asyncio.Semaphore(self._max_concurrent_files)

        async def bounded(file: UploadedFile, content: bytes) -> UploadedFile:
            async with semaphore:
                return await self.process(file, content)

        return list(await asyncio.gather(*(bounded(file, content) for file, content in pending)))

    async def process(self, file: UploadedFile, content: bytes) -> UploadedFile:
        """Run the pipeline for a submitted file.

        Pipeline failures never propagate: they are classified and recorded on
        the file. Task cancellation marks the file FAILED and is re-raised.

        Raises:
            InvalidStatusTransitionError: if *file* is not QUEUED.
        """
        if file.status is not FileStatus.QUEUED:
            raise InvalidStatusTransitionError(
                f"File {file.id} was already processed (status '{file.status.value}')"
            )
        machine = FileStateMachine(file.status)
        channel = ProgressChannel(file.id, [self._recorder(file), *self._sinks])
        context = PipelineContext(file=file, content=content, progress=channel)

        try:
            for step in self._steps:
                self._enter(machine, file, step.stage)
                if step.progress_on_start is not None:
                    channel.report(step.progress_on_start)
                context = await step.run(context)
                if step.progress_on_complete is not None:
                    channel.report(step.progress_on_complete)
            self._complete(machine, file, channel, context)
        except asyncio.CancelledError:
            self._fail(
                machine,
                file,
                channel,
                ClassifiedError(
                    category=ErrorCategory.UNKNOWN_ERROR,
                    message=MESSAGES[ErrorCategory.UNKNOWN_ERROR],
                    detail="cancelled",
                ),
            )
            raise
        except Exception as exc:
            self._fail(machine, file, channel, classify_error(exc))
        return file

    def _enter(self, machine: FileStateMachine, file: UploadedFile, stage: FileStatus | None) -> None:
        if stage is None or stage is machine.status:
            return
        file.status = machine.transition(stage)
        self._repository.update_file_status(file.id, status=file.status)
        Log.info(f"File moved to {stage.value}", file_id=file.id)

    def _complete(
        self,
        machine: FileStateMachine,
        file: UploadedFile,
        channel: ProgressChannel,
        context: PipelineContext,
    ) -> None:
        invoice_ids = [context.entities.invoice.id] if context.entities is not None else []
        if not machine.can_transition(FileStatus.COMPLETED):
            raise InvalidStatusTransitionError(
                f"Cannot move file from '{machine.status.value}' to 'completed'"
            )
        # The file only reads COMPLETED once the repository has accepted it.
        self._repository.update_file_status(
            file.id,
            status=FileStatus.COMPLETED,
            progress=100,
            extracted_invoice_ids=invoice_ids,
        )
        channel.report(100)
        channel.freeze()
        file.status = machine.transition(FileStatus.COMPLETED)
        file.extracted_invoice_ids = invoice_ids
        Log.info("File completed", file_id=file.id, invoices=len(invoice_ids))

    def _fail(
        self,
        machine: FileStateMachine,
        file: UploadedFile,
        channel: ProgressChannel,
        classified: ClassifiedError,
    ) -> None:
        channel.freeze()
        if not machine.status.is_terminal:
            file.status = machine.transition(FileStatus.FAILED)
        file.error = classified.message
        file.error_detail = classified.detail
        file.error_category = classified.category
        try:
            self._repository.update_file_status(
                file.id,
                status=file.status,
                error=file.error,
                error_detail=file.error_detail,
                error_category=file.error_category,
            )
        except Exception as exc:
            Log.warning(f"Could not record failure in repository: {exc}", file_id=file.id)
        Log.error(
            f"File failed: {classified.message}",
            file_id=file.id,
            category=classified.category.value,
            detail=classified.detail,
        )

    def _recorder(self, file: UploadedFile) -> ProgressSink:
        def record(file_id: str, value: int) -> None:
            file.progress = value
            self._repository.update_file_status(file_id, progress=value)

        return record


def build_orchestrator(
    settings: Settings,
    repository: EntityRepository | None = None,
) -> PipelineOrchestrator:
    """Build an orchestrator with the adapters selected by *settings*."""
    return PipelineOrchestrator(
        extraction_service=TextExtractorFactory.create(settings),
        structurer=StructurerFactory.create(settings),
        repository=repository if repository is not None else InMemoryEntityStore(),
        max_concurrent_files=settings.max_concurrent_files,
    )
