import asyncio
from collections.abc import Mapping

from app.extraction.base import BaseTextExtractor, ProgressCallback
from app.pipeline.exceptions import UnsupportedFileTypeError
from app.pipeline.models import FileKind


class TextExtractionService:
    """Routes a file to the adapter for its kind and runs it off the event loop.

    Adapters are blocking, so each call runs in a worker thread. Progress
    callbacks fired from that thread are re-scheduled onto the event loop in
    the order they were fired.
    """

    def __init__(self, extractors: Mapping[FileKind, BaseTextExtractor]) -> None:
        self._extractors = dict(extractors)

    def supports(self, kind: FileKind) -> bool:
        return kind in self._extractors

    async def extract(
        self,
        content: bytes,
        kind: FileKind,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Extract raw text from *content* using the adapter registered for *kind*.

        Raises:
            UnsupportedFileTypeError: if no adapter handles *kind*.
            TextExtractionError: if the adapter fails.
        """
        extractor = self._extractors.get(kind)
        if extractor is None:
            raise UnsupportedFileTypeError(f"No extractor registered for '{kind.value}' files")
        return await asyncio.to_thread(
            extractor.extract,
            content,
            self._on_loop(on_progress),
        )

    @staticmethod
    def _on_loop(on_progress: ProgressCallback | None) -> ProgressCallback | None:
        if on_progress is None:
            return None
        loop = asyncio.get_running_loop()

        def forward(fraction: float) -> None:
            loop.call_soon_threadsafe(on_progress, fraction)

        return forward
