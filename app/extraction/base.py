from abc import ABC, abstractmethod
from collections.abc import Callable

ProgressCallback = Callable[[float], None]
"""Receives the fraction (0.0-1.0) of an extraction that has finished."""


class BaseTextExtractor(ABC):
    """Contract for all text extraction adapters."""

    @abstractmethod
    def extract(
        self,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        """Extract plain text from raw file content.

        Args:
            content: Raw file bytes.
            on_progress: Optional sink for fractional progress. Adapters that
                cannot measure their progress never call it.

        Returns:
            Extracted text as a single stripped string, possibly empty.

        Raises:
            TextExtractionError: if extraction fails for any reason.
        """
