import io

import pdfplumber

from app.extraction.base import BaseTextExtractor, ProgressCallback
from app.extraction.exceptions import PdfExtractionError


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber."""

    def extract(
        self,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                total = len(pdf.pages)
                pages: list[str] = []
                for index, page in enumerate(pdf.pages):
                    pages.append(page.extract_text() or "")
                    if on_progress is not None:
                        on_progress((index + 1) / total)
            return "\n".join(pages).strip()
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber extraction failed: {exc}") from exc
