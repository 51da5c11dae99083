import pymupdf

from app.extraction.base import BaseTextExtractor, ProgressCallback
from app.extraction.exceptions import PdfExtractionError


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text from PDF using PyMuPDF."""

    def extract(
        self,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        try:
            with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                total = doc.page_count
                pages: list[str] = []
                for index, page in enumerate(doc):
                    pages.append(page.get_text())
                    if on_progress is not None:
                        on_progress((index + 1) / total)
            return "\n".join(pages).strip()
        except PdfExtractionError:
            raise
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf extraction failed: {exc}") from exc
