from app.config.settings import Settings
from app.extraction.base import BaseTextExtractor
from app.extraction.pdfplumber_adapter import PdfPlumberAdapter
from app.extraction.pymupdf_adapter import PyMuPdfAdapter
from app.extraction.service import TextExtractionService
from app.extraction.spreadsheet_adapter import SpreadsheetAdapter
from app.extraction.tesseract_adapter import TesseractOcrAdapter
from app.pipeline.models import FileKind


class TextExtractorFactory:
    """Creates the extraction adapters selected by settings."""

    PDF_ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create_pdf_extractor(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.PDF_ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.PDF_ADAPTERS)}"
            )
        return adapter_cls()

    @classmethod
    def create(cls, settings: Settings) -> TextExtractionService:
        """Build a service routing every supported file kind to its adapter."""
        return TextExtractionService({
            FileKind.PDF: cls.create_pdf_extractor(settings),
            FileKind.IMAGE: TesseractOcrAdapter(language=settings.ocr_language),
            FileKind.SPREADSHEET: SpreadsheetAdapter(),
        })
