class TextExtractionError(Exception):
    """Raised when a backend cannot extract text from a file."""


class PdfExtractionError(TextExtractionError):
    """Raised when PDF text extraction fails."""


class OcrExtractionError(TextExtractionError):
    """Raised when image preprocessing or OCR fails."""


class SpreadsheetExtractionError(TextExtractionError):
    """Raised when a workbook cannot be read."""
