"""Map pipeline failures to stable, user-facing categories."""

from dataclasses import dataclass
from enum import Enum

from app.extraction.exceptions import TextExtractionError
from app.pipeline.exceptions import (
    EmptyExtractionError,
    ResponseValidationError,
    UnsupportedFileTypeError,
)
from app.structuring.exceptions import (
    MalformedResponseError,
    PayloadTooLargeError,
    StructuringAuthError,
    StructuringNetworkError,
    StructuringRateLimitError,
)


class ErrorCategory(str, Enum):
    AUTH_ERROR = "auth_error"
    PAYLOAD_TOO_LARGE = "payload_too_large"
    RATE_LIMITED = "rate_limited"
    NETWORK_ERROR = "network_error"
    VALIDATION_ERROR = "validation_error"
    EXTRACTION_EMPTY = "extraction_empty"
    UNSUPPORTED_TYPE = "unsupported_type"
    UNKNOWN_ERROR = "unknown_error"


MESSAGES: dict[ErrorCategory, str] = {
    ErrorCategory.AUTH_ERROR: "Invalid API key. Please check your configuration.",
    ErrorCategory.PAYLOAD_TOO_LARGE: (
        "Document is too large. Please try a shorter document or extract data manually."
    ),
    ErrorCategory.RATE_LIMITED: "Too many requests. Please wait a moment and try again.",
    ErrorCategory.NETWORK_ERROR: (
        "Network error. Please check your internet connection and try again."
    ),
    ErrorCategory.VALIDATION_ERROR: (
        "AI generated invalid data. This usually happens with complex invoices. "
        "Please try again or manually enter the data."
    ),
    ErrorCategory.EXTRACTION_EMPTY: "No text could be extracted from the file.",
    ErrorCategory.UNSUPPORTED_TYPE: (
        "Unsupported file type. Please upload PDF, Excel, or Image files."
    ),
    ErrorCategory.UNKNOWN_ERROR: "Extraction failed due to an unexpected error.",
}

# Checked in order; subclasses must precede their bases.
_TYPED: tuple[tuple[type[BaseException], ErrorCategory], ...] = (
    (UnsupportedFileTypeError, ErrorCategory.UNSUPPORTED_TYPE),
    (EmptyExtractionError, ErrorCategory.EXTRACTION_EMPTY),
    (TextExtractionError, ErrorCategory.UNKNOWN_ERROR),
    (StructuringAuthError, ErrorCategory.AUTH_ERROR),
    (PayloadTooLargeError, ErrorCategory.PAYLOAD_TOO_LARGE),
    (StructuringRateLimitError, ErrorCategory.RATE_LIMITED),
    (StructuringNetworkError, ErrorCategory.NETWORK_ERROR),
    (MalformedResponseError, ErrorCategory.VALIDATION_ERROR),
    (ResponseValidationError, ErrorCategory.VALIDATION_ERROR),
)

_HEURISTICS: tuple[tuple[tuple[str, ...], ErrorCategory], ...] = (
    (("api key",), ErrorCategory.AUTH_ERROR),
    (("too long", "length"), ErrorCategory.PAYLOAD_TOO_LARGE),
    (("rate limit",), ErrorCategory.RATE_LIMITED),
    (("network", "fetch", "connection"), ErrorCategory.NETWORK_ERROR),
)


@dataclass(frozen=True)
class ClassifiedError:
    category: ErrorCategory
    message: str
    detail: str


def classify_error(exc: BaseException) -> ClassifiedError:
    """Classify *exc*, keeping its raw text as ``detail``."""
    detail = str(exc) or type(exc).__name__
    category = _categorize(exc)
    return ClassifiedError(category=category, message=MESSAGES[category], detail=detail)


def _categorize(exc: BaseException) -> ErrorCategory:
    for exc_type, category in _TYPED:
        if isinstance(exc, exc_type):
            return category

    lowered = str(exc).lower()
    for needles, category in _HEURISTICS:
        if any(needle in lowered for needle in needles):
            return category
    return ErrorCategory.UNKNOWN_ERROR
