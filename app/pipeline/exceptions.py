class PipelineError(Exception):
    """Base exception for all pipeline-related errors."""


class UploadRejectedError(PipelineError):
    """Raised when an upload fails the accepted type or size constraints."""


class UnsupportedFileTypeError(PipelineError):
    """Raised when a file's MIME type maps to no extraction route."""


class EmptyExtractionError(PipelineError):
    """Raised when extraction yields no usable text."""


class ResponseValidationError(PipelineError):
    """Raised when the structured document is missing required objects."""

    def __init__(self, violations: list[str]) -> None:
        self.violations = list(violations)
        super().__init__("; ".join(self.violations) or "Structured document is invalid")


class InvalidStatusTransitionError(PipelineError):
    """Raised when a file is moved to a state its current state cannot reach."""
