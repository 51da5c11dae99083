from abc import ABC, abstractmethod


class BaseStructurer(ABC):
    """Contract for turning raw document text into an untrusted structured document."""

    @abstractmethod
    def structure(self, text: str) -> dict[str, object]:
        """Ask the structuring service for the invoice/products/customer document.

        Args:
            text: Raw text extracted from the uploaded file.

        Returns:
            The parsed JSON object. Its contents are NOT validated.

        Raises:
            StructuringError: on any failure, including non-JSON replies.
        """
