from abc import ABC, abstractmethod


class BaseStructuringClient(ABC):
    """Contract for provider-specific chat completion clients."""

    @abstractmethod
    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        """Return the provider's JSON-mode reply as plain text.

        Raises:
            StructuringError: or one of its subclasses, on any provider failure.
        """
