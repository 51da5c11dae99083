"""Offline structuring client.

Returns a fixed, valid structured document without any network call. Used
for local development, tests, and as a template for new provider adapters:
implement BaseStructuringClient and register the provider in StructurerFactory.
"""

import json
from typing import ClassVar

from app.structuring.client_base import BaseStructuringClient


class ExampleClientAdapter(BaseStructuringClient):
    """Always answers with DEFAULT_RESPONSE (or the response it was given)."""

    DEFAULT_RESPONSE: ClassVar[dict[str, object]] = {
        "invoice": {
            "serialNumber": "INV-0001",
            "date": "2024-11-12",
            "customerName": "Example Customer",
            "totalAmount": 118.0,
            "tax": 18.0,
        },
        "products": [
            {
                "name": "Example Product",
                "quantity": 1,
                "unitPrice": 100.0,
                "tax": 18.0,
                "priceWithTax": 118.0,
            },
        ],
        "customer": {
            "name": "Example Customer",
            "phone": None,
            "totalPurchaseAmount": 118.0,
        },
        "missingFields": ["customer.phone"],
    }

    def __init__(self, response: dict[str, object] | None = None) -> None:
        self._response = response if response is not None else self.DEFAULT_RESPONSE

    def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
    ) -> str:
        _ = model, temperature, system_prompt, user_prompt
        return json.dumps(self._response)
