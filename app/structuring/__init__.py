from app.structuring.base import BaseStructurer
from app.structuring.factory import StructurerFactory
from app.structuring.structurer import InvoiceStructurer, truncate_text

__all__ = ["BaseStructurer", "InvoiceStructurer", "StructurerFactory", "truncate_text"]
