"""Process-local entity store with the edit surface of the review screen."""

import copy
import threading
from dataclasses import asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, TypeVar

from app.entities.exceptions import EntityNotFoundError
from app.entities.models import Customer, Invoice, NormalizedEntities, Product
from app.entities.repository import EntityRepository
from app.logging.logger import Log
from app.pipeline.error_classifier import ErrorCategory
from app.pipeline.models import FileStatus, UploadedFile
from app.validation.sanitizer import sanitize_numeric, sanitize_text

EntityT = TypeVar("EntityT", Invoice, Product, Customer)


class InMemoryEntityStore(EntityRepository):
    """Dict-backed repository. Every mutation runs under a single lock.

    Records handed in and out are copies, so callers cannot change stored
    state without going through the store.
    """

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._files: dict[str, UploadedFile] = {}
        self._invoices: dict[str, Invoice] = {}
        self._products: dict[str, Product] = {}
        self._customers: dict[str, Customer] = {}

    def add_file(self, file: UploadedFile) -> None:
        with self._lock:
            self._files[file.id] = copy.deepcopy(file)

    def update_file_status(
        self,
        file_id: str,
        *,
        status: FileStatus | None = None,
        progress: int | None = None,
        error: str | None = None,
        error_detail: str | None = None,
        error_category: ErrorCategory | None = None,
        extracted_invoice_ids: list[str] | None = None,
    ) -> None:
        changes = {
            "status": status,
            "progress": progress,
            "error": error,
            "error_detail": error_detail,
            "error_category": error_category,
            "extracted_invoice_ids": (
                list(extracted_invoice_ids) if extracted_invoice_ids is not None else None
            ),
        }
        with self._lock:
            record = self._require(self._files, "File", file_id)
            for name, value in changes.items():
                if value is not None:
                    setattr(record, name, value)

    def get_file(self, file_id: str) -> UploadedFile | None:
        with self._lock:
            return copy.deepcopy(self._files.get(file_id))

    def list_files(self) -> list[UploadedFile]:
        with self._lock:
            return copy.deepcopy(list(self._files.values()))

    def remove_file(self, file_id: str) -> bool:
        """Forget a file record. Entities extracted from it are kept."""
        with self._lock:
            return self._files.pop(file_id, None) is not None

    def clear_files(self) -> None:
        with self._lock:
            self._files.clear()

    def insert_invoice(self, invoice: Invoice) -> None:
        with self._lock:
            self._invoices[invoice.id] = copy.deepcopy(invoice)

    def insert_products(self, products: list[Product]) -> None:
        with self._lock:
            for product in products:
                self._products[product.id] = copy.deepcopy(product)

    def insert_customer(self, customer: Customer) -> None:
        with self._lock:
            self._customers[customer.id] = copy.deepcopy(customer)

    def commit_extraction(self, entities: NormalizedEntities, file_id: str) -> None:
        with self._lock:
            super().commit_extraction(entities, file_id)
        Log.debug(
            "Committed extracted entities",
            file_id=file_id,
            invoice_id=entities.invoice.id,
            products=len(entities.products),
        )

    def get_invoice(self, invoice_id: str) -> Invoice | None:
        with self._lock:
            return copy.deepcopy(self._invoices.get(invoice_id))

    def get_product(self, product_id: str) -> Product | None:
        with self._lock:
            return copy.deepcopy(self._products.get(product_id))

    def get_customer(self, customer_id: str) -> Customer | None:
        with self._lock:
            return copy.deepcopy(self._customers.get(customer_id))

    def list_invoices(self) -> list[Invoice]:
        with self._lock:
            return copy.deepcopy(list(self._invoices.values()))

    def list_products(self) -> list[Product]:
        with self._lock:
            return copy.deepcopy(list(self._products.values()))

    def list_customers(self) -> list[Customer]:
        with self._lock:
            return copy.deepcopy(list(self._customers.values()))

    def list_products_by_invoice(self, invoice_id: str) -> list[Product]:
        with self._lock:
            return copy.deepcopy(
                [product for product in self._products.values() if product.invoice_id == invoice_id]
            )

    def update_invoice(self, invoice_id: str, changes: dict[str, Any]) -> Invoice:
        with self._lock:
            return self._apply_changes(self._require(self._invoices, "Invoice", invoice_id), changes)

    def update_product(self, product_id: str, changes: dict[str, Any]) -> Product:
        with self._lock:
            return self._apply_changes(self._require(self._products, "Product", product_id), changes)

    def update_customer(self, customer_id: str, changes: dict[str, Any]) -> Customer:
        with self._lock:
            return self._apply_changes(
                self._require(self._customers, "Customer", customer_id), changes
            )

    def delete_invoice(self, invoice_id: str) -> bool:
        """Delete an invoice. Its products are left to delete_products_by_invoice_id."""
        with self._lock:
            return self._invoices.pop(invoice_id, None) is not None

    def delete_product(self, product_id: str) -> bool:
        with self._lock:
            product = self._products.pop(product_id, None)
            if product is None:
                return False
            invoice = self._invoices.get(product.invoice_id)
            if invoice is not None and product_id in invoice.product_ids:
                invoice.product_ids.remove(product_id)
            return True

    def delete_customer(self, customer_id: str) -> bool:
        with self._lock:
            return self._customers.pop(customer_id, None) is not None

    def delete_products_by_invoice_id(self, invoice_id: str) -> int:
        """Delete every product of an invoice and return how many were removed."""
        with self._lock:
            doomed = [pid for pid, product in self._products.items() if product.invoice_id == invoice_id]
            for product_id in doomed:
                del self._products[product_id]
            invoice = self._invoices.get(invoice_id)
            if invoice is not None:
                invoice.product_ids = [pid for pid in invoice.product_ids if pid not in doomed]
            return len(doomed)

    def add_invoice_to_customer(self, customer_id: str, invoice_id: str) -> None:
        with self._lock:
            customer = self._require(self._customers, "Customer", customer_id)
            if invoice_id not in customer.invoice_ids:
                customer.invoice_ids.append(invoice_id)

    def remove_invoice_from_customer(self, customer_id: str, invoice_id: str) -> None:
        with self._lock:
            customer = self._require(self._customers, "Customer", customer_id)
            customer.invoice_ids = [iid for iid in customer.invoice_ids if iid != invoice_id]

    def snapshot(self) -> dict[str, list[dict[str, Any]]]:
        """Return every stored record as JSON-ready dicts."""
        with self._lock:
            return {
                "files": [_to_json(asdict(record)) for record in self._files.values()],
                "invoices": [_to_json(asdict(record)) for record in self._invoices.values()],
                "products": [_to_json(asdict(record)) for record in self._products.values()],
                "customers": [_to_json(asdict(record)) for record in self._customers.values()],
            }

    @staticmethod
    def _require(table: dict[str, Any], kind: str, entity_id: str) -> Any:
        record = table.get(entity_id)
        if record is None:
            raise EntityNotFoundError(kind, entity_id)
        return record

    @staticmethod
    def _apply_changes(entity: EntityT, changes: dict[str, Any]) -> EntityT:
        unknown = sorted(set(changes) - set(entity.TRACKED_FIELDS))
        if unknown:
            raise ValueError(
                f"Cannot edit {type(entity).__name__} fields: {', '.join(unknown)}"
            )
        for name, value in changes.items():
            if name in entity.NUMERIC_FIELDS:
                setattr(entity, name, sanitize_numeric(value))
            else:
                setattr(entity, name, sanitize_text(value))
        entity.last_edited_at = datetime.now(timezone.utc)
        entity.refresh_missing_fields()
        return copy.deepcopy(entity)


def _to_json(value: Any) -> Any:
    if isinstance(value, dict):
        return {key: _to_json(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_json(item) for item in value]
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
