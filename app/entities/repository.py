from abc import ABC, abstractmethod

from app.entities.models import Customer, Invoice, NormalizedEntities, Product
from app.pipeline.error_classifier import ErrorCategory
from app.pipeline.models import FileStatus, UploadedFile


class EntityRepository(ABC):
    """Storage seam the pipeline writes files and extracted entities to."""

    @abstractmethod
    def add_file(self, file: UploadedFile) -> None:
        """Register a newly submitted file."""

    @abstractmethod
    def insert_invoice(self, invoice: Invoice) -> None:
        """Store one invoice."""

    @abstractmethod
    def insert_products(self, products: list[Product]) -> None:
        """Store products, keeping their order."""

    @abstractmethod
    def insert_customer(self, customer: Customer) -> None:
        """Store one customer."""

    @abstractmethod
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
        """Apply the given changes to a stored file record. None leaves a field untouched."""

    def commit_extraction(self, entities: NormalizedEntities, file_id: str) -> None:
        """Store the entities of one extraction as a unit.

        Implementations that can do so atomically should override this.
        """
        self.insert_invoice(entities.invoice)
        self.insert_products(entities.products)
        self.insert_customer(entities.customer)
