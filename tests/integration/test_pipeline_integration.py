"""End-to-end pipeline runs with real extraction adapters and the offline structuring client."""

import pytest

from app.config.settings import Settings
from app.entities.memory_store import InMemoryEntityStore
from app.pipeline.error_classifier import ErrorCategory
from app.pipeline.models import FileStatus, FileUpload
from app.pipeline.orchestrator import build_orchestrator

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@pytest.fixture
def settings() -> Settings:
    return Settings(structuring_provider="example", pdf_engine="pdfplumber")


class TestPipelineIntegration:
    @pytest.mark.asyncio
    async def test_pdf_to_entities(self, settings: Settings, invoice_pdf_bytes: bytes) -> None:
        store = InMemoryEntityStore()
        orchestrator = build_orchestrator(settings, repository=store)
        file = await orchestrator.process_upload(
            FileUpload(name="invoice.pdf", mime_type="application/pdf", content=invoice_pdf_bytes)
        )

        assert file.status is FileStatus.COMPLETED
        assert file.progress == 100
        invoice = store.get_invoice(file.extracted_invoice_ids[0])
        assert invoice is not None
        assert invoice.serial_number == "INV-0001"
        assert invoice.date == "2024-11-12"
        assert invoice.total_amount == 118.0
        assert invoice.missing_fields == []

        customer = store.get_customer(invoice.customer_id)
        assert customer is not None
        assert customer.invoice_ids == [invoice.id]
        assert customer.missing_fields == ["phone"]

        products = store.list_products_by_invoice(invoice.id)
        assert [p.id for p in products] == invoice.product_ids
        assert products[0].price_with_tax == 118.0

    @pytest.mark.asyncio
    async def test_pymupdf_engine(self, invoice_pdf_bytes: bytes) -> None:
        settings = Settings(structuring_provider="example", pdf_engine="pymupdf")
        orchestrator = build_orchestrator(settings)
        file = await orchestrator.process_upload(
            FileUpload(name="invoice.pdf", mime_type="application/pdf", content=invoice_pdf_bytes)
        )
        assert file.status is FileStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_blank_pdf_fails_as_empty(
        self, settings: Settings, empty_pdf_bytes: bytes
    ) -> None:
        store = InMemoryEntityStore()
        orchestrator = build_orchestrator(settings, repository=store)
        file = await orchestrator.process_upload(
            FileUpload(name="blank.pdf", mime_type="application/pdf", content=empty_pdf_bytes)
        )
        assert file.status is FileStatus.FAILED
        assert file.error_category is ErrorCategory.EXTRACTION_EMPTY
        assert store.list_invoices() == []

    @pytest.mark.asyncio
    async def test_mixed_batch(
        self,
        settings: Settings,
        invoice_pdf_bytes: bytes,
        sample_xlsx_bytes: bytes,
    ) -> None:
        store = InMemoryEntityStore()
        orchestrator = build_orchestrator(settings, repository=store)
        files = await orchestrator.process_many(
            [
                FileUpload(name="a.pdf", mime_type="application/pdf", content=invoice_pdf_bytes),
                FileUpload(name="b.xlsx", mime_type=XLSX_MIME, content=sample_xlsx_bytes),
                FileUpload(name="c.pdf", mime_type="application/pdf", content=b"garbage"),
            ]
        )
        assert [file.status for file in files] == [
            FileStatus.COMPLETED,
            FileStatus.COMPLETED,
            FileStatus.FAILED,
        ]
        assert files[2].error_category is ErrorCategory.UNKNOWN_ERROR
        assert len(store.list_invoices()) == 2

        snapshot = store.snapshot()
        assert {entry["status"] for entry in snapshot["files"]} == {"completed", "failed"}
