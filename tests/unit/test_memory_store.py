import threading

import pytest

from app.entities.exceptions import EntityNotFoundError
from app.entities.memory_store import InMemoryEntityStore
from app.entities.models import NormalizedEntities
from app.entities.normalizer import EntityNormalizer
from app.pipeline.error_classifier import ErrorCategory
from app.pipeline.models import FileStatus, UploadedFile
from app.validation.sanitizer import sanitize_document


@pytest.fixture
def store() -> InMemoryEntityStore:
    return InMemoryEntityStore()


@pytest.fixture
def entities(structured_document: dict[str, object]) -> NormalizedEntities:
    return EntityNormalizer().normalize(sanitize_document(structured_document), "file-1")


@pytest.fixture
def committed(store: InMemoryEntityStore, entities: NormalizedEntities) -> NormalizedEntities:
    store.commit_extraction(entities, "file-1")
    return entities


def _file(file_id: str = "file-1") -> UploadedFile:
    return UploadedFile(id=file_id, name="a.pdf", size=10, mime_type="application/pdf")


class TestFiles:
    def test_add_and_get(self, store: InMemoryEntityStore) -> None:
        store.add_file(_file())
        stored = store.get_file("file-1")
        assert stored is not None
        assert stored.status is FileStatus.QUEUED

    def test_stored_file_is_a_copy(self, store: InMemoryEntityStore) -> None:
        file = _file()
        store.add_file(file)
        file.progress = 50
        assert store.get_file("file-1").progress == 0  # type: ignore[union-attr]

    def test_update_file_status_only_touches_given_fields(
        self, store: InMemoryEntityStore
    ) -> None:
        store.add_file(_file())
        store.update_file_status("file-1", status=FileStatus.EXTRACTING, progress=10)
        store.update_file_status(
            "file-1",
            error="boom",
            error_category=ErrorCategory.UNKNOWN_ERROR,
        )
        stored = store.get_file("file-1")
        assert stored is not None
        assert stored.status is FileStatus.EXTRACTING
        assert stored.progress == 10
        assert stored.error == "boom"
        assert stored.error_category is ErrorCategory.UNKNOWN_ERROR

    def test_update_unknown_file_raises(self, store: InMemoryEntityStore) -> None:
        with pytest.raises(EntityNotFoundError, match="File not found"):
            store.update_file_status("missing", progress=5)

    def test_remove_and_clear(self, store: InMemoryEntityStore) -> None:
        store.add_file(_file("a"))
        store.add_file(_file("b"))
        assert store.remove_file("a") is True
        assert store.remove_file("a") is False
        store.clear_files()
        assert store.list_files() == []


class TestCommitAndSelectors:
    def test_commit_stores_all_entities(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        assert store.get_invoice(committed.invoice.id) == committed.invoice
        assert store.get_customer(committed.customer.id) == committed.customer
        assert store.list_products() == committed.products

    def test_list_products_by_invoice(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        products = store.list_products_by_invoice(committed.invoice.id)
        assert [p.id for p in products] == committed.invoice.product_ids
        assert store.list_products_by_invoice("other") == []

    def test_unknown_ids_return_none(self, store: InMemoryEntityStore) -> None:
        assert store.get_invoice("x") is None
        assert store.get_product("x") is None
        assert store.get_customer("x") is None

    def test_snapshot_is_json_ready(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        store.add_file(_file())
        snapshot = store.snapshot()
        assert snapshot["files"][0]["status"] == "queued"
        assert isinstance(snapshot["files"][0]["created_at"], str)
        assert snapshot["invoices"][0]["id"] == committed.invoice.id
        assert len(snapshot["products"]) == 1
        assert snapshot["customers"][0]["missing_fields"] == ["phone"]


class TestEdits:
    def test_update_sets_value_and_recomputes_missing(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        updated = store.update_customer(committed.customer.id, {"phone": " 555-0100 "})
        assert updated.phone == "555-0100"
        assert updated.missing_fields == []
        assert updated.last_edited_at is not None

    def test_clearing_a_value_makes_it_missing(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        updated = store.update_invoice(committed.invoice.id, {"serial_number": ""})
        assert updated.serial_number is None
        assert updated.missing_fields == ["serial_number"]

    def test_numeric_edits_are_sanitized(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        product_id = committed.products[0].id
        updated = store.update_product(product_id, {"quantity": "3", "unit_price": "10+5"})
        assert updated.quantity == 3.0
        assert updated.unit_price is None
        assert updated.missing_fields == ["unit_price"]

    def test_untracked_fields_cannot_be_edited(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        with pytest.raises(ValueError, match="invoice_id"):
            store.update_product(committed.products[0].id, {"invoice_id": "other"})

    def test_update_unknown_entity_raises(self, store: InMemoryEntityStore) -> None:
        with pytest.raises(EntityNotFoundError):
            store.update_invoice("missing", {"tax": 1})

    def test_returned_entity_is_detached(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        invoice = store.get_invoice(committed.invoice.id)
        assert invoice is not None
        invoice.tax = 999
        assert store.get_invoice(committed.invoice.id).tax == 18  # type: ignore[union-attr]


class TestDeletes:
    def test_delete_invoice_leaves_products(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        assert store.delete_invoice(committed.invoice.id) is True
        assert store.get_invoice(committed.invoice.id) is None
        assert len(store.list_products()) == 1
        assert store.delete_invoice(committed.invoice.id) is False

    def test_delete_products_by_invoice_id(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        assert store.delete_products_by_invoice_id(committed.invoice.id) == 1
        assert store.list_products() == []
        assert store.get_invoice(committed.invoice.id).product_ids == []  # type: ignore[union-attr]

    def test_delete_product_unlinks_it(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        product_id = committed.products[0].id
        assert store.delete_product(product_id) is True
        assert product_id not in store.get_invoice(committed.invoice.id).product_ids  # type: ignore[union-attr]
        assert store.delete_product(product_id) is False

    def test_delete_customer(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        assert store.delete_customer(committed.customer.id) is True
        assert store.list_customers() == []

    def test_customer_invoice_links(
        self, store: InMemoryEntityStore, committed: NormalizedEntities
    ) -> None:
        customer_id = committed.customer.id
        store.add_invoice_to_customer(customer_id, "inv-2")
        store.add_invoice_to_customer(customer_id, "inv-2")
        assert store.get_customer(customer_id).invoice_ids == [  # type: ignore[union-attr]
            committed.invoice.id,
            "inv-2",
        ]
        store.remove_invoice_from_customer(customer_id, committed.invoice.id)
        assert store.get_customer(customer_id).invoice_ids == ["inv-2"]  # type: ignore[union-attr]


class TestConcurrency:
    def test_concurrent_commits_are_all_stored(
        self, store: InMemoryEntityStore, structured_document: dict[str, object]
    ) -> None:
        normalizer = EntityNormalizer()
        batches = [
            normalizer.normalize(sanitize_document(structured_document), f"file-{i}")
            for i in range(20)
        ]
        threads = [
            threading.Thread(target=store.commit_extraction, args=(batch, f"file-{i}"))
            for i, batch in enumerate(batches)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert len(store.list_invoices()) == 20
        assert len(store.list_customers()) == 20
        assert len(store.list_products()) == 20
