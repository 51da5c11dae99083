from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, ClassVar, Iterable

from app.validation.models import Number


def is_missing(value: Any) -> bool:
    """A tracked value is missing when it is None or an empty string."""
    return value is None or (isinstance(value, str) and value.strip() == "")


def compute_missing_fields(
    values: dict[str, Any],
    tracked: Iterable[str],
    declared: Iterable[str] = (),
) -> list[str]:
    """Tracked fields that are missing locally or were declared missing.

    Result follows the order of *tracked*; names outside it are ignored.
    """
    declared_set = set(declared)
    return [
        name
        for name in tracked
        if is_missing(values.get(name)) or name in declared_set
    ]


@dataclass
class Invoice:
    id: str
    customer_id: str
    source_file_id: str
    serial_number: str | None = None
    date: str | None = None
    customer_name: str | None = None
    total_amount: Number | None = None
    tax: Number | None = None
    product_ids: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    last_edited_at: datetime | None = None

    TRACKED_FIELDS: ClassVar[tuple[str, ...]] = (
        "serial_number",
        "date",
        "customer_name",
        "total_amount",
        "tax",
    )
    NUMERIC_FIELDS: ClassVar[tuple[str, ...]] = ("total_amount", "tax")

    def refresh_missing_fields(self) -> None:
        self.missing_fields = compute_missing_fields(vars(self), self.TRACKED_FIELDS)


@dataclass
class Product:
    id: str
    invoice_id: str
    name: str | None = None
    quantity: Number | None = None
    unit_price: Number | None = None
    tax: Number | None = None
    price_with_tax: Number | None = None
    missing_fields: list[str] = field(default_factory=list)
    last_edited_at: datetime | None = None

    TRACKED_FIELDS: ClassVar[tuple[str, ...]] = (
        "name",
        "quantity",
        "unit_price",
        "tax",
        "price_with_tax",
    )
    NUMERIC_FIELDS: ClassVar[tuple[str, ...]] = (
        "quantity",
        "unit_price",
        "tax",
        "price_with_tax",
    )

    def refresh_missing_fields(self) -> None:
        self.missing_fields = compute_missing_fields(vars(self), self.TRACKED_FIELDS)


@dataclass
class Customer:
    id: str
    name: str | None = None
    phone: str | None = None
    total_purchase_amount: Number | None = None
    invoice_ids: list[str] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    last_edited_at: datetime | None = None

    TRACKED_FIELDS: ClassVar[tuple[str, ...]] = ("name", "phone", "total_purchase_amount")
    NUMERIC_FIELDS: ClassVar[tuple[str, ...]] = ("total_purchase_amount",)

    def refresh_missing_fields(self) -> None:
        self.missing_fields = compute_missing_fields(vars(self), self.TRACKED_FIELDS)


@dataclass(frozen=True)
class NormalizedEntities:
    """Entities produced from one structured document."""

    invoice: Invoice
    customer: Customer
    products: list[Product] = field(default_factory=list)
