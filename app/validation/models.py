from dataclasses import dataclass, field

Number = int | float

# Wire (camelCase) field name -> entity attribute name, per document section.
INVOICE_FIELDS: dict[str, str] = {
    "serialNumber": "serial_number",
    "date": "date",
    "customerName": "customer_name",
    "totalAmount": "total_amount",
    "tax": "tax",
}
PRODUCT_FIELDS: dict[str, str] = {
    "name": "name",
    "quantity": "quantity",
    "unitPrice": "unit_price",
    "tax": "tax",
    "priceWithTax": "price_with_tax",
}
CUSTOMER_FIELDS: dict[str, str] = {
    "name": "name",
    "phone": "phone",
    "totalPurchaseAmount": "total_purchase_amount",
}

INVOICE_NUMERIC_FIELDS: tuple[str, ...] = ("totalAmount", "tax")
PRODUCT_NUMERIC_FIELDS: tuple[str, ...] = ("quantity", "unitPrice", "tax", "priceWithTax")
CUSTOMER_NUMERIC_FIELDS: tuple[str, ...] = ("totalPurchaseAmount",)


@dataclass(frozen=True)
class ValidationReport:
    """Outcome of checking an untrusted structured document."""

    valid: bool
    violations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SanitizedInvoice:
    serial_number: str | None = None
    date: str | None = None
    customer_name: str | None = None
    total_amount: Number | None = None
    tax: Number | None = None


@dataclass(frozen=True)
class SanitizedProduct:
    name: str | None = None
    quantity: Number | None = None
    unit_price: Number | None = None
    tax: Number | None = None
    price_with_tax: Number | None = None


@dataclass(frozen=True)
class SanitizedCustomer:
    name: str | None = None
    phone: str | None = None
    total_purchase_amount: Number | None = None


@dataclass(frozen=True)
class SanitizedDocument:
    """Typed, sanitized view of a structured document.

    missing_fields is the producer's own declared list, verbatim.
    rejected_fields holds the wire paths of non-empty values that could not
    be accepted (e.g. ``invoice.totalAmount`` holding ``"100+50"``).
    """

    invoice: SanitizedInvoice
    customer: SanitizedCustomer
    products: list[SanitizedProduct] = field(default_factory=list)
    missing_fields: list[str] = field(default_factory=list)
    rejected_fields: list[str] = field(default_factory=list)
