"""Coerce the untrusted structured document into typed, finite values.

Values that cannot be accepted become None. Nothing here ever evaluates an
expression the structuring service wrote into a numeric field.
"""

import math
from typing import Any

from app.validation.dates import parse_date
from app.validation.models import (
    CUSTOMER_FIELDS,
    CUSTOMER_NUMERIC_FIELDS,
    INVOICE_FIELDS,
    INVOICE_NUMERIC_FIELDS,
    PRODUCT_FIELDS,
    PRODUCT_NUMERIC_FIELDS,
    Number,
    SanitizedCustomer,
    SanitizedDocument,
    SanitizedInvoice,
    SanitizedProduct,
)
from app.validation.validator import contains_arithmetic


def sanitize_numeric(value: Any) -> Number | None:
    """Return *value* as a finite number, or None.

    Ints and finite floats pass through unchanged. Strings are parsed with
    ``float()`` after trimming, unless they contain an arithmetic operator.
    Booleans, containers and anything unparseable become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if not isinstance(value, str):
        return None

    text = value.strip()
    if not text or contains_arithmetic(text) or "_" in text:
        return None
    try:
        number = float(text)
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def sanitize_text(value: Any) -> str | None:
    """Return *value* as a trimmed string, or None for empty and non-scalar values."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value.strip() or None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return str(int(value)) if value.is_integer() else str(value)
    if isinstance(value, int):
        return str(value)
    return None


def sanitize_document(doc: dict[str, Any]) -> SanitizedDocument:
    """Build a SanitizedDocument from a structurally valid document.

    ``rejected_fields`` lists the wire path of every non-empty value that
    had to be dropped.
    """
    rejected: list[str] = []

    invoice_values = _sanitize_section(
        _as_dict(doc.get("invoice")), "invoice", INVOICE_FIELDS, INVOICE_NUMERIC_FIELDS, rejected
    )
    raw_date = invoice_values.get("date")
    if raw_date is not None:
        invoice_values["date"] = parse_date(raw_date) or raw_date

    customer_values = _sanitize_section(
        _as_dict(doc.get("customer")), "customer", CUSTOMER_FIELDS, CUSTOMER_NUMERIC_FIELDS, rejected
    )

    products: list[SanitizedProduct] = []
    raw_products = doc.get("products")
    if isinstance(raw_products, list):
        for index, raw in enumerate(raw_products):
            values = _sanitize_section(
                _as_dict(raw), f"products[{index}]", PRODUCT_FIELDS, PRODUCT_NUMERIC_FIELDS, rejected
            )
            products.append(SanitizedProduct(**values))

    declared = doc.get("missingFields")
    missing_fields = (
        [str(entry) for entry in declared if isinstance(entry, str) and entry.strip()]
        if isinstance(declared, list)
        else []
    )

    return SanitizedDocument(
        invoice=SanitizedInvoice(**invoice_values),
        customer=SanitizedCustomer(**customer_values),
        products=products,
        missing_fields=missing_fields,
        rejected_fields=rejected,
    )


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _sanitize_section(
    section: dict[str, Any],
    path: str,
    fields: dict[str, str],
    numeric_fields: tuple[str, ...],
    rejected: list[str],
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for wire_name, attribute in fields.items():
        raw = section.get(wire_name)
        if wire_name in numeric_fields:
            clean = sanitize_numeric(raw)
        else:
            clean = sanitize_text(raw)
        if clean is None and not _is_blank(raw):
            rejected.append(f"{path}.{wire_name}")
        values[attribute] = clean
    return values


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
