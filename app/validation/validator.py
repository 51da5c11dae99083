"""Shape checks for the untrusted structured document.

Every problem is collected before returning so callers can report the full
diagnostic. Only structural problems (missing invoice/customer objects, a
non-list products field, non-object product entries) make a document invalid;
arithmetic expressions in numeric fields are reported but left to the
sanitizer.
"""

import re
from typing import Any

from app.validation.models import (
    CUSTOMER_NUMERIC_FIELDS,
    INVOICE_NUMERIC_FIELDS,
    PRODUCT_NUMERIC_FIELDS,
    ValidationReport,
)

_OPERATOR_RE = re.compile(r"[+\-*/]")


def contains_arithmetic(value: object) -> bool:
    """True if *value* is a string containing any of ``+ - * /``."""
    return isinstance(value, str) and _OPERATOR_RE.search(value) is not None


def validate_document(doc: Any) -> ValidationReport:
    """Check the structured document's shape and numeric fields.

    Returns:
        ValidationReport; ``valid`` is False only for structural problems.
    """
    if not isinstance(doc, dict):
        return ValidationReport(valid=False, violations=["Response is not a valid object"])

    violations: list[str] = []
    valid = True

    invoice = doc.get("invoice")
    if not isinstance(invoice, dict):
        violations.append("Missing or invalid invoice object")
        valid = False
    else:
        violations.extend(_scan_numeric(invoice, "invoice", INVOICE_NUMERIC_FIELDS))

    products = doc.get("products")
    if not isinstance(products, list):
        violations.append("Products is not an array")
        valid = False
    else:
        for index, product in enumerate(products):
            path = f"products[{index}]"
            if not isinstance(product, dict):
                violations.append(f"{path} is not a valid object")
                valid = False
                continue
            violations.extend(_scan_numeric(product, path, PRODUCT_NUMERIC_FIELDS))

    customer = doc.get("customer")
    if not isinstance(customer, dict):
        violations.append("Missing or invalid customer object")
        valid = False
    else:
        violations.extend(_scan_numeric(customer, "customer", CUSTOMER_NUMERIC_FIELDS))

    missing = doc.get("missingFields")
    if not isinstance(missing, list):
        violations.append("missingFields is not an array")

    return ValidationReport(valid=valid, violations=violations)


def _scan_numeric(section: dict[str, Any], path: str, fields: tuple[str, ...]) -> list[str]:
    return [
        f"{path}.{name} contains mathematical expression: {section[name]}"
        for name in fields
        if contains_arithmetic(section.get(name))
    ]
