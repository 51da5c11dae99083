"""Turn a sanitized document into linked Invoice, Customer and Product entities."""

import re
import uuid
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Iterable

from app.entities.models import (
    Customer,
    Invoice,
    NormalizedEntities,
    Product,
    compute_missing_fields,
    is_missing,
)
from app.logging.logger import Log
from app.validation.models import SanitizedDocument

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")
_INDEXED_PRODUCT_RE = re.compile(r"^products?\[(\d+)\]\.(.+)$")

_SECTION_ALIASES = {
    "invoice": "invoice",
    "customer": "customer",
    "product": "products",
    "products": "products",
}


def _to_snake(name: str) -> str:
    return _CAMEL_RE.sub("_", name.strip()).lower()


@dataclass
class DeclaredMissing:
    """The producer's missing-field declarations, resolved per entity.

    Qualified declarations (``customer.name``, ``products[0].tax``) name one
    entity and override whatever value it carries. Bare names cannot be tied
    to an entity, so they only confirm fields that are already empty.
    """

    bare: set[str] = field(default_factory=set)
    invoice: set[str] = field(default_factory=set)
    customer: set[str] = field(default_factory=set)
    products: set[str] = field(default_factory=set)
    product_index: dict[int, set[str]] = field(default_factory=dict)

    @classmethod
    def parse(cls, entries: Iterable[str]) -> "DeclaredMissing":
        declared = cls()
        for entry in entries:
            text = entry.strip()
            indexed = _INDEXED_PRODUCT_RE.match(text)
            if indexed:
                index = int(indexed.group(1))
                declared.product_index.setdefault(index, set()).add(_to_snake(indexed.group(2)))
                continue
            section, _, name = text.partition(".")
            target = _SECTION_ALIASES.get(section.lower()) if name else None
            if target is None:
                declared.bare.add(_to_snake(text))
            else:
                getattr(declared, target).add(_to_snake(name))
        return declared

    def for_invoice(self) -> set[str]:
        return set(self.invoice)

    def for_customer(self) -> set[str]:
        return set(self.customer)

    def for_product(self, index: int) -> set[str]:
        return self.products | self.product_index.get(index, set())


class EntityNormalizer:
    """Builds the entity graph for one structured document.

    Ids are drawn from *id_factory* in a fixed order: invoice, customer, then
    one per product in document order. No I/O is performed.
    """

    def __init__(self, id_factory: Callable[[], str] | None = None) -> None:
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))

    def normalize(self, doc: SanitizedDocument, source_file_id: str) -> NormalizedEntities:
        declared = DeclaredMissing.parse(doc.missing_fields)

        invoice_id = self._id_factory()
        customer_id = self._id_factory()
        product_ids = [self._id_factory() for _ in doc.products]

        products = [
            self._build(
                Product,
                asdict(sanitized),
                declared.for_product(index),
                declared.bare,
                id=product_id,
                invoice_id=invoice_id,
            )
            for index, (product_id, sanitized) in enumerate(zip(product_ids, doc.products))
        ]
        invoice = self._build(
            Invoice,
            asdict(doc.invoice),
            declared.for_invoice(),
            declared.bare,
            id=invoice_id,
            customer_id=customer_id,
            source_file_id=source_file_id,
            product_ids=list(product_ids),
        )
        customer = self._build(
            Customer,
            asdict(doc.customer),
            declared.for_customer(),
            declared.bare,
            id=customer_id,
            invoice_ids=[invoice_id],
        )
        return NormalizedEntities(invoice=invoice, customer=customer, products=products)

    @staticmethod
    def _build(
        entity_cls: Any,
        values: dict[str, Any],
        qualified: set[str],
        bare: set[str],
        **keys: Any,
    ) -> Any:
        tracked = entity_cls.TRACKED_FIELDS
        for name in qualified.intersection(tracked):
            if values.get(name) is not None:
                Log.debug(
                    "Dropping value declared missing by structuring service",
                    entity=entity_cls.__name__,
                    field=name,
                )
                values[name] = None
        declared = qualified | {name for name in bare if is_missing(values.get(name))}
        entity = entity_cls(**keys, **values)
        entity.missing_fields = compute_missing_fields(values, tracked, declared)
        return entity
