import io

import pytest
from openpyxl import Workbook
from PIL import Image
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Hello PDF World")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a two-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Page one content")
    c.showPage()
    c.drawString(72, 720, "Page two content")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def empty_pdf_bytes() -> bytes:
    """Generate a valid PDF with no text content (blank page)."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def invoice_pdf_bytes() -> bytes:
    """Generate a single-page invoice PDF."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "INVOICE INV-0001")
    c.drawString(72, 700, "Date: 12 Nov 2024")
    c.drawString(72, 680, "Bill to: Example Customer")
    c.drawString(72, 660, "Example Product  1 x 100.00  tax 18.00  total 118.00")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def sample_png_bytes() -> bytes:
    """Generate a small RGB PNG image."""
    image = Image.new("RGB", (40, 20), color=(200, 100, 50))
    buf = io.BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture()
def sample_xlsx_bytes() -> bytes:
    """Generate a two-sheet workbook with a header row, data and a blank row."""
    workbook = Workbook()
    items = workbook.active
    items.title = "Items"
    items.append(["Product Name", "Qty", "Unit Price"])
    items.append(["Widget", 2, 9.5])
    items.append([None, None, None])
    items.append(["Gadget", None, 12])
    summary = workbook.create_sheet("Summary")
    summary.append(["Total"])
    summary.append([31])
    buf = io.BytesIO()
    workbook.save(buf)
    return buf.getvalue()


@pytest.fixture()
def structured_document() -> dict[str, object]:
    """A well-formed structured document as returned by the AI provider."""
    return {
        "invoice": {
            "serialNumber": "INV-001",
            "date": "2024-11-12",
            "customerName": "Acme",
            "totalAmount": 118,
            "tax": 18,
        },
        "products": [
            {"name": "Widget", "quantity": 2, "unitPrice": 50, "tax": 18, "priceWithTax": 118},
        ],
        "customer": {"name": "Acme", "phone": None, "totalPurchaseAmount": 118},
        "missingFields": ["customer.phone"],
    }
