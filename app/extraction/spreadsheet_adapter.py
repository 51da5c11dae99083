import io
import re

import pandas as pd

from app.extraction.base import BaseTextExtractor, ProgressCallback
from app.extraction.exceptions import SpreadsheetExtractionError

_WHITESPACE_RE = re.compile(r"\s+")
_EMPTY_CELL = "N/A"
_RULE = "-" * 50


def _is_empty(cell: object) -> bool:
    if cell is None:
        return True
    if isinstance(cell, str):
        return cell == ""
    try:
        return bool(pd.isna(cell))
    except (TypeError, ValueError):
        return False


def _render_cell(cell: object) -> str:
    if _is_empty(cell):
        return _EMPTY_CELL
    if isinstance(cell, float) and cell.is_integer():
        return str(int(cell))
    return str(cell)


def _normalize_header(cell: object) -> str:
    if _is_empty(cell):
        return ""
    return _WHITESPACE_RE.sub("_", _render_cell(cell).strip().lower())


class SpreadsheetAdapter(BaseTextExtractor):
    """Renders every sheet of an .xlsx/.xls workbook as pipe-delimited text.

    Each sheet becomes a ``=== Sheet: <name> ===`` block whose first row is
    treated as normalized headers; blank rows are skipped and empty cells are
    written as ``N/A`` so column positions survive.
    """

    def extract(
        self,
        content: bytes,
        on_progress: ProgressCallback | None = None,
    ) -> str:
        try:
            sheets = pd.read_excel(
                io.BytesIO(content),
                sheet_name=None,
                header=None,
                dtype=object,
            )
        except Exception as exc:
            raise SpreadsheetExtractionError(
                f"Failed to parse Excel file: {exc}"
            ) from exc

        blocks: list[str] = []
        for index, (sheet_name, frame) in enumerate(sheets.items()):
            block = self._render_sheet(str(sheet_name), frame)
            if block:
                blocks.append(block)
            if on_progress is not None:
                on_progress((index + 1) / len(sheets))
        return "\n\n".join(blocks).strip()

    @staticmethod
    def _render_sheet(sheet_name: str, frame: pd.DataFrame) -> str:
        rows = frame.dropna(how="all").values.tolist()
        if not rows:
            return ""
        headers = [_normalize_header(cell) for cell in rows[0]]
        lines = [f"=== Sheet: {sheet_name} ===", " | ".join(headers), _RULE]
        lines.extend(" | ".join(_render_cell(cell) for cell in row) for row in rows[1:])
        return "\n".join(lines)
