"""Spreadsheet export of financial line items."""

import io
import logging
from collections.abc import Sequence

import openpyxl
from openpyxl.styles import Font

from ..models import FinancialLineItem

logger = logging.getLogger(__name__)

SHEET_TITLE = "Financial Data"
COLUMNS = ["category", "lineItem", "value", "currency", "unit", "period", "confidence", "notes"]
MISSING_VALUE = "Not found"


def line_item_row(item: FinancialLineItem) -> list:
    """One spreadsheet row for a line item. A null value is written as "Not found"."""
    return [
        item.category,
        item.line_item,
        item.value if item.value is not None else MISSING_VALUE,
        item.currency,
        item.unit,
        item.period or "",
        item.confidence.value,
        item.notes or "",
    ]


def export_line_items_xlsx(line_items: Sequence[FinancialLineItem]) -> bytes:
    """Render line items as an .xlsx workbook and return its bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE

    ws.append(COLUMNS)
    for item in line_items:
        ws.append(line_item_row(item))
    _style_header(ws)

    buffer = io.BytesIO()
    wb.save(buffer)
    logger.info("Exported %d line items to spreadsheet", len(line_items))
    return buffer.getvalue()


def _style_header(ws) -> None:
    """Bold the header row."""
    for cell in ws[1]:
        cell.font = Font(bold=True)
