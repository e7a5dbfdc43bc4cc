"""
Services package for the research portal.

Contains:
- pdf_service: PDF to text extraction
- ai: LLM completion client and the financial/earnings orchestrators
- export_service: Spreadsheet export of financial line items
"""

from .export_service import export_line_items_xlsx
from .pdf_service import ExtractionError, PDFService

__all__ = ["ExtractionError", "PDFService", "export_line_items_xlsx"]
