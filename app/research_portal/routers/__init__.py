"""
Routers package for FastAPI endpoints.

Organized by domain:
- process: Document upload and analysis
- export: Spreadsheet download of extracted line items
"""

from . import export, process

__all__ = ["export", "process"]
