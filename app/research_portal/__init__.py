"""
Research Portal Backend Application.

A FastAPI service that extracts text from financial PDF documents and uses
an LLM (OpenAI) to produce structured financial line items or an earnings
call analysis.
"""

__version__ = "1.0.0"
