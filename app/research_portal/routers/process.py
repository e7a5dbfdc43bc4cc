"""
Router for document processing endpoints.

Handles:
- PDF upload, text extraction and dispatch to the selected analysis tool
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from ..config import Settings, get_settings
from ..models import ProcessResponse, ToolType
from ..services.ai import (
    CompletionClient,
    ConfigurationError,
    analyze_earnings_call,
    extract_financial_statements,
    get_completion_client,
)
from ..services.pdf_service import ExtractionError, PDFService, get_pdf_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["process"])


@router.post("/process", response_model=ProcessResponse)
async def process_document(
    document: Annotated[UploadFile | None, File(description="PDF document to analyze")] = None,
    tool_type: Annotated[str | None, Form(alias="toolType")] = None,
    pdf_service: PDFService = Depends(get_pdf_service),
    client: CompletionClient = Depends(get_completion_client),
    settings: Settings = Depends(get_settings),
) -> ProcessResponse:
    """
    Upload a PDF and run one analysis tool over its text.

    ``toolType`` selects the tool: "financial" extracts statement line
    items, "earnings" analyzes management commentary.
    """
    if document is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No document uploaded",
        )

    try:
        tool = ToolType(tool_type)
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail='Invalid tool type. Must be "financial" or "earnings"',
        )

    filename = document.filename or "document.pdf"
    if not filename.lower().endswith(".pdf"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Only PDF files are accepted",
        )

    try:
        file_bytes = await document.read()

        if not file_bytes:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Empty file provided",
            )

        if len(file_bytes) > settings.max_upload_bytes:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds the {settings.max_upload_bytes // (1024 * 1024)}MB upload limit",
            )

        logger.info(
            "Processing %s (%d bytes) with tool: %s", filename, len(file_bytes), tool.value
        )

        try:
            text = pdf_service.extract_text(file_bytes)
        except ExtractionError as e:
            logger.warning("Text extraction failed for %s: %s", filename, e)
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Failed to extract text from PDF. Ensure the file is a valid PDF. ({e})",
            )

        if not text.strip():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="PDF appears to be empty or unreadable",
            )

        try:
            if tool is ToolType.FINANCIAL:
                result = await extract_financial_statements(text, client)
            else:
                result = await analyze_earnings_call(text, client)
        except ConfigurationError as e:
            logger.error("AI service not configured: %s", e)
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=f"AI service error: {e}",
            )

        return ProcessResponse(
            success=True,
            filename=filename,
            tool_type=tool,
            result=result,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Unexpected error processing %s", filename)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Processing failed: {e}",
        )
    finally:
        await document.close()
