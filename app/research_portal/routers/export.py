"""
Router for export endpoints.

Handles:
- Download of financial line items as an Excel workbook
"""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ..models import DownloadFinancialRequest
from ..services.export_service import export_line_items_xlsx

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["export"])

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.post("/download-financial")
async def download_financial(request: DownloadFinancialRequest) -> Response:
    """
    Export the line items of a financial extraction as an .xlsx file.

    One row per line item; missing values are written as "Not found".
    """
    try:
        content = export_line_items_xlsx(request.data.line_items)
    except Exception as e:
        logger.exception("Excel generation failed")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate Excel file: {e}",
        )

    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={
            "Content-Disposition": 'attachment; filename="financial-data.xlsx"',
        },
    )
