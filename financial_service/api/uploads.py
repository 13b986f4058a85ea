"""
Receipt download endpoint
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import FileResponse

from .auth import get_current_user, get_settings
from .receipts import resolve_receipt
from ..config import FinancialServiceConfig


router = APIRouter(dependencies=[Depends(get_current_user)])


@router.get("/uploads/{filename}")
def get_receipt(
    filename: str,
    config: FinancialServiceConfig = Depends(get_settings)
):
    """Download a stored receipt"""
    receipt = resolve_receipt(filename, config.upload_directory)
    if receipt is None:
        raise HTTPException(status_code=404, detail=f"Receipt {filename} not found")
    return FileResponse(receipt)
