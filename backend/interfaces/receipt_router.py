"""Receipt lookup and printable download."""
from __future__ import annotations

from typing import Any, Dict

from fastapi import APIRouter, Query
from fastapi.responses import HTMLResponse

from domain.errors import ParkingError
from interfaces import deps
from interfaces.http_errors import to_http_exception
from interfaces.serializers import serialize_receipt

router = APIRouter(prefix="/api", tags=["receipt"])


@router.get("/receipt")
def get_receipt(registrationNumber: str = Query(..., min_length=1)) -> Dict[str, Any]:
    try:
        receipt = deps.parking_service.get_receipt(registrationNumber)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    return serialize_receipt(receipt)


@router.get("/download-receipt", response_class=HTMLResponse)
def download_receipt(registrationNumber: str = Query(..., min_length=1)) -> HTMLResponse:
    try:
        document = deps.parking_service.render_receipt(registrationNumber)
    except ParkingError as exc:
        raise to_http_exception(exc) from exc
    return HTMLResponse(
        content=document,
        headers={"Content-Disposition": f"inline; filename=receipt_{registrationNumber}.html"},
    )
