"""Map parking failures onto HTTP status codes."""
from __future__ import annotations

import logging

from fastapi import HTTPException

from domain.errors import ParkingError

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    "validation": 400,
    "not_found": 404,
    "consistency": 500,
}


def to_http_exception(exc: ParkingError) -> HTTPException:
    status_code = STATUS_BY_KIND.get(exc.kind, 400)
    if status_code >= 500:
        logger.error("Inconsistent parking state: %s", exc.message)
    return HTTPException(status_code=status_code, detail=exc.message)
