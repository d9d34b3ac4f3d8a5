from .parking_router import router as parking_router
from .receipt_router import router as receipt_router

__all__ = [
    "parking_router",
    "receipt_router",
]
