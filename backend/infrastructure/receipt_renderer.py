"""Printable receipt document (HTML sized for an 80mm thermal roll)."""
from __future__ import annotations

from abc import ABC, abstractmethod
from html import escape

from domain.receipt import Receipt

RECEIPT_DATE_FORMAT = "%d/%m/%Y %H:%M:%S"

_TEMPLATE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<title>Parking Receipt {registration}</title>
<style>
body {{ font-family: Arial, sans-serif; margin: 0; padding: 0; text-align: center; }}
.container {{ width: 90%; margin: 0 auto; padding: 5px; border: 1px solid #000; }}
h1 {{ font-size: 14px; margin-bottom: 5px; }}
.details {{ text-align: left; margin-bottom: 5px; }}
.details p {{ margin: 2px 0; font-size: 9px; }}
.code {{ font-family: monospace; font-size: 12px; letter-spacing: 2px; }}
@page {{ size: 90.5mm 100mm; margin: 0; }}
@media print {{ h1, .details p {{ font-size: 12px; }} }}
</style>
</head>
<body>
<div class="container">
    <h1>Parking Receipt</h1>
    <div class="details">
        <p><strong>Registration Number:</strong> {registration}</p>
        <p><strong>Vehicle Type:</strong> {category}</p>
        <p><strong>Owner Name:</strong> {owner}</p>
        <p><strong>Phone Number:</strong> {phone}</p>
        <p><strong>Total Duration:</strong> {duration} minutes</p>
        <p><strong>Amount:</strong> Rs {amount}</p>
        <p><strong>Receipt Date:</strong> {date}</p>
        <p><strong>Status:</strong> {status}</p>
    </div>
    <div class="code">{registration}</div>
</div>
</body>
</html>
"""


class ReceiptRenderer(ABC):
    @abstractmethod
    def render(self, receipt: Receipt) -> str:
        raise NotImplementedError


class HtmlReceiptRenderer(ReceiptRenderer):
    def render(self, receipt: Receipt) -> str:
        return _TEMPLATE.format(
            registration=escape(receipt.registration_number),
            category=escape(receipt.vehicle_category.value),
            owner=escape(receipt.owner_name),
            phone=escape(receipt.phone_number),
            duration=receipt.duration_minutes,
            amount=f"{receipt.amount:.2f}",
            date=receipt.receipt_date.strftime(RECEIPT_DATE_FORMAT),
            status=receipt.status.value,
        )
