"""External service adapters."""

from fintrack.services.receipt_scanner import (
    ReceiptScanner,
    parse_receipt_reply,
    strip_code_fences,
)

__all__ = [
    "ReceiptScanner",
    "parse_receipt_reply",
    "strip_code_fences",
]
