"""Receipt scanning through Google Gemini.

The scanner sends a receipt image with a fixed prompt and turns the model's
freeform reply into a fully populated ``ReceiptScan``. It only suggests
transaction data; it never writes to the ledger.
"""

import json
import re
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Callable, Optional, Protocol

import google.generativeai as genai
import structlog

from fintrack.config import GeminiSettings, get_settings
from fintrack.domain.entities import ReceiptScan
from fintrack.domain.errors import (
    ExternalServiceError,
    ReceiptConfigurationError,
    ReceiptExtractionError,
    ReceiptScanError,
)
from fintrack.utils.amount_parser import coerce_amount
from fintrack.utils.date_parser import parse_timestamp

logger = structlog.get_logger(__name__)

DEFAULT_MIME_TYPE = "image/jpeg"
DEFAULT_DESCRIPTION = "No Description"
DEFAULT_MERCHANT = "Unknown"
DEFAULT_CATEGORY = "Misc"

RECEIPT_PROMPT = """Read this receipt image and return only a JSON object in this exact format:
{
  "amount": number,
  "date": "ISO 8601 string",
  "description": "string",
  "merchantName": "string",
  "category": "string"
}"""

_FENCE_RE = re.compile(r"```(?:json)?", re.IGNORECASE)


class GenerativeModel(Protocol):
    """The part of ``genai.GenerativeModel`` the scanner relies on."""

    def generate_content(self, contents: Any) -> Any:
        ...


def strip_code_fences(text: str) -> str:
    """Remove Markdown code fences (```json ... ```) around a reply."""
    return _FENCE_RE.sub("", text).strip()


def _text_or_default(value: Any, default: str) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def parse_receipt_reply(text: str, now: Optional[Callable[[], datetime]] = None) -> ReceiptScan:
    """Turn the model's reply into a ``ReceiptScan``.

    Missing or malformed fields fall back to defaults: amount 0, date now,
    "No Description", "Unknown" merchant and "Misc" category. Dates without a
    time zone are taken as UTC.

    Args:
        text: Raw reply text, optionally wrapped in a code fence
        now: Clock used for the default date

    Raises:
        ReceiptExtractionError: If the reply is not a JSON object
    """
    clean = strip_code_fences(text or "")
    try:
        data = json.loads(clean)
    except json.JSONDecodeError as e:
        raise ReceiptExtractionError(f"Invalid JSON in receipt reply: {e}") from e
    except RecursionError as e:
        raise ReceiptExtractionError("Receipt reply is nested too deeply") from e
    if not isinstance(data, dict):
        raise ReceiptExtractionError(
            f"Expected a JSON object in receipt reply, got {type(data).__name__}"
        )

    amount = coerce_amount(data.get("amount"))
    scanned_at = parse_timestamp(data.get("date"))
    if scanned_at is None:
        scanned_at = now() if now is not None else datetime.now(UTC)
    elif scanned_at.tzinfo is None:
        scanned_at = scanned_at.replace(tzinfo=UTC)

    return ReceiptScan(
        amount=amount if amount is not None else Decimal("0"),
        date=scanned_at,
        description=_text_or_default(data.get("description"), DEFAULT_DESCRIPTION),
        merchant_name=_text_or_default(data.get("merchantName"), DEFAULT_MERCHANT),
        category=_text_or_default(data.get("category"), DEFAULT_CATEGORY),
    )


class ReceiptScanner:
    """Extracts suggested transaction data from receipt images."""

    def __init__(self, model: GenerativeModel):
        """Initialize the scanner.

        Args:
            model: Configured generative model (see ``from_settings``)
        """
        self._model = model

    @classmethod
    def from_settings(cls, settings: Optional[GeminiSettings] = None) -> "ReceiptScanner":
        """Build a scanner backed by Gemini.

        Raises:
            ReceiptConfigurationError: If no API key is configured
        """
        settings = settings or get_settings().gemini
        if not settings.api_key:
            raise ReceiptConfigurationError("Missing GEMINI_API_KEY")

        genai.configure(api_key=settings.api_key)
        model = genai.GenerativeModel(
            model_name=settings.model_name,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_output_tokens,
            },
        )
        return cls(model)

    def _request(self, image: bytes, mime_type: str) -> str:
        try:
            response = self._model.generate_content(
                [{"mime_type": mime_type, "data": image}, RECEIPT_PROMPT]
            )
            return response.text
        except Exception as e:
            raise ExternalServiceError(f"Receipt service call failed: {e}") from e

    def scan(self, image: bytes, mime_type: Optional[str] = None) -> ReceiptScan:
        """Scan a receipt image.

        Args:
            image: Image bytes (size limits are enforced by the caller)
            mime_type: Declared MIME type, ``image/jpeg`` if not given

        Returns:
            Fully populated receipt data

        Raises:
            ReceiptScanError: On any failure; the cause is chained and logged
        """
        mime_type = mime_type or DEFAULT_MIME_TYPE
        logger.info("receipt_scan_started", size=len(image), mime_type=mime_type)
        try:
            if not image:
                raise ReceiptExtractionError("Empty receipt image")
            reply = self._request(image, mime_type)
            logger.debug("receipt_scan_reply", reply=reply)
            result = parse_receipt_reply(reply)
        except ExternalServiceError as e:
            logger.error(
                "receipt_scan_failed",
                error_type=type(e).__name__,
                error=str(e),
                exc_info=True,
            )
            raise ReceiptScanError("Failed to scan receipt") from e

        logger.info("receipt_scan_completed", merchant=result.merchant_name, amount=str(result.amount))
        return result
