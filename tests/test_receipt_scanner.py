"""Tests for receipt scanning."""

import pytest
from datetime import datetime, UTC
from decimal import Decimal

from fintrack.config import GeminiSettings
from fintrack.domain.errors import (
    ReceiptConfigurationError,
    ReceiptExtractionError,
    ReceiptScanError,
)
from fintrack.services.receipt_scanner import (
    RECEIPT_PROMPT,
    ReceiptScanner,
    parse_receipt_reply,
    strip_code_fences,
)

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)


class FakeResponse:
    def __init__(self, text):
        self.text = text


class FakeModel:
    """Stands in for a Gemini GenerativeModel."""

    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.requests = []

    def generate_content(self, contents):
        self.requests.append(contents)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.reply)


class TestStripCodeFences:
    def test_json_fence(self):
        assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_code_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_code_fences('  {"a": 1} ') == '{"a": 1}'


class TestParseReceiptReply:
    """Tests for parse_receipt_reply."""

    def test_full_reply(self):
        reply = (
            '{"amount": 23.45, "date": "2024-03-02T10:15:00Z", "description": "Lunch",'
            ' "merchantName": "Cafe Blue", "category": "Dining"}'
        )
        scan = parse_receipt_reply(reply)

        assert scan.amount == Decimal("23.45")
        assert scan.date == datetime(2024, 3, 2, 10, 15, tzinfo=UTC)
        assert scan.description == "Lunch"
        assert scan.merchant_name == "Cafe Blue"
        assert scan.category == "Dining"

    def test_partial_fenced_reply_uses_defaults(self):
        """Only an amount is present; everything else falls back."""
        scan = parse_receipt_reply('```json\n{"amount":"12.5"}\n```', now=lambda: FIXED_NOW)

        assert scan.amount == Decimal("12.5")
        assert scan.date == FIXED_NOW
        assert scan.description == "No Description"
        assert scan.merchant_name == "Unknown"
        assert scan.category == "Misc"

    def test_unparseable_fields_fall_back(self):
        scan = parse_receipt_reply(
            '{"amount": "lots", "date": "sometime", "merchantName": "  "}', now=lambda: FIXED_NOW
        )
        assert scan.amount == Decimal("0")
        assert scan.date == FIXED_NOW
        assert scan.merchant_name == "Unknown"

    def test_formatted_amount_string(self):
        scan = parse_receipt_reply('{"amount": "$1,234.50"}', now=lambda: FIXED_NOW)
        assert scan.amount == Decimal("1234.50")

    def test_invalid_json(self):
        with pytest.raises(ReceiptExtractionError, match="Invalid JSON"):
            parse_receipt_reply("I could not read this receipt")

    def test_zone_less_date_is_utc(self):
        scan = parse_receipt_reply('{"date": "2024-03-02T10:15:00"}')
        assert scan.date == datetime(2024, 3, 2, 10, 15, tzinfo=UTC)
        assert scan.date.tzinfo is not None

    def test_deeply_nested_reply(self):
        with pytest.raises(ReceiptExtractionError, match="nested too deeply"):
            parse_receipt_reply("[" * 100000 + "]" * 100000)

    def test_non_object_reply(self):
        with pytest.raises(ReceiptExtractionError, match="Expected a JSON object"):
            parse_receipt_reply("[1, 2, 3]")


class TestReceiptScanner:
    """Tests for ReceiptScanner.scan."""

    def test_scan_sends_image_and_prompt(self):
        model = FakeModel(reply='{"amount": 9.99, "merchantName": "Corner Shop"}')
        scanner = ReceiptScanner(model)

        scan = scanner.scan(b"\xff\xd8image-bytes", mime_type="image/png")

        assert scan.amount == Decimal("9.99")
        assert scan.merchant_name == "Corner Shop"
        assert model.requests == [
            [{"mime_type": "image/png", "data": b"\xff\xd8image-bytes"}, RECEIPT_PROMPT]
        ]

    def test_default_mime_type(self):
        model = FakeModel(reply='{"amount": 1}')
        ReceiptScanner(model).scan(b"data")
        assert model.requests[0][0]["mime_type"] == "image/jpeg"

    def test_service_failure_is_wrapped(self):
        cause = RuntimeError("quota exceeded")
        scanner = ReceiptScanner(FakeModel(error=cause))

        with pytest.raises(ReceiptScanError, match="Failed to scan receipt") as exc_info:
            scanner.scan(b"data")
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.__cause__.__cause__ is cause

    def test_bad_reply_is_wrapped(self):
        scanner = ReceiptScanner(FakeModel(reply="not json"))

        with pytest.raises(ReceiptScanError) as exc_info:
            scanner.scan(b"data")
        assert isinstance(exc_info.value.__cause__, ReceiptExtractionError)

    def test_deeply_nested_reply_is_wrapped(self):
        scanner = ReceiptScanner(FakeModel(reply="[" * 100000 + "]" * 100000))

        with pytest.raises(ReceiptScanError) as exc_info:
            scanner.scan(b"img")
        assert isinstance(exc_info.value.__cause__, ReceiptExtractionError)

    def test_empty_image(self):
        model = FakeModel(reply="{}")
        with pytest.raises(ReceiptScanError):
            ReceiptScanner(model).scan(b"")
        assert model.requests == []


class TestFromSettings:
    def test_missing_api_key(self):
        with pytest.raises(ReceiptConfigurationError, match="GEMINI_API_KEY"):
            ReceiptScanner.from_settings(GeminiSettings(api_key=None))

    def test_builds_gemini_model(self, monkeypatch):
        import fintrack.services.receipt_scanner as receipt_scanner

        calls = {}

        def fake_configure(api_key):
            calls["api_key"] = api_key

        def fake_model(model_name, generation_config):
            calls["model_name"] = model_name
            return FakeModel(reply='{"amount": 5}')

        monkeypatch.setattr(receipt_scanner.genai, "configure", fake_configure)
        monkeypatch.setattr(receipt_scanner.genai, "GenerativeModel", fake_model)

        scanner = ReceiptScanner.from_settings(GeminiSettings(api_key="test-key", model_name="gemini-test"))

        assert calls == {"api_key": "test-key", "model_name": "gemini-test"}
        assert scanner.scan(b"data").amount == Decimal("5")
