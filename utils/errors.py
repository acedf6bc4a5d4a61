from __future__ import annotations

from typing import Any, Dict, List


class ValidationFailed(Exception):
    """Request body did not validate; ``errors`` lists ``{"path", "message"}`` items."""

    def __init__(self, errors: List[Dict[str, Any]], message: str = "Error de validación"):
        super().__init__(message)
        self.message = message
        self.errors = errors


class PaymentNotFound(Exception):
    def __init__(self, guardian_id: int, month: str, year: int):
        super().__init__(f"No payment for guardian {guardian_id} in {month} {year}")
        self.guardian_id = guardian_id
        self.month = month
        self.year = year


class ReceiptRejected(ValueError):
    """Uploaded receipt has a content type we do not store."""
