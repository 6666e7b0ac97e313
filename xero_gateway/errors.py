"""Exceptions raised by the Xero gateway package."""
from __future__ import annotations

from typing import List, Optional

__all__ = ["NoGatewayError", "XeroApiError"]


class NoGatewayError(RuntimeError):
    """Raised when a record is written without an attached gateway."""

    def __init__(self, message: str = "no gateway configured for this record") -> None:
        super().__init__(message)


class XeroApiError(RuntimeError):
    """The API rejected a request and returned an ``<ApiException>`` body."""

    def __init__(
        self,
        message: str,
        *,
        error_number: Optional[int] = None,
        error_type: Optional[str] = None,
        validation_errors: Optional[List[str]] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_number = error_number
        self.error_type = error_type
        self.validation_errors = list(validation_errors or [])
        self.status_code = status_code

    def __str__(self) -> str:
        if self.validation_errors:
            return f"{self.message}: {'; '.join(self.validation_errors)}"
        return self.message
