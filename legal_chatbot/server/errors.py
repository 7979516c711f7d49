"""
API error type.

Endpoints raise ``ApiError`` for every expected failure; the registered
handler renders it as ``{"success": false, "error": ..., **extra}`` with the
given status code, the envelope the web client checks.
"""

from typing import Any, Dict


class ApiError(Exception):
    """An expected API failure with its HTTP status and response fields."""

    def __init__(self, status_code: int, error: str, **extra: Any) -> None:
        super().__init__(error)
        self.status_code = status_code
        self.error = error
        self.extra = extra

    def to_content(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error, **self.extra}
