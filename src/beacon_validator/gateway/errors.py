"""
Gateway errors.
"""

from typing import Any


class TransportError(Exception):
    """A beacon query could not be completed.

    Carries the attempted operation and its parameters so the failure can be
    logged and reported with the exact query that broke.
    """

    def __init__(
        self,
        operation: str,
        params: dict[str, Any],
        message: str,
        status_code: int | None = None,
        url: str | None = None,
    ):
        self.operation = operation
        self.params = dict(params)
        self.message = message
        self.status_code = status_code
        self.url = url
        super().__init__(str(self))

    def __str__(self) -> str:
        status = f" (HTTP {self.status_code})" if self.status_code is not None else ""
        return f"{self.operation} failed{status}: {self.message} [params={self.params}]"

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": self.operation,
            "params": self.params,
            "message": self.message,
            "status_code": self.status_code,
            "url": self.url,
        }
