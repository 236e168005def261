"""DashboardError — base exception class for all zcash-analytics errors."""

from __future__ import annotations


class DashboardError(Exception):
    """Base error for all dashboard operations.

    Attributes:
        message: Human-readable error description.
        status_code: Suggested HTTP status code.
        code: Machine-readable error code string.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 500,
        code: str = "dashboard-error",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class UpstreamError(DashboardError):
    """Error from a public block-data or market-data API."""

    def __init__(self, message: str, *, status_code: int = 502) -> None:
        super().__init__(message, status_code=status_code, code="upstream-error")


class VaultError(DashboardError):
    """Error from the confidential storage network (nilDB / nilauth)."""

    def __init__(self, message: str, *, status_code: int = 502, code: str = "vault-error") -> None:
        super().__init__(message, status_code=status_code, code=code)


class VaultAuthError(VaultError):
    """Authentication or authorization failure (401 / 412 / nilauth unreachable).

    Callers treat this as the signal to fall back to the local demo store.
    """

    def __init__(self, message: str, *, status_code: int = 401) -> None:
        super().__init__(message, status_code=status_code, code="vault-auth-error")
