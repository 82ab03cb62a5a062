"""Domain exceptions and failure values for github_hooks."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class FailureKind(str, Enum):
    """Request-level failures with the HTTP status they surface as."""

    MISSING_PARAMETER = "missing_parameter"
    UNSUPPORTED_TYPE = "unsupported_type"
    NOT_A_GITHUB_REFERENCE = "not_a_github_reference"
    HOST_MISMATCH = "host_mismatch"
    NOT_AUTHENTICATED = "not_authenticated"
    PROJECT_NOT_FOUND = "project_not_found"
    CONNECTION_NOT_FOUND = "connection_not_found"
    NO_CONNECTION_CONFIGURED = "no_connection_configured"
    TOKEN_STILL_MISSING = "token_still_missing"
    NOT_IMPLEMENTED = "not_implemented"

    @property
    def code(self) -> int:
        return _CODES[self]


_CODES = {
    FailureKind.MISSING_PARAMETER: 400,
    FailureKind.UNSUPPORTED_TYPE: 400,
    FailureKind.NOT_A_GITHUB_REFERENCE: 400,
    FailureKind.HOST_MISMATCH: 400,
    FailureKind.NOT_AUTHENTICATED: 401,
    FailureKind.PROJECT_NOT_FOUND: 404,
    FailureKind.CONNECTION_NOT_FOUND: 404,
    FailureKind.NO_CONNECTION_CONFIGURED: 404,
    FailureKind.TOKEN_STILL_MISSING: 404,
    FailureKind.NOT_IMPLEMENTED: 501,
}


@dataclass(frozen=True)
class Failure:
    """Expected request failure, returned as a value rather than raised.

    Every step that can reject a request returns either its result or a
    Failure; callers check with isinstance before proceeding.
    """
    kind: FailureKind
    message: str

    @property
    def code(self) -> int:
        return self.kind.code


class HookRegistrarError(Exception):
    """Raised when the remote service could not be reached or answered nonsense.

    Covers timeouts, connection errors and malformed or unexpected responses.
    The orchestrator treats it as a skipped attempt, never as an outcome.
    """

    def __init__(self, message: str, reason: str = "transport_error") -> None:
        self.reason = reason
        super().__init__(message)


class TokenStoreError(Exception):
    """Raised when persisted token data cannot be read."""
