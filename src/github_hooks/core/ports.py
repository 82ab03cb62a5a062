from __future__ import annotations

from typing import Protocol, Optional, Sequence

from .domain.models import (
    Connection,
    Credential,
    HookAddResult,
    Project,
    RepositoryReference,
)


class TokenStorePort(Protocol):
    """Port for OAuth credential persistence.

    Implementations must be safe to call from concurrent requests: two users
    may register hooks through the same connection at the same time.
    """

    def find(
        self,
        connections: Sequence[Connection],
        user: str,
    ) -> dict[Connection, list[Credential]]:
        """Return credentials of ``user`` for each connection, in retrieval order.

        Connections without credentials are omitted. Flagged credentials
        come after unflagged ones.
        """
        ...

    def evict(self, connection_id: str, secret: str) -> bool:
        """Permanently remove a credential rejected by the remote service.

        Returns:
            True if a credential was removed
        """
        ...

    def flag(self, credential: Credential) -> None:
        """Mark a credential as lacking the scope needed for hook management."""
        ...

    def save(self, credential: Credential) -> None:
        ...

    def list_all(self) -> list[Credential]:
        ...


class ProjectDirectoryPort(Protocol):
    """Port for the project hierarchy and the OAuth connections it owns."""

    def find_project(self, project_id: str) -> Optional[Project]:
        ...

    def ancestry(self, project_id: str) -> list[Project]:
        """Return the project followed by its ancestors, nearest first."""
        ...

    def connections_of(self, project_id: str) -> list[Connection]:
        """Connections owned directly by the project, in declaration order."""
        ...

    def find_connection(self, project_id: str, connection_id: str) -> Optional[Connection]:
        """Find a connection visible from the project (own or inherited)."""
        ...


class HookRegistrarPort(Protocol):
    """Port for the remote webhook registration call."""

    def attempt(self, repository: RepositoryReference, credential: Credential) -> HookAddResult:
        """Create the CI webhook on the repository, or confirm it is there.

        Raises:
            HookRegistrarError: On timeouts, connection failures and
                malformed responses
        """
        ...


class LoggerPort(Protocol):
    """Port for structured logging.

    Structured fields are passed as keyword arguments.
    """

    def debug(self, message: str, **fields) -> None:
        ...

    def info(self, message: str, **fields) -> None:
        ...

    def warning(self, message: str, **fields) -> None:
        ...

    def error(self, message: str, exc_info: bool = False, **fields) -> None:
        ...

    def exception(self, message: str, **fields) -> None:
        ...
