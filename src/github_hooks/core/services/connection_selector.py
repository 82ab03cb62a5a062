from __future__ import annotations

from typing import Sequence

from ..domain.exceptions import Failure, FailureKind
from ..domain.models import Connection
from ..domain.repository_ref import normalize_host
from ..ports import ProjectDirectoryPort


def pick_primary(candidates: Sequence[Connection]) -> Connection:
    """Connection from the most nested project; candidates must be non-empty."""
    return candidates[0]


def is_connection_to_host(connection: Connection, host: str) -> bool:
    return normalize_host(connection.host) == normalize_host(host)


class ConnectionSelector:
    """Picks the OAuth connections usable for a repository host.

    An explicit connection wins. Otherwise every connection of the caller's
    project and its ancestors pointing at the host is a candidate, ordered
    nearest project first.
    """

    def __init__(self, *, directory: ProjectDirectoryPort) -> None:
        self._directory = directory

    def find_explicit(
        self,
        *,
        connection_id: str | None,
        connection_project_id: str | None,
        project_id: str | None = None,
    ) -> Connection | Failure | None:
        """Look up the connection named by the request, if it names one.

        Returns:
            None when no explicit connection was requested
        """
        owner_project_id = connection_project_id or project_id
        if not connection_id or not owner_project_id:
            return None

        project = self._directory.find_project(owner_project_id)
        if project is None:
            return Failure(
                FailureKind.PROJECT_NOT_FOUND,
                f"There is no project with id '{owner_project_id}'",
            )
        connection = self._directory.find_connection(project.id, connection_id)
        if connection is None:
            return Failure(
                FailureKind.CONNECTION_NOT_FOUND,
                f"There is no connection with id '{connection_id}' in project '{project.name}'",
            )
        return connection

    def find_for_host(self, *, project_id: str | None, host: str) -> list[Connection] | Failure:
        """Collect connections to a host from a project and its ancestors.

        Args:
            project_id: Project the request is made in
            host: Repository host to match connections against

        Returns:
            Matching connections, nearest project first, or a Failure when the
            project is unknown or no connection points at the host
        """
        if not project_id:
            return Failure(FailureKind.MISSING_PARAMETER, "Required parameter 'projectId' is missing")
        project = self._directory.find_project(project_id)
        if project is None:
            return Failure(
                FailureKind.PROJECT_NOT_FOUND,
                f"There is no project with id '{project_id}'",
            )

        candidates: list[Connection] = []
        for owner in self._directory.ancestry(project.id):
            for connection in self._directory.connections_of(owner.id):
                if is_connection_to_host(connection, host):
                    candidates.append(connection)

        if not candidates:
            return Failure(
                FailureKind.NO_CONNECTION_CONFIGURED,
                f"No OAuth connection found for GitHub server '{host}' in project "
                f"'{project.name}' and its parents, configure it first",
            )
        return candidates

    def select(
        self,
        *,
        connection_id: str | None,
        connection_project_id: str | None,
        project_id: str | None,
        host: str,
    ) -> list[Connection] | Failure:
        """Resolve the ordered candidate list.

        An explicit connection is returned as-is; matching its host against
        the repository is left to the caller.
        """
        explicit = self.find_explicit(
            connection_id=connection_id,
            connection_project_id=connection_project_id,
            project_id=project_id,
        )
        if explicit is None:
            return self.find_for_host(project_id=project_id, host=host)
        if isinstance(explicit, Failure):
            return explicit
        return [explicit]
