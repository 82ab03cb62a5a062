from __future__ import annotations

from ..domain.exceptions import Failure, FailureKind
from ..domain.models import (
    REPOSITORY_TYPE,
    AuthorizationRedirect,
    HookOutcome,
    HookRequest,
)
from ..domain.repository_ref import resolve_repository
from ..ports import LoggerPort
from ..services import ConnectionSelector, HookRegistrationOrchestrator, is_connection_to_host


class AddHookUseCase:
    """Use case for registering the CI webhook on a repository.

    Validates the request, resolves the repository and its connections, and
    hands over to the orchestrator. Nothing remote happens before every
    check here has passed.
    """

    def __init__(
        self,
        *,
        selector: ConnectionSelector,
        orchestrator: HookRegistrationOrchestrator,
        logger: LoggerPort,
    ) -> None:
        self._selector = selector
        self._orchestrator = orchestrator
        self._logger = logger

    def execute(self, request: HookRequest) -> HookOutcome | AuthorizationRedirect | Failure:
        """Execute the add flow for one request.

        Args:
            request: Normalized add request

        Returns:
            Orchestration result, or a Failure when the request is rejected
            before any token is looked up
        """
        if request.repository_type != REPOSITORY_TYPE:
            return Failure(FailureKind.UNSUPPORTED_TYPE, "Parameter 'type' has unknown value")

        repository = resolve_repository(request.repository_id)
        if isinstance(repository, Failure):
            return repository

        connections = self._selector.select(
            connection_id=request.connection_id,
            connection_project_id=request.connection_project_id,
            project_id=request.project_id,
            host=repository.host,
        )
        if isinstance(connections, Failure):
            return connections

        # An explicit connection always comes back alone.
        if request.connection_id and not is_connection_to_host(connections[0], repository.host):
            return Failure(
                FailureKind.HOST_MISMATCH,
                f"OAuth connection '{connections[0].label}' server doesn't match "
                f"repository server '{repository.host}'",
            )

        self._logger.info(
            "hook_add_started",
            repository=str(repository),
            repository_id=request.repository_id,
            user=request.user,
            connection_id=request.connection_id or "not specified in request",
            candidates=[c.id for c in connections],
            resumed=request.resumed,
        )
        return self._orchestrator.register(
            request=request,
            repository=repository,
            connections=connections,
        )
