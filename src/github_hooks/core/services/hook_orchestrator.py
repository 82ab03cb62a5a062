from __future__ import annotations

from typing import Sequence

from ..domain.exceptions import Failure, FailureKind, HookRegistrarError
from ..domain.models import (
    EXHAUSTED,
    AuthorizationRedirect,
    Connection,
    Credential,
    DeferredCallState,
    HookAddResult,
    HookOutcome,
    HookRequest,
    RepositoryReference,
)
from ..ports import HookRegistrarPort, LoggerPort
from .authorization import AuthorizationLinks
from .connection_selector import pick_primary
from .token_service import TokenHealingPass, TokenService


MAX_RESOLUTION_ROUNDS = 3

_MESSAGES = {
    HookAddResult.CREATED: "Created hook for repository '{repo}'",
    HookAddResult.ALREADY_EXISTS: "Hook for repository '{repo}' already exists, updated info",
    HookAddResult.TOKEN_SCOPE_MISMATCH: "Token scope does not cover hooks management",
    HookAddResult.NO_ACCESS: "No access to repository '{repo}'",
    HookAddResult.USER_HAVE_NO_ACCESS: "You don't have access to '{repo}'",
}


class HookRegistrationOrchestrator:
    """Drives webhook registration across every usable credential.

    Flow per round: fetch tokens for the candidate connections; with no
    tokens either suspend through an authorization redirect (fresh call) or
    record that authorization did not help (resumed call); otherwise try
    each credential until one gives a conclusive answer. Rounds are bounded
    by MAX_RESOLUTION_ROUNDS and re-read the store each time.
    """

    def __init__(
        self,
        *,
        tokens: TokenService,
        registrar: HookRegistrarPort,
        links: AuthorizationLinks,
        logger: LoggerPort,
    ) -> None:
        self._tokens = tokens
        self._registrar = registrar
        self._links = links
        self._logger = logger

    def register(
        self,
        *,
        request: HookRequest,
        repository: RepositoryReference,
        connections: Sequence[Connection],
    ) -> HookOutcome | AuthorizationRedirect | Failure:
        """Register the hook using the first credential that gives an answer.

        Args:
            request: Normalized add request, possibly resumed after authorization
            repository: Target repository
            connections: Non-empty candidate connections, nearest project first

        Returns:
            Terminal outcome, an authorization redirect when a fresh call has
            no token, or a Failure when a resumed call still finds none
        """
        primary = pick_primary(connections)
        healing = self._tokens.new_pass()
        postponed: Failure | None = None

        for round_no in range(1, MAX_RESOLUTION_ROUNDS + 1):
            tokens = self._tokens.tokens_for(connections, request.user)
            if not tokens:
                self._logger.info(
                    "no_token_found",
                    repository=str(repository),
                    connection_id=primary.id,
                    round=round_no,
                    resumed=request.resumed,
                )
                if request.resumed:
                    # Already back from authorization; redirecting again would loop.
                    postponed = Failure(
                        FailureKind.TOKEN_STILL_MISSING,
                        f"Cannot find token in connection {primary.label}.\n"
                        "Ensure connection configured correctly",
                    )
                    continue
                return self._suspend(request, primary)

            outcome = self._attempt_all(request, repository, tokens, healing)
            if outcome is not None:
                return outcome

        if postponed is not None:
            return postponed
        self._logger.warning(
            "hook_attempts_exhausted",
            repository=str(repository),
            rounds=MAX_RESOLUTION_ROUNDS,
            evicted=healing.evicted_count,
        )
        return HookOutcome(
            result=EXHAUSTED,
            message=f"Could not register hook for repository '{repository}': no usable token left",
            repository=repository,
        )

    def _attempt_all(
        self,
        request: HookRequest,
        repository: RepositoryReference,
        tokens: dict[Connection, list[Credential]],
        healing: TokenHealingPass,
    ) -> HookOutcome | None:
        for connection, credentials in tokens.items():
            for credential in credentials:
                if healing.is_retired(credential):
                    continue
                self._logger.info(
                    "hook_attempt",
                    repository=str(repository),
                    user=credential.user,
                    connection_id=connection.id,
                    token=credential.redacted(),
                )
                try:
                    result = self._registrar.attempt(repository, credential)
                except HookRegistrarError as e:
                    self._logger.warning(
                        "registrar_transport_error",
                        repository=str(repository),
                        connection_id=connection.id,
                        reason=e.reason,
                        detail=str(e),
                    )
                    continue

                if result is HookAddResult.INVALID_CREDENTIALS:
                    healing.evict(credential)
                    continue
                if result is HookAddResult.TOKEN_SCOPE_MISMATCH:
                    healing.flag(credential)
                return self._terminal(result, repository)
        return None

    def _terminal(self, result: HookAddResult, repository: RepositoryReference) -> HookOutcome:
        outcome = HookOutcome(
            result=result.value,
            message=_MESSAGES[result].format(repo=repository),
            repository=repository,
        )
        self._logger.info("hook_terminal", repository=str(repository), result=outcome.result)
        return outcome

    def _suspend(self, request: HookRequest, primary: Connection) -> AuthorizationRedirect:
        state = DeferredCallState(
            original_action=request.action,
            repository_type=request.repository_type,
            repository_id=request.repository_id,
            connection_id=primary.id,
            connection_project_id=primary.project_id,
            popup=request.popup,
            project_id=request.project_id,
        )
        url = self._links.obtain_token_url(primary, state)
        self._logger.info(
            "authorization_required",
            connection_id=primary.id,
            project_id=primary.project_id,
            repository_id=request.repository_id,
        )
        return AuthorizationRedirect(url=url)
