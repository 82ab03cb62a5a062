from __future__ import annotations

from typing import Mapping

from ..domain.exceptions import Failure, FailureKind
from ..domain.models import CallerContext, DeferredCallState, HookRequest, parse_bool
from ..ports import LoggerPort
from ..services import ResponseEnvelope, encode
from .add_hook import AddHookUseCase


ADD = "add"
CONTINUE = "continue"
CHECK = "check"
CHECK_ALL = "check-all"
DELETE = "delete"

PENDING_ACTIONS = (CHECK, CHECK_ALL, DELETE)


class ActionDispatcher:
    """Routes an inbound action to its flow and encodes the result.

    ``continue`` is the re-entry after the authorization redirect: it runs
    the original action again, marked as resumed so it cannot suspend twice.
    """

    def __init__(self, *, add_hook: AddHookUseCase, logger: LoggerPort) -> None:
        self._add_hook = add_hook
        self._logger = logger

    def dispatch(
        self,
        action: str | None,
        params: Mapping[str, str],
        caller: CallerContext,
    ) -> ResponseEnvelope | None:
        """Handle one request.

        Args:
            action: Requested action; None means add
            params: Request parameters, including the deferred state for continue
            caller: Identity of the acting user

        Returns:
            The response envelope, or None for an unknown action
        """
        resumed = action == CONTINUE
        if resumed:
            state = DeferredCallState.from_params(params)
            action = state.original_action
            self._logger.info(
                "call_resumed",
                original_action=state.original_action,
                repository_id=state.repository_id,
                connection_id=state.connection_id,
            )
        elif action is None:
            action = ADD

        if action != ADD and action not in PENDING_ACTIONS:
            self._logger.warning("unknown_action", action=action, resumed=resumed)
            return None

        if not caller.user:
            return encode(Failure(FailureKind.NOT_AUTHENTICATED, "Not authenticated"), action)

        if action in PENDING_ACTIONS:
            return encode(
                Failure(FailureKind.NOT_IMPLEMENTED, f"Action '{action}' is not supported yet"),
                action,
            )

        request = extract_hook_request(action, params, caller.user, resumed=resumed)
        if isinstance(request, Failure):
            return encode(request, action)
        return encode(self._add_hook.execute(request), action)


def extract_hook_request(
    action: str,
    params: Mapping[str, str],
    user: str,
    *,
    resumed: bool = False,
) -> HookRequest | Failure:
    """Pull the add parameters out of the request, rejecting missing ones."""
    repository_type = _required(params, "type")
    if isinstance(repository_type, Failure):
        return repository_type
    repository_id = _required(params, "id")
    if isinstance(repository_id, Failure):
        return repository_id

    return HookRequest(
        action=action,
        user=user,
        repository_type=repository_type.lower(),
        repository_id=repository_id,
        project_id=_optional(params, "projectId"),
        connection_id=_optional(params, "connectionId"),
        connection_project_id=_optional(params, "connectionProjectId"),
        popup=parse_bool(params.get("popup")),
        resumed=resumed,
    )


def _required(params: Mapping[str, str], name: str) -> str | Failure:
    value = params.get(name)
    if value is None or not value.strip():
        return Failure(FailureKind.MISSING_PARAMETER, f"Required parameter '{name}' is missing")
    return value.strip()


def _optional(params: Mapping[str, str], name: str) -> str | None:
    value = params.get(name)
    if value is None or not value.strip():
        return None
    return value.strip()
