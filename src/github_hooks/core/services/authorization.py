from __future__ import annotations

from ..domain.models import HOOK_SCOPE, Connection, DeferredCallState
from ...shared.urls import build_url, join_url


WEBHOOKS_PATH = "/oauth/github/webhooks.html"
ACCESS_TOKEN_PATH = "/oauth/github/accessToken.html"


class AuthorizationLinks:
    """Builds the obtain-token redirect and the callback that resumes the call."""

    def __init__(self, *, root_url: str) -> None:
        self._root_url = root_url

    def callback_url(self, state: DeferredCallState) -> str:
        """URL that resumes the deferred call once a token was obtained."""
        return build_url(join_url(self._root_url, WEBHOOKS_PATH), state.to_params())

    def obtain_token_url(self, connection: Connection, state: DeferredCallState) -> str:
        """URL sending the user to authorize the connection.

        Args:
            connection: Connection the token is requested for
            state: Deferred call, encoded into the callback URL

        Returns:
            Absolute obtain-token URL requesting the hook scope
        """
        return build_url(
            join_url(self._root_url, ACCESS_TOKEN_PATH),
            {
                "action": "obtainToken",
                "connectionId": connection.id,
                "projectId": connection.project_id,
                "scope": HOOK_SCOPE,
                "callbackUrl": self.callback_url(state),
            },
        )
