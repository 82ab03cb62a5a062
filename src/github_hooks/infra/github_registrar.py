"""GitHub REST API implementation of the hook registrar."""

from __future__ import annotations

import logging
from typing import Any, Sequence

import requests

from ..core.domain.exceptions import HookRegistrarError
from ..core.domain.models import Credential, HookAddResult, RepositoryReference


debug_logger = logging.getLogger(__name__)

# Any of these OAuth scopes allows creating repository hooks.
HOOK_SCOPES = frozenset({"repo", "admin:repo_hook", "write:repo_hook"})


class GitHubHookRegistrar:
    """Registers the CI webhook through the GitHub REST API.

    One attempt probes the repository, lists its hooks and creates the hook
    only when none points at ``hook_url`` yet.
    """

    def __init__(
        self,
        *,
        hook_url: str,
        events: Sequence[str] = ("push", "pull_request"),
        timeout_seconds: float = 15.0,
        api_url: str | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.hook_url = hook_url
        self.events = list(events)
        self.timeout_seconds = timeout_seconds
        self.api_url = api_url.rstrip("/") if api_url else None
        self.session = session or requests.Session()

    def attempt(self, repository: RepositoryReference, credential: Credential) -> HookAddResult:
        base = f"/repos/{repository.owner}/{repository.repo}"

        response = self._request("GET", repository, base, credential)
        if response.status_code == 401:
            return HookAddResult.INVALID_CREDENTIALS
        if response.status_code in (403, 404):
            if _looks_like_rate_limit(response):
                raise HookRegistrarError("GitHub API rate limit reached", reason="rate_limited")
            return HookAddResult.NO_ACCESS
        self._raise_for_unexpected(response, repository)
        permissions = _json(response).get("permissions")
        if isinstance(permissions, dict) and not permissions.get("admin", False):
            return HookAddResult.USER_HAVE_NO_ACCESS

        response = self._request("GET", repository, f"{base}/hooks", credential, params={"per_page": "100"})
        denied = self._denied_result(response)
        if denied is not None:
            return denied
        self._raise_for_unexpected(response, repository)
        hooks = _json_list(response)
        if any(self._points_here(hook) for hook in hooks):
            return HookAddResult.ALREADY_EXISTS

        response = self._request(
            "POST",
            repository,
            f"{base}/hooks",
            credential,
            json={
                "name": "web",
                "active": True,
                "events": self.events,
                "config": {"url": self.hook_url, "content_type": "json", "insecure_ssl": "0"},
            },
        )
        if response.status_code == 422 and "already exists" in response.text.lower():
            return HookAddResult.ALREADY_EXISTS
        denied = self._denied_result(response)
        if denied is not None:
            return denied
        self._raise_for_unexpected(response, repository)
        return HookAddResult.CREATED

    def api_base(self, repository: RepositoryReference) -> str:
        if self.api_url:
            return self.api_url
        if repository.host == "github.com":
            return "https://api.github.com"
        return f"https://{repository.host}/api/v3"

    def _points_here(self, hook: Any) -> bool:
        if not isinstance(hook, dict):
            return False
        config = hook.get("config")
        return isinstance(config, dict) and config.get("url") == self.hook_url

    def _denied_result(self, response: requests.Response) -> HookAddResult | None:
        if response.status_code == 401:
            return HookAddResult.INVALID_CREDENTIALS
        if response.status_code not in (403, 404):
            return None
        if _looks_like_rate_limit(response):
            raise HookRegistrarError("GitHub API rate limit reached", reason="rate_limited")
        scopes = _granted_scopes(response)
        if scopes is not None and not scopes & HOOK_SCOPES:
            return HookAddResult.TOKEN_SCOPE_MISMATCH
        return HookAddResult.USER_HAVE_NO_ACCESS

    def _raise_for_unexpected(self, response: requests.Response, repository: RepositoryReference) -> None:
        if 200 <= response.status_code < 300:
            return
        raise HookRegistrarError(
            f"Unexpected GitHub response {response.status_code} for {repository}",
            reason=f"github_{response.status_code}",
        )

    def _request(
        self,
        method: str,
        repository: RepositoryReference,
        path: str,
        credential: Credential,
        json: dict[str, Any] | None = None,
        params: dict[str, str] | None = None,
    ) -> requests.Response:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "Authorization": f"Bearer {credential.secret}",
        }
        url = f"{self.api_base(repository)}{path}"
        try:
            response = self.session.request(
                method=method,
                url=url,
                headers=headers,
                json=json,
                params=params,
                timeout=self.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise HookRegistrarError(f"Timed out calling {url}", reason="timeout") from exc
        except requests.RequestException as exc:
            raise HookRegistrarError(f"Failed to call {url}: {exc}", reason="connection_error") from exc
        debug_logger.debug("%s %s -> %s", method, url, response.status_code)
        return response


def _json(response: requests.Response) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise HookRegistrarError("Malformed JSON from GitHub", reason="malformed_response") from exc
    if not isinstance(payload, dict):
        raise HookRegistrarError("Expected a JSON object from GitHub", reason="malformed_response")
    return payload


def _json_list(response: requests.Response) -> list[Any]:
    try:
        payload = response.json()
    except ValueError as exc:
        raise HookRegistrarError("Malformed JSON from GitHub", reason="malformed_response") from exc
    if not isinstance(payload, list):
        raise HookRegistrarError("Expected a JSON list from GitHub", reason="malformed_response")
    return payload


def _granted_scopes(response: requests.Response) -> set[str] | None:
    """Scopes from X-OAuth-Scopes, or None when GitHub did not send the header."""
    header = (response.headers or {}).get("X-OAuth-Scopes")
    if header is None:
        return None
    return {scope.strip() for scope in header.split(",") if scope.strip()}


def _looks_like_rate_limit(response: requests.Response) -> bool:
    if response.status_code != 403:
        return False
    if (response.headers or {}).get("X-RateLimit-Remaining") == "0":
        return True
    return "rate limit" in response.text.lower()

