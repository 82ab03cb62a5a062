from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Mapping


REPOSITORY_TYPE = "repository"
HOOK_SCOPE = "write:repo_hook"


@dataclass(frozen=True)
class RepositoryReference:
    """GitHub repository addressed by host, owner and name.

    The string form is the stable key used in logs and messages.
    """
    host: str
    owner: str
    repo: str

    @property
    def slug(self) -> str:
        """Returns owner/repo format."""
        return f"{self.owner}/{self.repo}"

    def to_info(self) -> dict[str, str]:
        return {"host": self.host, "owner": self.owner, "repo": self.repo}

    def __str__(self) -> str:
        return f"{self.host}/{self.owner}/{self.repo}"


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    parent_id: str | None = None


@dataclass(frozen=True)
class Connection:
    """OAuth connection to a GitHub server, owned by a project."""
    id: str
    project_id: str
    host: str
    display_name: str = ""

    @property
    def label(self) -> str:
        return self.display_name or self.id


@dataclass(frozen=True)
class Credential:
    """OAuth access token issued to a user through a connection."""
    connection_id: str
    user: str
    secret: str
    scope: str = ""
    flagged: bool = False  # scope found insufficient by the remote service

    def redacted(self) -> str:
        if len(self.secret) <= 8:
            return "***"
        return f"{self.secret[:4]}...{self.secret[-4:]}"

    def describe(self) -> dict[str, str]:
        return {
            "user": self.user,
            "connection_id": self.connection_id,
            "scope": self.scope,
            "token": self.redacted(),
        }


class HookAddResult(str, Enum):
    """Outcome of one registration attempt against the remote service."""

    CREATED = "Created"
    ALREADY_EXISTS = "AlreadyExists"
    INVALID_CREDENTIALS = "InvalidCredentials"
    TOKEN_SCOPE_MISMATCH = "TokenScopeMismatch"
    NO_ACCESS = "NoAccess"
    USER_HAVE_NO_ACCESS = "UserHaveNoAccess"


# Result kind reported when every round ran out of credentials without a
# conclusive answer. Never produced by the registrar.
EXHAUSTED = "Exhausted"


@dataclass(frozen=True)
class HookOutcome:
    """Terminal result of an orchestration."""
    result: str
    message: str
    repository: RepositoryReference


@dataclass(frozen=True)
class AuthorizationRedirect:
    """Suspension: the caller must obtain a token and come back."""
    url: str


@dataclass(frozen=True)
class DeferredCallState:
    """Continuation parameters threaded through the authorization redirect."""
    original_action: str
    repository_type: str
    repository_id: str
    connection_id: str
    connection_project_id: str
    popup: bool = False
    project_id: str | None = None

    def to_params(self) -> dict[str, str]:
        params = {
            "action": "continue",
            "original_action": self.original_action,
            "popup": "true" if self.popup else "false",
            "type": self.repository_type,
            "id": self.repository_id,
            "connectionId": self.connection_id,
            "connectionProjectId": self.connection_project_id,
        }
        if self.project_id is not None:
            params["projectId"] = self.project_id
        return params

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> "DeferredCallState":
        return cls(
            original_action=params.get("original_action") or "add",
            repository_type=params.get("type", ""),
            repository_id=params.get("id", ""),
            connection_id=params.get("connectionId", ""),
            connection_project_id=params.get("connectionProjectId", ""),
            popup=parse_bool(params.get("popup")),
            project_id=params.get("projectId"),
        )


@dataclass(frozen=True)
class HookRequest:
    """Inbound add request after parameter extraction."""
    action: str
    user: str
    repository_type: str
    repository_id: str
    project_id: str | None = None
    connection_id: str | None = None
    connection_project_id: str | None = None
    popup: bool = False
    resumed: bool = False


def parse_bool(value: str | None) -> bool:
    if value is None:
        return False
    return value.strip().lower() in ("true", "1", "yes", "on")


@dataclass(frozen=True)
class CallerContext:
    """Who is calling; None user means the session is not authenticated."""
    user: str | None = None
