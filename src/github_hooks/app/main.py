from __future__ import annotations

from typing import Mapping

from .config import AppConfig
from .container import Container
from ..core.domain.models import CallerContext, Credential, Project
from ..core.services import ResponseEnvelope


def _create_container(config: AppConfig | None = None) -> Container:
    """Create and initialize a container.

    Args:
        config: Optional config. If None, loads from environment variables.

    Returns:
        Initialized container instance
    """
    container = Container()

    if config is None:
        config = AppConfig()

    container.config.from_pydantic(config)
    container.init_resources()

    return container


def dispatch(
    action: str | None,
    params: Mapping[str, str],
    user: str | None,
    config: AppConfig | None = None,
) -> ResponseEnvelope | None:
    """Handle one webhook-management request.

    Args:
        action: Requested action (``add``, ``continue``, ...); None means ``add``
        params: Request parameters
        user: Authenticated user login, None when unauthenticated
        config: Optional config for testing. If None, loads from env vars.

    Returns:
        Response envelope, or None when the action is unknown
    """
    container = _create_container(config)
    try:
        return container.dispatcher().dispatch(action, params, CallerContext(user=user))
    finally:
        container.shutdown_resources()


def add_token(
    connection_id: str,
    user: str,
    secret: str,
    scope: str = "",
    config: AppConfig | None = None,
) -> Credential:
    """Store an OAuth token for a user on a connection."""
    container = _create_container(config)
    try:
        credential = Credential(connection_id=connection_id, user=user, secret=secret, scope=scope)
        container.token_store().save(credential)
        container.logger().info("token_saved", **credential.describe())
        return credential
    finally:
        container.shutdown_resources()


def list_tokens(config: AppConfig | None = None) -> list[Credential]:
    container = _create_container(config)
    try:
        return container.token_store().list_all()
    finally:
        container.shutdown_resources()


def list_projects(config: AppConfig | None = None) -> list[Project]:
    container = _create_container(config)
    try:
        return container.project_directory().list_projects()
    finally:
        container.shutdown_resources()
