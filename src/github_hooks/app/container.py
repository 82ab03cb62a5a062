from __future__ import annotations

from dependency_injector import containers, providers

from .config import AppConfig
from ..core.services import (
    AuthorizationLinks,
    ConnectionSelector,
    HookRegistrationOrchestrator,
    TokenService,
)
from ..core.usecases.add_hook import AddHookUseCase
from ..core.usecases.dispatch import ActionDispatcher
from ..infra.github_registrar import GitHubHookRegistrar
from ..infra.logging import HookLogger
from ..infra.project_directory import ProjectDirectory
from ..infra.token_store import TokenStore


class Container(containers.DeclarativeContainer):
    """DI container with Pydantic BaseSettings support."""

    config = providers.Configuration(pydantic_settings=[AppConfig()])

    # Logger (Resource: manages lifecycle with init/shutdown)
    logger = providers.Resource(
        HookLogger,
        logs_dir=config.directories.logs_dir,
        logger_name=config.logging.logger_name,
        console_output=config.logging.console_output,
        level=config.logging.level,
    )

    # Adapters
    token_store = providers.Singleton(
        TokenStore,
        path=config.directories.tokens_file,
    )

    project_directory = providers.Singleton(
        ProjectDirectory.from_file,
        config.directories.projects_file,
    )

    registrar = providers.Singleton(
        GitHubHookRegistrar,
        hook_url=config.github.hook_url,
        events=config.github.events,
        timeout_seconds=config.github.timeout_seconds,
        api_url=config.github.api_url,
    )

    # Domain services
    links = providers.Singleton(
        AuthorizationLinks,
        root_url=config.server.root_url,
    )

    token_service = providers.Factory(
        TokenService,
        store=token_store,
        logger=logger,
    )

    connection_selector = providers.Factory(
        ConnectionSelector,
        directory=project_directory,
    )

    orchestrator = providers.Factory(
        HookRegistrationOrchestrator,
        tokens=token_service,
        registrar=registrar,
        links=links,
        logger=logger,
    )

    # Use cases
    add_hook_uc = providers.Factory(
        AddHookUseCase,
        selector=connection_selector,
        orchestrator=orchestrator,
        logger=logger,
    )

    dispatcher = providers.Factory(
        ActionDispatcher,
        add_hook=add_hook_uc,
        logger=logger,
    )
