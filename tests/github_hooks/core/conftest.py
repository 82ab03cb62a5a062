"""Shared fixtures for core tests."""
from typing import Callable

import pytest

from fakes import ROOT_URL, FakeDirectory, RecordingLogger
from github_hooks.core.services import (
    AuthorizationLinks,
    ConnectionSelector,
    HookRegistrationOrchestrator,
    TokenService,
)
from github_hooks.core.usecases.add_hook import AddHookUseCase
from github_hooks.core.usecases.dispatch import ActionDispatcher


@pytest.fixture
def logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def directory() -> FakeDirectory:
    return FakeDirectory()


@pytest.fixture
def links() -> AuthorizationLinks:
    return AuthorizationLinks(root_url=ROOT_URL)


@pytest.fixture
def make_orchestrator(logger, links) -> Callable[..., HookRegistrationOrchestrator]:
    def _make(store, registrar) -> HookRegistrationOrchestrator:
        return HookRegistrationOrchestrator(
            tokens=TokenService(store=store, logger=logger),
            registrar=registrar,
            links=links,
            logger=logger,
        )
    return _make


@pytest.fixture
def make_dispatcher(logger, directory, make_orchestrator) -> Callable[..., ActionDispatcher]:
    def _make(store, registrar) -> ActionDispatcher:
        add_hook = AddHookUseCase(
            selector=ConnectionSelector(directory=directory),
            orchestrator=make_orchestrator(store, registrar),
            logger=logger,
        )
        return ActionDispatcher(add_hook=add_hook, logger=logger)
    return _make
