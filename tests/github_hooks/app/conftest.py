"""Shared fixtures for app-level tests."""
import json
from pathlib import Path

import pytest
from dependency_injector import providers

from fakes import ROOT_URL, ExistingHooksRegistrar
from github_hooks.app.config import AppConfig, DirectoryConfig, ServerConfig
from github_hooks.app.container import Container
from github_hooks.core.domain.models import Credential
from github_hooks.infra.token_store import TokenStore


PROJECTS = {
    "projects": [
        {"id": "_Root", "name": "<Root project>"},
        {"id": "Acme", "name": "Acme", "parent_id": "_Root"},
        {"id": "Widgets", "name": "Widgets", "parent_id": "Acme"},
    ],
    "connections": [
        {"id": "root-gh", "project_id": "_Root", "host": "https://github.com", "display_name": "GitHub.com"},
        {"id": "acme-ghe", "project_id": "Acme", "host": "https://ghe.acme.io"},
    ],
}


@pytest.fixture
def home(tmp_path, monkeypatch) -> Path:
    """Isolated home with a project layout; env points AppConfig() at it."""
    monkeypatch.setenv("GITHUB_HOOKS_DIRECTORIES__HOME", str(tmp_path))
    monkeypatch.setenv("GITHUB_HOOKS_SERVER__ROOT_URL", ROOT_URL)
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "projects.json").write_text(json.dumps(PROJECTS), encoding="utf-8")
    return tmp_path


@pytest.fixture
def test_config(home) -> AppConfig:
    return AppConfig(
        directories=DirectoryConfig(home=home),
        server=ServerConfig(root_url=ROOT_URL),
    )


@pytest.fixture
def token_store(home) -> TokenStore:
    return TokenStore(path=home / "data" / "tokens.json")


@pytest.fixture
def alice_token(token_store) -> Credential:
    credential = Credential(connection_id="root-gh", user="alice", secret="gho_alice_token_1234", scope="repo")
    token_store.save(credential)
    return credential


@pytest.fixture
def registrar() -> ExistingHooksRegistrar:
    return ExistingHooksRegistrar()


def _create_container(registrar) -> Container:
    container = Container()
    container.registrar.override(providers.Object(registrar))
    return container


@pytest.fixture
def container(test_config, registrar):
    c = _create_container(registrar)
    c.config.from_pydantic(test_config)
    c.init_resources()
    yield c
    c.shutdown_resources()


@pytest.fixture
def patched_container(home, registrar, monkeypatch):
    """Containers built through the facade helper use the fake registrar."""
    monkeypatch.setattr("github_hooks.app.main.Container", lambda: _create_container(registrar))
