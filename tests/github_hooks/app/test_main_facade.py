"""Facade function tests for the main module."""
import github_hooks
from github_hooks.app.main import add_token, dispatch, list_projects, list_tokens


REPO_ID = "https://github.com/acme/widgets"


def test_package_exports_facade():
    assert github_hooks.dispatch is dispatch


def test_dispatch_add(patched_container, test_config, alice_token, registrar):
    envelope = dispatch(
        "add",
        {"type": "repository", "id": REPO_ID, "projectId": "Widgets"},
        "alice",
        config=test_config,
    )
    assert envelope["result"] == "Created"
    assert registrar.calls == 1


def test_dispatch_unknown_action(patched_container, test_config):
    assert dispatch("frobnicate", {}, "alice", config=test_config) is None


def test_dispatch_unauthenticated(patched_container, test_config):
    envelope = dispatch("add", {"type": "repository", "id": REPO_ID}, None, config=test_config)
    assert envelope["code"] == 401


def test_add_token_then_dispatch(patched_container, test_config):
    credential = add_token("root-gh", "carol", "gho_carol_token_0000", scope="repo", config=test_config)

    assert credential.redacted() == "gho_...0000"
    assert [c.user for c in list_tokens(config=test_config)] == ["carol"]
    envelope = dispatch(
        "add",
        {"type": "repository", "id": REPO_ID, "projectId": "Acme"},
        "carol",
        config=test_config,
    )
    assert envelope["result"] == "Created"


def test_list_projects(patched_container, test_config):
    assert [p.id for p in list_projects(config=test_config)] == ["_Root", "Acme", "Widgets"]
