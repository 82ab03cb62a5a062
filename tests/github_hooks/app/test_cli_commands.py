"""CLI commands through typer's CliRunner."""
import json

from typer.testing import CliRunner

from github_hooks.app.cli import app


runner = CliRunner()
REPO_ID = "https://github.com/acme/widgets"


def test_add_registers_hook(patched_container, alice_token, registrar):
    result = runner.invoke(app, ["add", REPO_ID, "--user", "alice", "--project", "Widgets"])

    assert result.exit_code == 0, result.output
    assert "Created: Created hook for repository 'github.com/acme/widgets'" in result.output
    assert "repository: github.com/acme/widgets" in result.output
    assert registrar.calls == 1


def test_add_twice_reports_existing(patched_container, alice_token):
    runner.invoke(app, ["add", REPO_ID, "--user", "alice", "--project", "Widgets"])
    result = runner.invoke(app, ["add", REPO_ID, "--user", "alice", "--project", "Widgets", "--json"])

    assert result.exit_code == 0, result.output
    assert json.loads(result.output)["result"] == "AlreadyExists"


def test_add_without_token_prints_authorization_link(patched_container):
    result = runner.invoke(app, ["add", REPO_ID, "--user", "alice", "--project", "Widgets"])

    assert result.exit_code == 0, result.output
    assert "Authorization required" in result.output
    assert "https://ci.example.com/oauth/github/accessToken.html?" in result.output


def test_add_rejects_bad_reference(patched_container):
    result = runner.invoke(app, ["add", "acme/widgets", "--user", "alice", "--project", "Widgets"])

    assert result.exit_code == 1
    assert "Error (400): Not a GitHub repository reference: 'acme/widgets'" in result.output


def test_add_with_explicit_connection(patched_container, alice_token):
    result = runner.invoke(
        app,
        ["add", REPO_ID, "--user", "alice", "--connection", "root-gh", "--connection-project", "_Root"],
    )
    assert result.exit_code == 0, result.output
    assert "Created" in result.output


def test_token_add_and_list(patched_container, token_store):
    added = runner.invoke(
        app, ["token-add", "root-gh", "--user", "bob", "--token", "gho_bob_secret_9876", "--scope", "repo"]
    )
    assert added.exit_code == 0, added.output
    assert "gho_...9876" in added.output

    listed = runner.invoke(app, ["tokens", "--json"])
    assert listed.exit_code == 0, listed.output
    payload = json.loads(listed.output)
    assert payload["count"] == 1
    assert payload["tokens"][0]["token"] == "gho_...9876"
    assert "gho_bob_secret_9876" not in listed.output
    assert token_store.list_all()[0].secret == "gho_bob_secret_9876"


def test_tokens_table(patched_container, alice_token):
    result = runner.invoke(app, ["tokens"])
    assert result.exit_code == 0, result.output
    assert "Found 1 tokens" in result.output
    assert "gho_...1234" in result.output


def test_projects(patched_container):
    result = runner.invoke(app, ["projects"])
    assert result.exit_code == 0, result.output
    assert "Found 3 projects" in result.output
    assert "(parent: Acme)" in result.output

    as_json = json.loads(runner.invoke(app, ["projects", "--json"]).output)
    assert [p["id"] for p in as_json["projects"]] == ["_Root", "Acme", "Widgets"]


def test_cli_builds_container_through_facade_helper():
    from github_hooks.app import cli, main

    assert cli._create_container is main._create_container
