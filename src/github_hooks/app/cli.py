from __future__ import annotations

import json
import logging

import typer
import uvicorn
from dotenv import load_dotenv

from .config import AppConfig
from .cli_formatter import format_envelope, format_project_list, format_token_list
from .http import create_app
from .main import _create_container
from ..core.domain.models import REPOSITORY_TYPE, CallerContext, Credential

load_dotenv()

app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (defaults to config)"),
    port: int | None = typer.Option(None, "--port", help="Bind port (defaults to config)"),
    log_level: str = typer.Option("INFO", "--log-level", help="Log level", case_sensitive=False),
):
    """Serve the webhook-management endpoint over HTTP."""
    level = logging._nameToLevel.get(log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", force=True)

    config = AppConfig()
    container = _create_container(config)
    bind_host = host or config.server.host
    bind_port = port or config.server.port

    typer.echo(f"Serving on http://{bind_host}:{bind_port} (public root {config.server.root_url})")
    typer.echo(f"Event log: {config.directories.logs_dir}")
    try:
        uvicorn.run(create_app(container), host=bind_host, port=bind_port, log_level=log_level.lower())
    finally:
        container.shutdown_resources()


@app.command()
def add(
    repository_id: str = typer.Argument(..., help="Repository reference, e.g. https://github.com/owner/repo"),
    user: str = typer.Option(..., "--user", "-u", help="Login the request is made as"),
    project_id: str | None = typer.Option(None, "--project", "-p", help="Project whose connections are searched"),
    connection_id: str | None = typer.Option(None, "--connection", "-c", help="Use this OAuth connection"),
    connection_project_id: str | None = typer.Option(
        None, "--connection-project", help="Project owning --connection (defaults to --project)"
    ),
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """Register the CI webhook on a GitHub repository."""
    params = {"type": REPOSITORY_TYPE, "id": repository_id}
    if project_id:
        params["projectId"] = project_id
    if connection_id:
        params["connectionId"] = connection_id
    if connection_project_id:
        params["connectionProjectId"] = connection_project_id

    container = _create_container()
    try:
        envelope = container.dispatcher().dispatch("add", params, CallerContext(user=user))
    finally:
        container.shutdown_resources()

    if json_output:
        typer.echo(json.dumps(envelope, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_envelope(envelope))

    if envelope is not None and "error" in envelope:
        raise typer.Exit(code=1)


@app.command(name="token-add")
def token_add(
    connection_id: str = typer.Argument(..., help="OAuth connection id"),
    user: str = typer.Option(..., "--user", "-u", help="Login owning the token"),
    token: str = typer.Option(..., "--token", prompt=True, hide_input=True, help="OAuth access token"),
    scope: str = typer.Option("", "--scope", help="Scope granted to the token"),
):
    """Store an OAuth token for a user."""
    container = _create_container()
    try:
        credential = Credential(connection_id=connection_id, user=user, secret=token, scope=scope)
        container.token_store().save(credential)
        container.logger().info("token_saved", **credential.describe())
    finally:
        container.shutdown_resources()
    typer.echo(f"Stored token {credential.redacted()} for {user} on {connection_id}")


@app.command()
def tokens(
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List stored tokens (secrets are redacted)."""
    container = _create_container()
    try:
        credentials = container.token_store().list_all()
    finally:
        container.shutdown_resources()

    if json_output:
        items = [c.describe() | {"flagged": c.flagged} for c in credentials]
        typer.echo(json.dumps({"count": len(items), "tokens": items}, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_token_list(credentials))


@app.command()
def projects(
    json_output: bool = typer.Option(False, "--json", help="Output result as JSON"),
):
    """List configured projects."""
    container = _create_container()
    try:
        items = container.project_directory().list_projects()
    finally:
        container.shutdown_resources()

    if json_output:
        payload = [{"id": p.id, "name": p.name, "parent_id": p.parent_id} for p in items]
        typer.echo(json.dumps({"count": len(payload), "projects": payload}, ensure_ascii=False, indent=2))
    else:
        typer.echo(format_project_list(items))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
