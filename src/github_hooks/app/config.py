from __future__ import annotations

from pathlib import Path

from platformdirs import PlatformDirs
from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


APP_NAME = "github_hooks"


def _default_home() -> Path:
    return Path(PlatformDirs(appname=APP_NAME, appauthor=False).user_data_dir)


class DirectoryConfig(BaseSettings):
    """Directory configuration with computed paths."""

    home: Path = Field(
        default_factory=_default_home,
        description="Base directory for all github_hooks data",
    )

    @computed_field
    @property
    def data_dir(self) -> Path:
        """Directory holding the project directory and the token store."""
        path = self.home / "data"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @computed_field
    @property
    def logs_dir(self) -> Path:
        path = self.home / "logs"
        path.mkdir(parents=True, exist_ok=True)
        return path

    @computed_field
    @property
    def projects_file(self) -> Path:
        return self.data_dir / "projects.json"

    @computed_field
    @property
    def tokens_file(self) -> Path:
        return self.data_dir / "tokens.json"


class ServerConfig(BaseSettings):
    """HTTP server settings."""

    root_url: str = Field(
        default="http://localhost:8111",
        description="Public root URL, used to build absolute authorization and callback links",
    )

    host: str = Field(default="127.0.0.1", description="Bind address")

    port: int = Field(default=8111, description="Bind port")

    user_header: str = Field(
        default="X-Forwarded-User",
        description="Request header carrying the authenticated user login",
    )


class GitHubConfig(BaseSettings):
    """GitHub webhook settings."""

    hook_url: str = Field(
        default="http://localhost:8111/app/hooks/github",
        description="Payload URL registered as the repository webhook",
    )

    events: list[str] = Field(
        default_factory=lambda: ["push", "pull_request"],
        description="Events the webhook subscribes to",
    )

    timeout_seconds: float = Field(default=15.0, description="Timeout for each GitHub API call")

    api_url: str | None = Field(
        default=None,
        description="API base override (defaults to api.github.com or https://<host>/api/v3)",
    )


class LoggingConfig(BaseSettings):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level")

    console_output: bool = Field(default=False, description="Also log to the console")

    logger_name: str = Field(default="github_hooks", description="Name of the event logger")


class AppConfig(BaseSettings):
    """Root application configuration.

    Loaded from environment variables with the GITHUB_HOOKS_ prefix.
    Use double underscore for nested config: GITHUB_HOOKS_SERVER__ROOT_URL

    Example env vars:
        export GITHUB_HOOKS_SERVER__ROOT_URL=https://ci.example.com
        export GITHUB_HOOKS_GITHUB__HOOK_URL=https://ci.example.com/app/hooks/github
        export GITHUB_HOOKS_DIRECTORIES__HOME=/var/lib/github_hooks
        export GITHUB_HOOKS_LOGGING__LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="GITHUB_HOOKS_",
        env_nested_delimiter="__",
        frozen=True,
        extra="forbid",
    )

    directories: DirectoryConfig = Field(default_factory=DirectoryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
