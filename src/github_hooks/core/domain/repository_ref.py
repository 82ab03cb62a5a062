from __future__ import annotations

import re
from urllib.parse import urlsplit

from .exceptions import Failure, FailureKind
from .models import RepositoryReference


_OWNER_RE = re.compile(r"^[A-Za-z0-9](?:[A-Za-z0-9]|-(?=[A-Za-z0-9])){0,38}$")
_REPO_RE = re.compile(r"^[A-Za-z0-9._-]{1,100}$")
_HOST_RE = re.compile(r"^[a-z0-9](?:[a-z0-9.-]*[a-z0-9])?(?::\d{1,5})?$")
_SCP_RE = re.compile(r"^(?:[A-Za-z0-9._-]+@)?(?P<host>[^:/\s]+):(?P<path>[^\s]+)$")
_URL_SCHEMES = ("https", "http", "ssh", "git", "git+ssh")


def normalize_host(value: str) -> str:
    """Reduce a server address to a comparable host.

    Accepts bare hosts and URLs: ``https://GitHub.com/`` -> ``github.com``.
    """
    raw = value.strip()
    if "://" in raw:
        raw = urlsplit(raw).netloc
    raw = raw.split("/", 1)[0]
    if "@" in raw:
        raw = raw.rsplit("@", 1)[1]
    host = raw.lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    if host == "api.github.com":
        host = "github.com"
    return host


def resolve_repository(opaque_id: str | None) -> RepositoryReference | Failure:
    """Parse a repository identifier into a RepositoryReference.

    Supported forms:
        host=github.com,owner=acme,repo=widgets
        https://github.com/acme/widgets(.git)
        ssh://git@github.com/acme/widgets.git
        git@github.com:acme/widgets.git
    """
    text = (opaque_id or "").strip()
    if not text:
        return _not_github(opaque_id)

    if "=" in text and "://" not in text:
        parsed = _parse_key_value(text)
    elif "://" in text:
        parsed = _parse_url(text)
    else:
        parsed = _parse_scp(text)

    if parsed is None:
        return _not_github(opaque_id)

    host, owner, repo = parsed
    host = normalize_host(host)
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not _HOST_RE.match(host):
        return _not_github(opaque_id)
    if not _OWNER_RE.match(owner):
        return _not_github(opaque_id)
    if not _REPO_RE.match(repo) or repo in (".", ".."):
        return _not_github(opaque_id)
    return RepositoryReference(host=host, owner=owner, repo=repo)


def _parse_key_value(text: str) -> tuple[str, str, str] | None:
    fields: dict[str, str] = {}
    for part in text.split(","):
        key, sep, value = part.partition("=")
        if not sep:
            return None
        key = key.strip().lower()
        if key in fields:
            return None
        fields[key] = value.strip()
    if set(fields) != {"host", "owner", "repo"}:
        return None
    return fields["host"], fields["owner"], fields["repo"]


def _parse_url(text: str) -> tuple[str, str, str] | None:
    parts = urlsplit(text)
    if parts.scheme.lower() not in _URL_SCHEMES or not parts.hostname:
        return None
    if parts.query or parts.fragment:
        return None
    segments = [s for s in parts.path.split("/") if s]
    if len(segments) != 2:
        return None
    host = parts.hostname
    if parts.port and parts.scheme.lower() in ("https", "http"):
        host = f"{host}:{parts.port}"
    return host, segments[0], segments[1]


def _parse_scp(text: str) -> tuple[str, str, str] | None:
    match = _SCP_RE.match(text)
    if match is None:
        return None
    segments = [s for s in match.group("path").split("/") if s]
    if len(segments) != 2:
        return None
    return match.group("host"), segments[0], segments[1]


def _not_github(opaque_id: str | None) -> Failure:
    return Failure(
        FailureKind.NOT_A_GITHUB_REFERENCE,
        f"Not a GitHub repository reference: '{opaque_id or ''}'",
    )
