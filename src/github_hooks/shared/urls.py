from __future__ import annotations

from typing import Mapping
from urllib.parse import urlencode


def build_url(base: str, params: Mapping[str, object] | None = None) -> str:
    """Append query parameters to a URL, preserving their insertion order."""
    if not params:
        return base
    query = urlencode([(key, _as_text(value)) for key, value in params.items()])
    separator = "&" if "?" in base else "?"
    return f"{base}{separator}{query}"


def join_url(root: str, path: str) -> str:
    return f"{root.rstrip('/')}/{path.lstrip('/')}"


def _as_text(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
