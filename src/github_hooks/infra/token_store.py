from __future__ import annotations

import json
import os
import tempfile
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path
from threading import RLock
from typing import Any, Sequence

from ..core.domain.exceptions import TokenStoreError
from ..core.domain.models import Connection, Credential


class TokenStore:
    """OAuth credential store.

    Credentials are kept in memory and, when ``path`` is given, mirrored to a
    JSON file written atomically. Every operation runs under one lock and
    re-reads the file, so concurrent requests (and other processes writing
    the same file) see each other's evictions.
    """

    def __init__(self, *, path: Path | None = None) -> None:
        self._path = Path(path) if path is not None else None
        self._lock = RLock()
        self._credentials: list[Credential] = []

    def find(
        self,
        connections: Sequence[Connection],
        user: str,
    ) -> dict[Connection, list[Credential]]:
        with self._lock:
            credentials = self._load_locked()
            found: dict[Connection, list[Credential]] = {}
            for connection in connections:
                owned = [
                    c for c in credentials
                    if c.connection_id == connection.id and c.user == user
                ]
                if owned:
                    # Stable sort: flagged credentials go last, order otherwise kept.
                    found[connection] = sorted(owned, key=lambda c: c.flagged)
            return found

    def evict(self, connection_id: str, secret: str) -> bool:
        with self._lock:
            credentials = self._load_locked()
            kept = [
                c for c in credentials
                if not (c.connection_id == connection_id and c.secret == secret)
            ]
            if len(kept) == len(credentials):
                return False
            self._save_locked(kept)
            return True

    def flag(self, credential: Credential) -> None:
        with self._lock:
            credentials = self._load_locked()
            matched = False
            updated = []
            for c in credentials:
                if c.connection_id == credential.connection_id and c.secret == credential.secret:
                    matched = True
                    c = replace(c, flagged=True)
                updated.append(c)
            if matched:
                self._save_locked(updated)

    def save(self, credential: Credential) -> None:
        """Add a credential, replacing one with the same connection and secret."""
        with self._lock:
            credentials = [
                c for c in self._load_locked()
                if not (c.connection_id == credential.connection_id and c.secret == credential.secret)
            ]
            credentials.append(credential)
            self._save_locked(credentials)

    def list_all(self) -> list[Credential]:
        with self._lock:
            return list(self._load_locked())

    def _load_locked(self) -> list[Credential]:
        if self._path is None or not self._path.exists():
            return list(self._credentials)
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            preserved = self._preserve_corrupt_file_locked()
            raise TokenStoreError(
                f"Token store is corrupt JSON and was moved to {preserved}."
            ) from exc
        if not isinstance(raw, dict) or not isinstance(raw.get("tokens"), list):
            preserved = self._preserve_corrupt_file_locked()
            raise TokenStoreError(
                f"Token store must contain a 'tokens' list and was moved to {preserved}."
            )
        self._credentials = [_credential_from_json(item) for item in raw["tokens"]]
        return list(self._credentials)

    def _save_locked(self, credentials: list[Credential]) -> None:
        self._credentials = list(credentials)
        if self._path is None:
            return
        payload: dict[str, Any] = {"tokens": [_credential_to_json(c) for c in credentials]}
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=str(self._path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                json.dump(payload, fp, ensure_ascii=False, indent=2)
            os.replace(tmp_name, self._path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise

    def _preserve_corrupt_file_locked(self) -> Path:
        assert self._path is not None
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ")
        preserved = self._path.with_name(f"{self._path.name}.corrupt-{timestamp}")
        suffix = 1
        while preserved.exists():
            preserved = self._path.with_name(f"{self._path.name}.corrupt-{timestamp}.{suffix}")
            suffix += 1
        self._path.replace(preserved)
        return preserved


def _credential_from_json(item: Any) -> Credential:
    if not isinstance(item, dict):
        raise TokenStoreError(f"Malformed token entry: {item!r}")
    try:
        return Credential(
            connection_id=str(item["connection_id"]),
            user=str(item["user"]),
            secret=str(item["secret"]),
            scope=str(item.get("scope", "")),
            flagged=bool(item.get("flagged", False)),
        )
    except KeyError as exc:
        raise TokenStoreError(f"Token entry is missing field {exc}") from exc


def _credential_to_json(credential: Credential) -> dict[str, Any]:
    return {
        "connection_id": credential.connection_id,
        "user": credential.user,
        "secret": credential.secret,
        "scope": credential.scope,
        "flagged": credential.flagged,
    }
