from __future__ import annotations

from typing import Sequence

from ..domain.models import Connection, Credential
from ..ports import LoggerPort, TokenStorePort


class TokenHealingPass:
    """Store repairs performed during one orchestration.

    Each failing credential is evicted or flagged at most once, even when a
    later round sees it again.
    """

    def __init__(self, *, store: TokenStorePort, logger: LoggerPort) -> None:
        self._store = store
        self._logger = logger
        self._evicted: set[tuple[str, str]] = set()
        self._flagged: set[tuple[str, str]] = set()

    @staticmethod
    def _key(credential: Credential) -> tuple[str, str]:
        return credential.connection_id, credential.secret

    def is_retired(self, credential: Credential) -> bool:
        key = self._key(credential)
        return key in self._evicted or key in self._flagged

    def evict(self, credential: Credential) -> None:
        key = self._key(credential)
        if key in self._evicted:
            return
        self._evicted.add(key)
        self._logger.warning(
            "token_evicted",
            reason="invalid_credentials",
            credential=credential.describe(),
        )
        self._store.evict(credential.connection_id, credential.secret)

    def flag(self, credential: Credential) -> None:
        key = self._key(credential)
        if key in self._flagged:
            return
        self._flagged.add(key)
        self._logger.warning(
            "token_flagged",
            reason="scope_mismatch",
            credential=credential.describe(),
        )
        self._store.flag(credential)

    @property
    def evicted_count(self) -> int:
        return len(self._evicted)

    @property
    def flagged_count(self) -> int:
        return len(self._flagged)


class TokenService:
    """Token retrieval for the acting user plus per-pass healing."""

    def __init__(self, *, store: TokenStorePort, logger: LoggerPort) -> None:
        self._store = store
        self._logger = logger

    def tokens_for(
        self,
        connections: Sequence[Connection],
        user: str,
    ) -> dict[Connection, list[Credential]]:
        """Fetch the user's tokens for each candidate connection.

        Args:
            connections: Candidate connections, nearest project first
            user: Login whose tokens are looked up

        Returns:
            Credentials per connection in candidate order; connections without
            tokens are left out
        """
        found = self._store.find(connections, user)
        # Keep candidate order and drop empty entries.
        return {c: list(found[c]) for c in connections if found.get(c)}

    def new_pass(self) -> TokenHealingPass:
        """Start healing bookkeeping for one orchestration."""
        return TokenHealingPass(store=self._store, logger=self._logger)
