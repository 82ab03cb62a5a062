from __future__ import annotations

from .authorization import AuthorizationLinks, ACCESS_TOKEN_PATH, WEBHOOKS_PATH
from .connection_selector import ConnectionSelector, pick_primary, is_connection_to_host
from .hook_orchestrator import HookRegistrationOrchestrator, MAX_RESOLUTION_ROUNDS
from .outcome_encoder import ResponseEnvelope, encode
from .token_service import TokenHealingPass, TokenService

__all__ = [
    "ACCESS_TOKEN_PATH",
    "WEBHOOKS_PATH",
    "AuthorizationLinks",
    "ConnectionSelector",
    "pick_primary",
    "is_connection_to_host",
    "HookRegistrationOrchestrator",
    "MAX_RESOLUTION_ROUNDS",
    "ResponseEnvelope",
    "encode",
    "TokenHealingPass",
    "TokenService",
]
