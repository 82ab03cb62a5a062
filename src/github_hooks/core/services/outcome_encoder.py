from __future__ import annotations

from typing import Any

from ..domain.exceptions import Failure
from ..domain.models import AuthorizationRedirect, HookOutcome


ResponseEnvelope = dict[str, Any]


def encode(
    outcome: HookOutcome | AuthorizationRedirect | Failure,
    action: str | None,
) -> ResponseEnvelope:
    """Map an orchestration result to the response envelope.

    Exactly one of ``{error, code}``, ``{redirect}`` or
    ``{result, message, info}`` is present, always alongside ``action``.
    """
    if isinstance(outcome, Failure):
        envelope: ResponseEnvelope = {"error": outcome.message, "code": outcome.code}
    elif isinstance(outcome, AuthorizationRedirect):
        envelope = {"redirect": outcome.url}
    elif isinstance(outcome, HookOutcome):
        envelope = {
            "result": outcome.result,
            "message": outcome.message,
            "info": outcome.repository.to_info(),
        }
    else:
        raise TypeError(f"Cannot encode {type(outcome).__name__}")
    envelope["action"] = action
    return envelope
