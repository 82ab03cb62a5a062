"""FastAPI surface for the webhook-management endpoint."""

from __future__ import annotations

import asyncio
import json
from html import escape

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response

from .container import Container
from ..core.domain.models import CallerContext, parse_bool
from ..core.services import WEBHOOKS_PATH, ResponseEnvelope


def create_app(container: Container) -> FastAPI:
    """Build the HTTP app around an initialized container."""
    app = FastAPI(title="github-hooks")
    user_header = container.config.server.user_header()

    async def webhooks(request: Request) -> Response:
        params = dict(request.query_params)
        if request.method == "POST":
            form = await request.form()
            params.update({k: v for k, v in form.items() if isinstance(v, str)})

        caller = CallerContext(user=request.headers.get(user_header) or None)
        dispatcher = container.dispatcher()
        # Registration blocks on GitHub and the token file; keep it off the event loop.
        envelope = await asyncio.to_thread(
            dispatcher.dispatch, params.pop("action", None), params, caller
        )
        if envelope is None:
            return Response(status_code=204)
        return deliver(envelope, popup=parse_bool(params.get("popup")))

    app.add_api_route(WEBHOOKS_PATH, webhooks, methods=["GET", "POST"])
    return app


def deliver(envelope: ResponseEnvelope, *, popup: bool) -> Response:
    """Render an envelope for the caller.

    Direct callers get the JSON envelope. A popup follows the authorization
    redirect itself; any other result is posted back to the opener window.
    """
    if not popup:
        return JSONResponse(envelope, status_code=_status_of(envelope))
    if "redirect" in envelope:
        return RedirectResponse(envelope["redirect"], status_code=302)
    return HTMLResponse(callback_page(envelope), status_code=_status_of(envelope))


def callback_page(envelope: ResponseEnvelope) -> str:
    payload = json.dumps(envelope).replace("</", "<\\/")
    message = envelope.get("message") or envelope.get("error") or ""
    return (
        "<!DOCTYPE html>\n"
        "<html><head><title>GitHub webhook</title></head><body>\n"
        f"<p>{escape(str(message))}</p>\n"
        "<script>\n"
        f"var result = {payload};\n"
        "if (window.opener) { window.opener.postMessage(result, '*'); window.close(); }\n"
        "</script>\n"
        "</body></html>\n"
    )


def _status_of(envelope: ResponseEnvelope) -> int:
    return int(envelope.get("code", 200))
