"""CLI output formatting utilities for human-readable display."""

from __future__ import annotations

from ..core.domain.models import Credential, Project
from ..core.services import ResponseEnvelope


def format_envelope(envelope: ResponseEnvelope | None) -> str:
    """Format a dispatch result for the terminal.

    Args:
        envelope: Response envelope, or None for an unknown action

    Returns:
        Formatted string for display
    """
    if envelope is None:
        return "Unknown action, nothing done."
    if "error" in envelope:
        return f"Error ({envelope['code']}): {envelope['error']}"
    if "redirect" in envelope:
        return f"Authorization required, open:\n  {envelope['redirect']}"

    lines = [f"{envelope['result']}: {envelope['message']}"]
    info = envelope.get("info") or {}
    if info:
        lines.append(f"  repository: {info.get('host')}/{info.get('owner')}/{info.get('repo')}")
    return "\n".join(lines)


def format_token_list(credentials: list[Credential]) -> str:
    if not credentials:
        return "No tokens stored."

    lines = [f"Found {len(credentials)} tokens:", ""]
    lines.append(f"{'Connection':<24} {'User':<20} {'Token':<14} {'Scope':<24} Flagged")
    lines.append("-" * 92)
    for c in credentials:
        flagged = "yes" if c.flagged else ""
        lines.append(f"{c.connection_id:<24} {c.user:<20} {c.redacted():<14} {c.scope:<24} {flagged}")
    return "\n".join(lines)


def format_project_list(projects: list[Project]) -> str:
    if not projects:
        return "No projects configured."

    lines = [f"Found {len(projects)} projects:", ""]
    for p in projects:
        parent = f" (parent: {p.parent_id})" if p.parent_id else ""
        lines.append(f"  {p.id:<24} {p.name}{parent}")
    return "\n".join(lines)
