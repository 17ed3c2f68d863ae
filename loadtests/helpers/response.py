"""Response error extraction for load test observability.

Parses shipping API error responses into human-readable messages.
Handles three response shapes:

- Pydantic validation (422): {"detail": [{"loc": [...], "msg": "...", "type": "..."}]}
- Courier batch errors (400/403/502): {"detail": "msg"} or {"detail": {"message": "msg", ...}}
- Per-order booking failures inside a 200: {"results": [{"ok": false, "error": "msg"}]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from requests import Response


def extract_error_detail(response: Response) -> str:
    """Extract a human-readable error message from an API error response."""
    try:
        body = response.json()
    except ValueError:
        text = getattr(response, "text", "") or ""
        return text[:300] or "(empty response body)"

    detail = body.get("detail") if isinstance(body, dict) else None
    if isinstance(detail, list):
        parts = []
        for err in detail:
            loc = ".".join(str(p) for p in err.get("loc", []))
            msg = err.get("msg", str(err))
            parts.append(f"{loc}: {msg}" if loc else msg)
        return " | ".join(parts)
    if isinstance(detail, dict):
        return str(detail.get("message", detail))[:300]
    if detail:
        return str(detail)

    return str(body)[:300]


def failed_bookings(body: dict) -> list[str]:
    """Per-order error messages from a push response."""
    return [
        f"{result.get('code') or 'ERROR'}: {result.get('error')}"
        for result in body.get("results", [])
        if not result.get("ok")
    ]
