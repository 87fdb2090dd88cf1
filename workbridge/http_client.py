"""
HTTP helpers shared by the chat-completion gateway.
"""

from __future__ import annotations

from typing import Any, Dict

import requests

MAX_ERROR_PREVIEW = 500


def gateway_headers(api_key: str) -> Dict[str, str]:
    """Build request headers for the chat-completion gateway."""
    return {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
    }


def parse_gateway_error(resp: requests.Response) -> Dict[str, Any]:
    """
    Classify a non-2xx gateway response.

    Returns:
        Dict with keys:
        - status: HTTP status code
        - code: short machine-readable code (rate_limit, payment_required, ...)
        - message: human-readable message (from the body when available)
    """
    status = resp.status_code
    message = ""
    code = ""

    try:
        body = resp.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        err = body.get("error")
        if isinstance(err, dict):
            message = str(err.get("message") or "")
            code = str(err.get("code") or err.get("type") or "")
        elif isinstance(err, str):
            message = err
    if not message:
        message = (resp.text or "")[:MAX_ERROR_PREVIEW]

    if status == 429:
        code = "rate_limit"
    elif status == 402:
        code = "payment_required"
    elif status in (401, 403):
        code = code or "unauthorized"
    elif 500 <= status < 600:
        code = code or "server_error"
    else:
        code = code or "client_error"

    return {"status": status, "code": code, "message": message}
