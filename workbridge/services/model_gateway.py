"""
Chat-completion gateway client.

Sends one system + user instruction pair to an OpenAI-compatible
chat-completions endpoint and returns the reply text. No retries happen at
this layer; every failure is raised as a typed ``GatewayError``.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

import requests

from ..config import get_api_key, get_config
from ..http_client import gateway_headers, parse_gateway_error
from .errors import (
    GatewayError,
    GatewayQuotaError,
    GatewayRateLimitError,
    MissingCredentialsError,
)

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Rate limit exceeded. Please try again later."
QUOTA_MESSAGE = "Service credits exhausted. Please contact support."


class ChatCompletionGateway:
    """Model invocation: ``(system_instruction, user_instruction) -> reply text``."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        api_key_provider: Callable[[], Optional[str]] = get_api_key,
    ):
        """
        Initialize the gateway.

        Args:
            config: Configuration dictionary (optional, defaults to get_config())
            api_key_provider: Callable returning the bearer token or None
        """
        self.config = config or get_config()
        gateway_cfg = self.config.get("gateway") or {}
        self.url = gateway_cfg.get("url")
        self.model = gateway_cfg.get("model")
        self.temperature = float(gateway_cfg.get("temperature", 0.1))
        timeout_cfg = gateway_cfg.get("request_timeout_seconds") or {}
        self._connect_timeout = float(timeout_cfg.get("connect", 10))
        self._read_timeout = float(timeout_cfg.get("read", 30))
        self._api_key_provider = api_key_provider

    def build_payload(self, system_instruction: str, user_instruction: str) -> Dict[str, Any]:
        return {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_instruction},
            ],
            "temperature": self.temperature,
        }

    def complete(self, system_instruction: str, user_instruction: str) -> str:
        """
        Run one chat completion.

        Args:
            system_instruction: System prompt
            user_instruction: User prompt

        Returns:
            The assistant message content (stripped)

        Raises:
            MissingCredentialsError: If no API key is configured
            GatewayRateLimitError: On HTTP 429
            GatewayQuotaError: On HTTP 402
            GatewayError: On network errors, timeouts, other non-2xx
                responses, or a reply without content
        """
        api_key = self._api_key_provider()
        if not api_key:
            raise MissingCredentialsError(
                "Translation gateway API key is not configured",
                code="missing_credentials",
            )

        payload = self.build_payload(system_instruction, user_instruction)

        try:
            resp = requests.post(
                self.url,
                headers=gateway_headers(api_key),
                data=json.dumps(payload),
                timeout=(self._connect_timeout, self._read_timeout),
            )
        except requests.Timeout as e:
            logger.error("Translation gateway timed out: %s", e)
            raise GatewayError(f"Gateway timeout: {e}", code="timeout") from e
        except requests.RequestException as e:
            logger.error("Translation gateway network error: %s", e)
            raise GatewayError(f"Network error: {e}", code="network_error") from e

        if not resp.ok:
            info = parse_gateway_error(resp)
            status = info["status"]
            logger.error(
                "Translation gateway error: status=%s code=%s message=%s",
                status,
                info["code"],
                info["message"],
            )
            if status == 429:
                raise GatewayRateLimitError(RATE_LIMIT_MESSAGE, code=info["code"])
            if status == 402:
                raise GatewayQuotaError(QUOTA_MESSAGE, code=info["code"])
            raise GatewayError(f"AI gateway error: {status}", code=info["code"])

        try:
            data = resp.json()
        except ValueError as e:
            raise GatewayError(
                "Malformed response from gateway (invalid JSON)", code="invalid_json"
            ) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise GatewayError("No content in AI response", code="invalid_payload") from e

        if not isinstance(content, str) or not content.strip():
            raise GatewayError("No content in AI response", code="empty_content")

        logger.debug("Gateway reply: %s", content)
        return content.strip()
