"""
Client for the ``/translate`` endpoint.

Application code calls ``TranslationClient.request_translations`` once per
save operation. The client never raises for translation reasons: when the
service cannot be reached or answers with an error, every submitted field
comes back unchanged with ``detected_language=None``.

Usage:
    from workbridge.client import TranslationClient

    client = TranslationClient()
    results = client.request_translations([
        {"field": "full_name", "value": "John Smith"},
        {"field": "bio", "value": "मैं एक अनुभवी रसोइया हूँ"},
    ])
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Union

import requests
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from .config import get_config
from .models import TranslationRequestItem, TranslationResult

logger = logging.getLogger(__name__)

ItemLike = Union[TranslationRequestItem, Dict[str, Any]]


class TranslationUnavailable(Exception):
    """The service could not produce results (transport or service error)."""


def _coerce_items(items: Iterable[ItemLike]) -> List[TranslationRequestItem]:
    coerced: List[TranslationRequestItem] = []
    for item in items or []:
        if isinstance(item, TranslationRequestItem):
            coerced.append(item)
        elif isinstance(item, dict):
            coerced.append(TranslationRequestItem.from_dict(item))
    return coerced


class TranslationClient:
    """
    Batched, never-failing translation client.

    Attributes:
        is_translating: True while a request is in flight (observational only)
        error: Message of the last failure, cleared when a new request starts
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        service_url: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_config()
        client_cfg = self.config.get("client") or {}
        self.service_url = service_url or client_cfg.get("service_url")
        self.timeout = float(client_cfg.get("timeout_seconds", 45))
        self.max_attempts = max(1, int(client_cfg.get("max_attempts", 1)))
        self.headers = dict(headers or {})
        self._http = session or requests.Session()

        self.is_translating = False
        self.error: Optional[str] = None

    def _post(self, payload: Dict[str, Any]) -> requests.Response:
        return self._http.post(
            self.service_url,
            json=payload,
            headers=self.headers,
            timeout=self.timeout,
        )

    def _send(self, items: List[TranslationRequestItem]) -> List[TranslationResult]:
        """
        One batched POST (plus configured retries on connection errors).

        Raises:
            TranslationUnavailable: On any transport or service failure
        """
        payload = {"texts": [item.to_dict() for item in items]}
        retryer = Retrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(min=1, max=10),
            retry=retry_if_exception_type((requests.ConnectionError, requests.Timeout)),
            reraise=True,
        )
        try:
            resp = retryer(self._post, payload)
        except requests.RequestException as e:
            raise TranslationUnavailable(f"Translation service unreachable: {e}") from e

        try:
            data = resp.json()
        except ValueError as e:
            raise TranslationUnavailable(
                f"Translation service returned an unreadable response ({resp.status_code})"
            ) from e

        if isinstance(data, dict) and data.get("error"):
            raise TranslationUnavailable(str(data["error"]))
        if not resp.ok:
            raise TranslationUnavailable(f"Translation service error: {resp.status_code}")
        if not isinstance(data, dict) or not isinstance(data.get("results"), list):
            raise TranslationUnavailable("Translation service response has no results")

        results = [
            TranslationResult.from_dict(entry)
            for entry in data["results"]
            if isinstance(entry, dict)
        ]
        if len(results) != len(items):
            logger.warning(
                "Translation service returned %d result(s) for %d field(s)",
                len(results),
                len(items),
            )
        return results

    def request_translations(self, items: Iterable[ItemLike]) -> List[TranslationResult]:
        """
        Translate every non-blank item with a single service call.

        Args:
            items: TranslationRequestItem objects or ``{field, value}`` dicts

        Returns:
            One TranslationResult per non-blank item. Empty list (and no
            network call) when every value is blank.
        """
        valid = [item for item in _coerce_items(items) if not item.is_blank()]
        if not valid:
            return []

        self.is_translating = True
        self.error = None
        try:
            return self._send(valid)
        except TranslationUnavailable as e:
            self.error = str(e)
            logger.warning("Translation error: %s; keeping original text", e)
            return [TranslationResult.passthrough(item, None) for item in valid]
        finally:
            self.is_translating = False

    def request_translation(self, field: str, value: str) -> Optional[TranslationResult]:
        """Translate one field. Returns None only when ``value`` is blank."""
        results = self.request_translations([TranslationRequestItem(field=field, value=value)])
        return results[0] if results else None
