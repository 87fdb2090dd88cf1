"""
Exception hierarchy for the translation service.

Every error carries the HTTP status the ``/translate`` endpoint answers with.
"""

from __future__ import annotations

from typing import Optional


class TranslationServiceError(Exception):
    """Base class for hard failures of the translation service."""

    status_code = 500

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class TranslationRequestError(TranslationServiceError):
    """Missing, malformed or empty batch (400)."""

    status_code = 400


class MissingCredentialsError(TranslationServiceError):
    """Gateway credential is not configured (500)."""

    status_code = 500


class GatewayError(TranslationServiceError):
    """Any upstream failure other than rate limiting or quota exhaustion (500)."""

    status_code = 500


class GatewayRateLimitError(GatewayError):
    """Upstream rate limit (429)."""

    status_code = 429


class GatewayQuotaError(GatewayError):
    """Upstream credits or quota exhausted (402)."""

    status_code = 402
