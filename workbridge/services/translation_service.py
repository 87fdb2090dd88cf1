"""
Translation service for the workbridge marketplace.

Receives a batch of free-text fields, asks the language model to detect the
source language and translate to English in a single call, and re-aligns the
model's reply with the input batch by index.

Hard failures (bad request, missing credentials, upstream errors) raise
``TranslationServiceError`` subclasses. A reply that cannot be parsed or
aligned never fails the request: affected items fall back to their original
text tagged as English.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..config import get_config, get_expected_languages
from ..models import TranslationRequestItem, TranslationResult
from .errors import (
    GatewayError,
    GatewayQuotaError,
    GatewayRateLimitError,
    MissingCredentialsError,
    TranslationRequestError,
    TranslationServiceError,
)
from .model_gateway import ChatCompletionGateway

logger = logging.getLogger(__name__)

# Service-side fallback language. The client-side fallback uses None instead.
FALLBACK_LANGUAGE = "en"

LANGUAGE_NAMES: Dict[str, str] = {
    "en": "English",
    "hi": "Hindi",
    "kn": "Kannada",
    "te": "Telugu",
    "ta": "Tamil",
    "ml": "Malayalam",
    "mr": "Marathi",
    "bn": "Bengali",
    "gu": "Gujarati",
    "pa": "Punjabi",
    "or": "Odia",
    "as": "Assamese",
    "ur": "Urdu",
}

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)

__all__ = [
    "TranslationService",
    "TranslationServiceError",
    "TranslationRequestError",
    "MissingCredentialsError",
    "GatewayError",
    "GatewayRateLimitError",
    "GatewayQuotaError",
    "FALLBACK_LANGUAGE",
    "build_system_instruction",
    "build_user_instruction",
    "parse_model_reply",
]


def _language_label(code: str) -> str:
    name = LANGUAGE_NAMES.get(code)
    return f"{name} ({code})" if name else code


def build_system_instruction(expected_languages: Sequence[str]) -> str:
    """System prompt naming the closed set of languages to detect."""
    labels = ", ".join(_language_label(code) for code in expected_languages)
    return (
        "You are a translation expert specializing in Indian languages. Your task is to:\n"
        f"1. Detect if the text is in one of these languages: {labels}\n"
        "2. If the text is in one of those languages, translate it to English\n"
        "3. If the text is already in English or uses English words written in Roman script, "
        "return it as-is\n"
        "4. Preserve proper nouns, names, and places as much as possible\n\n"
        "IMPORTANT: You must respond ONLY with a valid JSON array, "
        "no additional text or explanation."
    )


def build_user_instruction(items: Sequence[TranslationRequestItem]) -> str:
    """User prompt listing every item tagged with its batch index."""
    texts = "\n".join(
        f"[{index}] {item.field}: {json.dumps(item.value, ensure_ascii=False)}"
        for index, item in enumerate(items)
    )
    return (
        "Process the following texts. For each text:\n"
        "- Detect the language\n"
        "- Translate to English if it's not English\n"
        "- Return the original if it's already English\n\n"
        f"Texts to process:\n{texts}\n\n"
        "Respond with a JSON array where each item has:\n"
        '- "index": the number in brackets\n'
        '- "detectedLanguage": ISO 639-1 code (e.g., "hi" for Hindi, "en" for English)\n'
        '- "translated": the English translation (or original if already English)\n'
        '- "isTranslated": boolean indicating if translation was performed\n\n'
        "Example response format:\n"
        '[{"index": 0, "detectedLanguage": "hi", "translated": "Hello", "isTranslated": true}]'
    )


def parse_model_reply(content: str) -> Optional[List[Any]]:
    """
    Parse the model reply into a list.

    Strips a surrounding ```json fence when present.

    Returns:
        The parsed list, or None when the reply is not a JSON array.
    """
    if not isinstance(content, str):
        return None
    json_string = content.strip()
    if "```" in json_string:
        match = _FENCE_RE.search(json_string)
        if match:
            json_string = match.group(1).strip()
    try:
        parsed = json.loads(json_string)
    except ValueError:
        return None
    if not isinstance(parsed, list):
        return None
    return parsed


def _index_entries(entries: List[Any]) -> Dict[int, Dict[str, Any]]:
    """
    Map index -> entry.

    Entries without an integral index (0 or 0.0) are skipped. Indexes that
    appear more than once are dropped entirely, so those items fall back.
    """
    by_index: Dict[int, Dict[str, Any]] = {}
    duplicates = set()
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        index = entry.get("index")
        if isinstance(index, float) and index.is_integer():
            index = int(index)
        if isinstance(index, bool) or not isinstance(index, int):
            continue
        if index in by_index:
            duplicates.add(index)
            continue
        by_index[index] = entry
    for index in duplicates:
        logger.warning("Model reply repeated index %s; using fallback", index)
        by_index.pop(index, None)
    return by_index


def _result_from_entry(item: TranslationRequestItem, entry: Dict[str, Any]) -> TranslationResult:
    translated = entry.get("translated")
    has_translation = isinstance(translated, str) and bool(translated.strip())

    language = entry.get("detectedLanguage")
    if isinstance(language, str) and language.strip():
        language = language.strip().lower()
    else:
        language = FALLBACK_LANGUAGE

    is_translated = (
        entry.get("isTranslated") is True
        and has_translation
        and language != FALLBACK_LANGUAGE
    )
    return TranslationResult(
        field=item.field,
        original=item.value,
        translated=translated if has_translation else item.value,
        detected_language=language,
        is_translated=is_translated,
    )


def coerce_batch(batch: Any) -> List[TranslationRequestItem]:
    """
    Validate the raw ``texts`` payload.

    Raises:
        TranslationRequestError: If batch is missing, not a list, empty, or
            contains non-object entries
    """
    if batch is None or not isinstance(batch, list) or len(batch) == 0:
        raise TranslationRequestError("Invalid request: texts array is required")
    items: List[TranslationRequestItem] = []
    for raw in batch:
        if isinstance(raw, TranslationRequestItem):
            items.append(raw)
        elif isinstance(raw, dict):
            items.append(TranslationRequestItem.from_dict(raw))
        else:
            raise TranslationRequestError(
                "Invalid request: each text must be an object with field and value"
            )
    return items


class TranslationService:
    """Detect-and-translate a batch of text fields with one model call."""

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        gateway: Optional[ChatCompletionGateway] = None,
    ):
        """
        Initialize translation service.

        Args:
            config: Configuration dictionary (optional)
            gateway: Model gateway (optional, built from config)
        """
        self.config = config or get_config()
        self.gateway = gateway or ChatCompletionGateway(self.config)
        self.expected_languages = get_expected_languages(self.config)

    def translate(self, batch: Any) -> List[TranslationResult]:
        """
        Translate a batch of ``{field, value}`` items.

        Args:
            batch: List of dicts (or TranslationRequestItem) as received on the wire

        Returns:
            One TranslationResult per non-blank item, in input order

        Raises:
            TranslationRequestError: Invalid batch (nothing is sent to the model)
            MissingCredentialsError: Gateway key not configured
            GatewayRateLimitError / GatewayQuotaError / GatewayError: upstream failure
        """
        items = coerce_batch(batch)
        valid = [item for item in items if not item.is_blank()]
        if not valid:
            return []

        logger.info("Sending translation request for %d field(s)", len(valid))
        content = self.gateway.complete(
            build_system_instruction(self.expected_languages),
            build_user_instruction(valid),
        )

        entries = parse_model_reply(content)
        if entries is None:
            logger.warning(
                "Failed to parse model reply; returning %d original text(s)", len(valid)
            )
            return [TranslationResult.passthrough(item, FALLBACK_LANGUAGE) for item in valid]

        return self.align_results(valid, entries)

    def align_results(
        self, items: Sequence[TranslationRequestItem], entries: List[Any]
    ) -> List[TranslationResult]:
        """Match model entries to items by index; unmatched items fall back."""
        by_index = _index_entries(entries)
        results: List[TranslationResult] = []
        for index, item in enumerate(items):
            entry = by_index.get(index)
            if entry is None:
                logger.warning("No model entry for index %d (%s); using fallback", index, item.field)
                results.append(TranslationResult.passthrough(item, FALLBACK_LANGUAGE))
            else:
                results.append(_result_from_entry(item, entry))
        return results
