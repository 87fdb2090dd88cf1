"""
Translation data models for the workbridge translation boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional


def is_blank(value: Any) -> bool:
    """True for None, non-strings, empty strings and whitespace-only strings."""
    return not isinstance(value, str) or not value.strip()


@dataclass
class TranslationRequestItem:
    """One free-text field submitted for translation."""

    field: str
    value: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranslationRequestItem:
        """Create TranslationRequestItem from dictionary."""
        value = data.get("value")
        return cls(
            field="" if data.get("field") is None else str(data.get("field")),
            value=value if isinstance(value, str) else "",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert TranslationRequestItem to dictionary."""
        return {"field": self.field, "value": self.value}

    def is_blank(self) -> bool:
        return is_blank(self.value)


@dataclass
class TranslationResult:
    """
    Translation outcome for one request item.

    ``detected_language`` is None when detection could not be performed,
    which is distinct from "en" (detection succeeded and found English).
    """

    field: str
    original: str
    translated: str
    detected_language: Optional[str] = None
    is_translated: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> TranslationResult:
        """Create TranslationResult from a wire dictionary (camelCase keys)."""
        original = data.get("original") or ""
        return cls(
            field=data.get("field") or "",
            original=original,
            translated=data.get("translated") or original,
            detected_language=data.get("detectedLanguage"),
            is_translated=bool(data.get("isTranslated", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert TranslationResult to a wire dictionary (camelCase keys)."""
        return {
            "field": self.field,
            "original": self.original,
            "translated": self.translated,
            "detectedLanguage": self.detected_language,
            "isTranslated": self.is_translated,
        }

    @classmethod
    def passthrough(
        cls, item: TranslationRequestItem, detected_language: Optional[str] = None
    ) -> TranslationResult:
        """Fallback result that keeps the original text as the working value."""
        return cls(
            field=item.field,
            original=item.value,
            translated=item.value,
            detected_language=detected_language,
            is_translated=False,
        )
