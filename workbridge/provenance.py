"""
Provenance triples for translated text fields.

For a translatable field ``<f>`` three sibling columns are written together:

- ``<f>``: the working (English) value shown in the product
- ``<f>_original``: the user's verbatim input, only when it differs from the working value
- ``<f>_language``: detected source language code, or None when unknown
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Mapping, Optional

from .models import TranslationResult

ORIGINAL_SUFFIX = "_original"
LANGUAGE_SUFFIX = "_language"


@dataclass
class ProvenanceTriple:
    """Working value, original input and detected language for one field."""

    field: str
    value: Optional[str]
    original: Optional[str] = None
    language: Optional[str] = None

    @classmethod
    def from_result(cls, result: TranslationResult) -> ProvenanceTriple:
        working = result.translated or result.original
        return cls(
            field=result.field,
            value=working,
            original=result.original if result.original != working else None,
            language=result.detected_language,
        )

    @classmethod
    def untranslated(cls, field: str, value: Optional[str]) -> ProvenanceTriple:
        """Triple for a field that was not sent for translation (e.g. blank)."""
        return cls(field=field, value=value, original=None, language=None)

    def to_patch(self) -> Dict[str, Any]:
        return {
            self.field: self.value,
            f"{self.field}{ORIGINAL_SUFFIX}": self.original,
            f"{self.field}{LANGUAGE_SUFFIX}": self.language,
        }


def provenance_patch(
    values: Mapping[str, Optional[str]],
    results: Iterable[TranslationResult],
) -> Dict[str, Any]:
    """
    Build the combined patch for several fields.

    Every field in ``values`` gets all three columns. Fields without a
    matching result keep their submitted value with no provenance.

    Args:
        values: field name -> value the user submitted
        results: Translation results (matched by ``field``)

    Returns:
        Flat dict ready to be written as one record patch
    """
    by_field = {result.field: result for result in results}
    patch: Dict[str, Any] = {}
    for field, value in values.items():
        result = by_field.get(field)
        if result is not None and value is not None and result.original == value:
            triple = ProvenanceTriple.from_result(result)
        else:
            triple = ProvenanceTriple.untranslated(field, value or None)
        patch.update(triple.to_patch())
    return patch


def reconstruct_original(record: Mapping[str, Any], field: str) -> Optional[str]:
    """Return what the user actually typed for ``field``."""
    original = record.get(f"{field}{ORIGINAL_SUFFIX}")
    if original:
        return original
    return record.get(field)
