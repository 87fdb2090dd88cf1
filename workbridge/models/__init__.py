from .translation import TranslationRequestItem, TranslationResult, is_blank

__all__ = ["TranslationRequestItem", "TranslationResult", "is_blank"]
