"""
Configuration loading for the workbridge translation boundary.

Configuration is assembled in three layers, later layers winning:

1. ``DEFAULT_CONFIG`` below
2. An optional YAML file named by the ``WORKBRIDGE_CONFIG`` environment variable
3. Environment variables (a local ``.env`` file is loaded first via python-dotenv)

Environment variables:
- TRANSLATE_API_KEY: bearer token for the chat-completion gateway (required to translate)
- TRANSLATE_GATEWAY_URL: chat-completion endpoint URL
- TRANSLATE_MODEL: model slug sent to the gateway
- TRANSLATE_SERVICE_URL: URL of the ``/translate`` endpoint used by the client
- WORKBRIDGE_CONFIG: path to a YAML override file
"""

from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

API_KEY_ENV = "TRANSLATE_API_KEY"

# Indian languages the marketplace expects users to write in.
DEFAULT_EXPECTED_LANGUAGES: List[str] = [
    "hi",  # Hindi
    "kn",  # Kannada
    "te",  # Telugu
    "ta",  # Tamil
    "ml",  # Malayalam
    "mr",  # Marathi
    "bn",  # Bengali
    "gu",  # Gujarati
    "pa",  # Punjabi
    "or",  # Odia
    "as",  # Assamese
    "ur",  # Urdu
]

DEFAULT_CONFIG: Dict[str, Any] = {
    "gateway": {
        "url": "https://ai.gateway.lovable.dev/v1/chat/completions",
        "model": "google/gemini-3-flash-preview",
        "temperature": 0.1,
        "request_timeout_seconds": {"connect": 10, "read": 30},
    },
    "languages": {
        "expected": DEFAULT_EXPECTED_LANGUAGES,
    },
    "client": {
        "service_url": "http://localhost:5000/translate",
        "timeout_seconds": 45,
        # 1 means a single attempt (no automatic retry)
        "max_attempts": 1,
    },
}

_ENV_OVERRIDES = {
    "TRANSLATE_GATEWAY_URL": ("gateway", "url"),
    "TRANSLATE_MODEL": ("gateway", "model"),
    "TRANSLATE_SERVICE_URL": ("client", "service_url"),
}


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge ``override`` into a copy of ``base``."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_yaml(path: str | Path) -> Dict[str, Any]:
    p = Path(path)
    data = yaml.safe_load(p.read_text(encoding="utf-8"))
    if data is not None and not isinstance(data, dict):
        raise ValueError(f"Config file {p} must contain a mapping at the top level")
    return data or {}


def get_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """
    Build the effective configuration.

    Args:
        path: Optional YAML file; defaults to the WORKBRIDGE_CONFIG env var

    Returns:
        Configuration dictionary (a fresh copy on every call)
    """
    load_dotenv()

    config = copy.deepcopy(DEFAULT_CONFIG)

    yaml_path = path or os.environ.get("WORKBRIDGE_CONFIG")
    if yaml_path:
        config = _deep_merge(config, load_yaml(yaml_path))
        logger.info("Loaded configuration overrides from %s", yaml_path)

    for env_name, (section, key) in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            config[section][key] = value

    return config


def get_api_key() -> Optional[str]:
    """
    Read the gateway credential.

    Not cached: a missing key is reported per request, never at startup.
    """
    load_dotenv()
    key = os.environ.get(API_KEY_ENV, "").strip()
    return key or None


def get_expected_languages(config: Optional[Dict[str, Any]] = None) -> List[str]:
    """Return the closed set of non-English language codes to detect."""
    cfg = config or get_config()
    languages = (cfg.get("languages") or {}).get("expected") or []
    return [str(code).strip().lower() for code in languages if str(code).strip()]
