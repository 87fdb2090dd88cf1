"""
Pytest configuration and fixtures for the workbridge test suite.

This module provides reusable fixtures for:
- A fake model gateway that records calls and returns canned replies
- Flask app factory wired to the fake gateway
- Test client for route testing
- Sample configuration
"""

import json
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path to import workbridge.* and app.*
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app import create_app  # noqa: E402
from workbridge.config import DEFAULT_CONFIG  # noqa: E402
from workbridge.services.translation_service import TranslationService  # noqa: E402


class FakeGateway:
    """
    Stand-in for ChatCompletionGateway.

    ``reply`` may be a string, an exception instance (raised), or a callable
    taking ``(system_instruction, user_instruction)``.
    """

    def __init__(self, reply=""):
        self.reply = reply
        self.calls = []

    def complete(self, system_instruction, user_instruction):
        self.calls.append((system_instruction, user_instruction))
        if isinstance(self.reply, Exception):
            raise self.reply
        if callable(self.reply):
            return self.reply(system_instruction, user_instruction)
        return self.reply


def model_reply(entries, fenced=False):
    """Serialize model entries the way the model usually answers."""
    body = json.dumps(entries, ensure_ascii=False)
    if fenced:
        return f"```json\n{body}\n```"
    return body


@pytest.fixture
def base_config():
    return json.loads(json.dumps(DEFAULT_CONFIG))


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def translation_service(base_config, fake_gateway):
    return TranslationService(config=base_config, gateway=fake_gateway)


@pytest.fixture
def app(translation_service):
    app = create_app({'TESTING': True}, translation_service=translation_service)
    yield app


@pytest.fixture
def client(app):
    return app.test_client()
