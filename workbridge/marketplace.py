"""
Marketplace save operations that carry translated free text.

Each operation translates all of its text fields with one call to the
translator and writes every affected record as a single patch containing the
provenance triples (see ``workbridge.provenance``). The signed-in identity is
always passed in explicitly.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence

from .models import TranslationRequestItem, TranslationResult, is_blank
from .provenance import provenance_patch
from .session import Identity, require_identity
from .store import Record, RecordStore

logger = logging.getLogger(__name__)

PROFILES = "profiles"
WORKER_PROFILES = "worker_profiles"
HIRE_REQUESTS = "hire_requests"
REVIEWS = "reviews"

ROLES = {"worker", "customer"}
WORKER_TEXT_FIELDS = ("bio", "city", "state")


class Translator(Protocol):
    def request_translations(
        self, items: Sequence[TranslationRequestItem]
    ) -> List[TranslationResult]:
        ...


def _check_role(role: str) -> str:
    if role not in ROLES:
        raise ValueError(f"Invalid role: {role!r} (expected one of {sorted(ROLES)})")
    return role


def _check_full_name(full_name: Optional[str]) -> None:
    # profiles.full_name is NOT NULL
    if is_blank(full_name):
        raise ValueError("full_name is required")


def _translate_fields(
    translator: Translator, values: Dict[str, Optional[str]]
) -> Dict[str, Any]:
    """Translate ``values`` in one batch and return the combined triple patch."""
    items = [
        TranslationRequestItem(field=field, value=value)
        for field, value in values.items()
        if not is_blank(value)
    ]
    results = translator.request_translations(items) if items else []
    return provenance_patch(values, results)


def sign_up(
    store: RecordStore,
    identity: Optional[Identity],
    translator: Translator,
    full_name: str,
    role: str,
) -> Record:
    """
    Create the profile rows for a newly registered user.

    Returns:
        The inserted ``profiles`` record
    """
    identity = require_identity(identity)
    _check_role(role)
    _check_full_name(full_name)

    record: Record = {
        "user_id": identity.user_id,
        "email": identity.email,
        "role": role,
    }
    record.update(_translate_fields(translator, {"full_name": full_name}))
    profile = store.insert(PROFILES, record)

    if role == "worker":
        store.insert(WORKER_PROFILES, {"user_id": identity.user_id})

    logger.info("Created %s profile for user %s", role, identity.user_id)
    return profile


def save_profile(
    store: RecordStore,
    identity: Optional[Identity],
    translator: Translator,
    role: str,
    full_name: str,
    phone: Optional[str] = None,
    bio: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    experience_years: Optional[int] = None,
    hourly_rate: Optional[float] = None,
    is_available: Optional[bool] = None,
) -> Dict[str, Optional[Record]]:
    """
    Save profile edits.

    Customers only have ``full_name`` translated; workers also have ``bio``,
    ``city`` and ``state``. All fields share one translation batch.

    Returns:
        ``{"profile": ..., "worker_profile": ...}`` as stored

    Raises:
        LookupError: If the user's profile row does not exist
    """
    identity = require_identity(identity)
    _check_role(role)
    _check_full_name(full_name)

    values: Dict[str, Optional[str]] = {"full_name": full_name}
    if role == "worker":
        values.update({"bio": bio, "city": city, "state": state})

    patch = _translate_fields(translator, values)

    profile_patch = {
        key: value
        for key, value in patch.items()
        if key.startswith("full_name")
    }
    profile_patch["phone"] = phone or None

    key = {"user_id": identity.user_id}
    profile = store.update(PROFILES, key, profile_patch)
    if profile is None:
        raise LookupError(f"No profile for user {identity.user_id}")

    worker_profile = None
    if role == "worker":
        worker_patch = {
            k: v for k, v in patch.items() if not k.startswith("full_name")
        }
        if experience_years is not None:
            worker_patch["experience_years"] = int(experience_years)
        if hourly_rate is not None:
            worker_patch["hourly_rate"] = float(hourly_rate)
        if is_available is not None:
            worker_patch["is_available"] = bool(is_available)
        worker_profile = store.update(WORKER_PROFILES, key, worker_patch)
        if worker_profile is None:
            raise LookupError(f"No worker profile for user {identity.user_id}")

    return {"profile": profile, "worker_profile": worker_profile}


def send_hire_request(
    store: RecordStore,
    identity: Optional[Identity],
    translator: Translator,
    worker_id: str,
    message: str,
) -> Record:
    """Create a pending hire request from the signed-in user to ``worker_id``."""
    identity = require_identity(identity)
    if not worker_id:
        raise ValueError("worker_id is required")
    if is_blank(message):
        raise ValueError("message is required")

    record: Record = {
        "worker_id": worker_id,
        "hirer_id": identity.user_id,
        "status": "pending",
    }
    record.update(_translate_fields(translator, {"message": message}))
    return store.insert(HIRE_REQUESTS, record)


def submit_review(
    store: RecordStore,
    identity: Optional[Identity],
    translator: Translator,
    worker_id: str,
    rating: int,
    comment: Optional[str] = None,
) -> Record:
    """Record a 1-5 star review of ``worker_id`` with an optional comment."""
    identity = require_identity(identity)
    if not worker_id:
        raise ValueError("worker_id is required")
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise ValueError("rating must be an integer from 1 to 5")

    record: Record = {
        "worker_id": worker_id,
        "hirer_id": identity.user_id,
        "rating": rating,
    }
    record.update(_translate_fields(translator, {"comment": comment}))
    return store.insert(REVIEWS, record)
