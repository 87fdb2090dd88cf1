"""
Tests for marketplace save operations.

A recording translator stands in for TranslationClient so that batching and
the written provenance triples can be asserted directly.
"""

import pytest

from workbridge import marketplace
from workbridge.models import TranslationResult
from workbridge.session import Identity, NotAuthenticatedError, StaticSessionProvider
from workbridge.store import InMemoryRecordStore

TRANSLATIONS = {
    "मैं एक अनुभवी रसोइया हूँ": ("I am an experienced cook", "hi"),
    "राम कुमार": ("Ram Kumar", "hi"),
    "ಬೆಂಗಳೂರು": ("Bengaluru", "kn"),
    "ಕರ್ನಾಟಕ": ("Karnataka", "kn"),
    "कृपया कल सुबह आइए": ("Please come tomorrow morning", "hi"),
    "बहुत अच्छा काम": ("Very good work", "hi"),
}


class RecordingTranslator:
    def __init__(self, fail=False):
        self.batches = []
        self.fail = fail

    def request_translations(self, items):
        self.batches.append([(i.field, i.value) for i in items])
        results = []
        for item in items:
            if self.fail:
                results.append(TranslationResult(item.field, item.value, item.value, None, False))
                continue
            translated, language = TRANSLATIONS.get(item.value, (item.value, "en"))
            results.append(TranslationResult(
                item.field, item.value, translated, language, translated != item.value
            ))
        return results


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def translator():
    return RecordingTranslator()


@pytest.fixture
def worker():
    return Identity(user_id="user-1", email="worker@example.com")


class TestSignUp:
    def test_worker_sign_up_creates_both_rows(self, store, translator, worker):
        profile = marketplace.sign_up(store, worker, translator, "राम कुमार", "worker")

        assert profile["full_name"] == "Ram Kumar"
        assert profile["full_name_original"] == "राम कुमार"
        assert profile["full_name_language"] == "hi"
        assert profile["user_id"] == "user-1"
        assert profile["email"] == "worker@example.com"
        assert store.select("worker_profiles", {"user_id": "user-1"})
        assert translator.batches == [[("full_name", "राम कुमार")]]

    def test_customer_sign_up_has_no_worker_row(self, store, translator):
        customer = Identity(user_id="user-2")
        marketplace.sign_up(store, customer, translator, "John Smith", "customer")

        assert store.select("worker_profiles") == []
        profile = store.select("profiles", {"user_id": "user-2"})[0]
        assert profile["full_name"] == "John Smith"
        assert profile["full_name_original"] is None
        assert profile["full_name_language"] == "en"

    def test_invalid_role(self, store, translator, worker):
        with pytest.raises(ValueError):
            marketplace.sign_up(store, worker, translator, "Asha", "admin")

    @pytest.mark.parametrize("full_name", ["", "   ", None])
    def test_blank_name_rejected(self, store, translator, worker, full_name):
        with pytest.raises(ValueError, match="full_name is required"):
            marketplace.sign_up(store, worker, translator, full_name, "customer")

        assert store.select("profiles") == []
        assert translator.batches == []

    def test_requires_identity(self, store, translator):
        with pytest.raises(NotAuthenticatedError):
            marketplace.sign_up(store, None, translator, "Asha", "worker")


class TestSaveProfile:
    def test_worker_fields_translated_in_one_batch(self, store, translator, worker):
        marketplace.sign_up(store, worker, translator, "Ram", "worker")
        translator.batches.clear()

        saved = marketplace.save_profile(
            store, worker, translator, "worker",
            full_name="राम कुमार",
            phone="98450 00000",
            bio="मैं एक अनुभवी रसोइया हूँ",
            city="ಬೆಂಗಳೂರು",
            state="ಕರ್ನಾಟಕ",
            experience_years="7",
            hourly_rate="250",
            is_available=True,
        )

        assert translator.batches == [[
            ("full_name", "राम कुमार"),
            ("bio", "मैं एक अनुभवी रसोइया हूँ"),
            ("city", "ಬೆಂಗಳೂರು"),
            ("state", "ಕರ್ನಾಟಕ"),
        ]]
        assert saved["profile"]["full_name"] == "Ram Kumar"
        assert saved["profile"]["phone"] == "98450 00000"

        worker_profile = saved["worker_profile"]
        assert {k: worker_profile[k] for k in ("bio", "bio_original", "bio_language")} == {
            "bio": "I am an experienced cook",
            "bio_original": "मैं एक अनुभवी रसोइया हूँ",
            "bio_language": "hi",
        }
        assert worker_profile["city"] == "Bengaluru"
        assert worker_profile["state_language"] == "kn"
        assert worker_profile["experience_years"] == 7
        assert worker_profile["hourly_rate"] == 250.0
        assert worker_profile["is_available"] is True
        assert "full_name" not in worker_profile

    def test_customer_only_translates_name(self, store, translator):
        customer = Identity(user_id="user-2")
        marketplace.sign_up(store, customer, translator, "John", "customer")
        translator.batches.clear()

        saved = marketplace.save_profile(
            store, customer, translator, "customer", full_name="John Smith", bio="ignored"
        )

        assert translator.batches == [[("full_name", "John Smith")]]
        assert saved["worker_profile"] is None
        assert saved["profile"]["phone"] is None

    def test_blank_name_keeps_stored_name(self, store, translator):
        customer = Identity(user_id="user-2")
        marketplace.sign_up(store, customer, translator, "Asha", "customer")
        translator.batches.clear()

        with pytest.raises(ValueError, match="full_name is required"):
            marketplace.save_profile(store, customer, translator, "customer", full_name="")

        assert translator.batches == []
        assert store.select("profiles", {"user_id": "user-2"})[0]["full_name"] == "Asha"

    def test_blank_fields_clear_provenance(self, store, translator, worker):
        marketplace.sign_up(store, worker, translator, "Ram", "worker")
        marketplace.save_profile(
            store, worker, translator, "worker", full_name="Ram", bio="मैं एक अनुभवी रसोइया हूँ"
        )

        saved = marketplace.save_profile(
            store, worker, translator, "worker", full_name="Ram", bio="  "
        )

        worker_profile = saved["worker_profile"]
        assert worker_profile["bio"] == "  "
        assert worker_profile["bio_original"] is None
        assert worker_profile["bio_language"] is None

    def test_translation_outage_still_saves(self, store, worker):
        marketplace.sign_up(store, worker, RecordingTranslator(), "Ram", "worker")

        saved = marketplace.save_profile(
            store, worker, RecordingTranslator(fail=True), "worker",
            full_name="राम कुमार", city="ಬೆಂಗಳೂರು",
        )

        assert saved["profile"]["full_name"] == "राम कुमार"
        assert saved["profile"]["full_name_language"] is None
        assert saved["worker_profile"]["city"] == "ಬೆಂಗಳೂರು"
        assert saved["worker_profile"]["city_original"] is None

    def test_missing_profile(self, store, translator, worker):
        with pytest.raises(LookupError):
            marketplace.save_profile(store, worker, translator, "customer", full_name="Ram")


class TestHireRequest:
    def test_message_triple_and_ownership(self, store, translator):
        session = StaticSessionProvider(Identity(user_id="customer-9"))

        record = marketplace.send_hire_request(
            store, session.current_identity(), translator, "worker-3", "कृपया कल सुबह आइए"
        )

        assert record["hirer_id"] == "customer-9"
        assert record["worker_id"] == "worker-3"
        assert record["status"] == "pending"
        assert record["message"] == "Please come tomorrow morning"
        assert record["message_original"] == "कृपया कल सुबह आइए"
        assert record["message_language"] == "hi"
        assert translator.batches == [[("message", "कृपया कल सुबह आइए")]]

    def test_signed_out_session_rejected(self, store, translator):
        session = StaticSessionProvider(Identity(user_id="customer-9"))
        session.sign_out()

        with pytest.raises(NotAuthenticatedError):
            marketplace.send_hire_request(
                store, session.current_identity(), translator, "worker-3", "hello"
            )

    def test_blank_message_rejected(self, store, translator, worker):
        with pytest.raises(ValueError):
            marketplace.send_hire_request(store, worker, translator, "worker-3", "   ")
        assert translator.batches == []


class TestReview:
    def test_review_with_comment(self, store, translator, worker):
        record = marketplace.submit_review(
            store, worker, translator, "worker-3", 5, "बहुत अच्छा काम"
        )

        assert record["rating"] == 5
        assert record["comment"] == "Very good work"
        assert record["comment_original"] == "बहुत अच्छा काम"
        assert record["comment_language"] == "hi"

    def test_review_without_comment_skips_translation(self, store, translator, worker):
        record = marketplace.submit_review(store, worker, translator, "worker-3", 4)

        assert translator.batches == []
        assert record["comment"] is None
        assert record["comment_language"] is None

    @pytest.mark.parametrize("rating", [0, 6, 4.5, True, "5"])
    def test_invalid_rating(self, store, translator, worker, rating):
        with pytest.raises(ValueError):
            marketplace.submit_review(store, worker, translator, "worker-3", rating, "ok")
