"""
Tests for profile persistence and the session store handle.
"""

from datetime import datetime

import pytest

from dex.core.errors import DayLocked, InvalidPhaseTransition
from dex.core.models import Role, UserProfile
from dex.core.store import (
    InMemoryProfileStore,
    JsonFileProfileStore,
    UserProgressStore,
    load_profile,
)
from onboarding.forms import FeedbackForm
from onboarding.graduation import GraduationPhase

NOW = datetime(2024, 1, 2, 9, 30)


@pytest.fixture
def backing():
    return InMemoryProfileStore()


@pytest.fixture
def progress(backing, sink, journal):
    progress = UserProgressStore(backing, "user-1", sink=sink, journal=journal, name="Alex Rivera")
    progress.begin_journey()
    return progress


class TestProfileStores:
    def test_in_memory_missing_key(self, backing):
        assert backing.get("nobody") is None

    def test_json_file_store(self, tmp_path, pm_user):
        store = JsonFileProfileStore(tmp_path / "profiles")
        store.set("user-pm", pm_user)

        assert (tmp_path / "profiles" / "user-pm.json").exists()
        assert store.get("user-pm") == pm_user
        assert store.get("someone-else") is None


class TestLoadProfile:
    """Recovery from unusable stored data."""

    def test_missing_profile_is_fresh(self, backing):
        profile = load_profile(backing, "user-1", name="Alex Rivera")

        assert profile.id == "user-1"
        assert profile.name == "Alex Rivera"
        assert profile.onboarding_day == 0

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "[]",
            '{"id": "user-1", "role": "CEO"}',
            '{"id": "user-1", "onboarding_day": 9}',
            '{"id": "user-1", "unexpected": true}',
            '{"id": "user-1", "day_progress": [1, 2]}',
            '{"id": "user-1", "day_progress": {"1": true}}',
            '{"id": "user-1", "onboarding_day": true}',
        ],
    )
    def test_malformed_profile_is_replaced(self, backing, raw):
        backing.records["user-1"] = raw

        profile = load_profile(backing, "user-1")

        assert profile == UserProfile.new("user-1")

    def test_unreadable_file_is_replaced(self, tmp_path):
        directory = tmp_path / "profiles"
        directory.mkdir()
        (directory / "user-1.json").write_text("garbage", encoding="utf-8")

        assert load_profile(JsonFileProfileStore(directory), "user-1").onboarding_day == 0

    def test_non_utf8_file_is_replaced(self, tmp_path):
        directory = tmp_path / "profiles"
        directory.mkdir()
        (directory / "user-1.json").write_bytes(b"\xff\xfe\x00garbage")

        assert load_profile(JsonFileProfileStore(directory), "user-1") == UserProfile.new("user-1")


class TestUserProgressStore:
    def test_begin_journey_persists(self, progress, backing):
        assert progress.profile.onboarding_day == 1
        assert backing.get("user-1").onboarding_day == 1

    def test_complete_day_persists_and_notifies(self, progress, backing, sink):
        progress.complete_day(1, NOW)

        assert backing.get("user-1").is_day_completed(1)
        assert progress.profile.onboarding_day == 2
        assert sink.messages == ["Day 1 complete!"]

    def test_locked_day_raises(self, progress):
        with pytest.raises(DayLocked):
            progress.complete_day(4, NOW)

    def test_attempt_reports_blocked(self, progress, backing):
        outcome = progress.attempt("complete_day", lambda: progress.complete_day(4, NOW))

        assert outcome.ok is False
        assert outcome.blocked_reason == "Day 4 is locked (active day is 1)"
        assert backing.get("user-1").onboarding_day == 1

    def test_attempt_passes_value_through(self, progress):
        outcome = progress.attempt("complete_day", lambda: progress.complete_day(1, NOW))

        assert outcome.ok is True
        assert outcome.value.onboarding_day == 2

    def test_can_complete(self, progress):
        assert progress.can_complete(1) is True
        assert progress.can_complete(2) is False

    def test_new_session_reads_persisted_profile(self, progress, backing, journal):
        progress.complete_day(1, NOW)
        reopened = UserProgressStore(backing, "user-1", journal=journal)

        assert reopened.profile.onboarding_day == 2

    def test_full_journey_to_graduation(self, progress, backing, sink):
        for day in range(1, 6):
            progress.complete_day(day, NOW)

        flow = progress.graduation
        flow.advance_to(GraduationPhase.SIGNOFF)
        flow.request_signoff(sink)
        flow.approve_signoff(NOW)
        flow.advance_to(GraduationPhase.FEEDBACK)

        blocked = progress.attempt("graduate", progress.graduate)
        assert blocked.ok is False

        flow.submit_feedback(FeedbackForm(overall_satisfaction=5, confidence_level=4), NOW)
        profile = progress.graduate()

        assert profile.onboarding_complete is True
        assert backing.get("user-1").onboarding_complete is True

    def test_reset(self, progress, backing):
        progress.complete_day(1, NOW)
        fresh = progress.reset()

        assert fresh.day_progress == {}
        assert backing.get("user-1").onboarding_day == 0

    def test_manager_preboarding(self, backing, journal):
        progress = UserProgressStore(backing, "mgr", journal=journal, role=Role.MANAGER)
        assert progress.begin_journey(with_preboarding=True).onboarding_day == 0

    def test_graduate_before_final_day_blocked(self, progress, backing, sink):
        flow = progress.graduation
        flow.advance_to(GraduationPhase.SIGNOFF)
        flow.request_signoff(sink)
        flow.approve_signoff(NOW)
        flow.advance_to(GraduationPhase.FEEDBACK)
        flow.submit_feedback(FeedbackForm(overall_satisfaction=5, confidence_level=5), NOW)

        outcome = progress.attempt("graduate", progress.graduate)

        assert outcome.ok is False
        assert outcome.blocked_reason == "Day 5 is locked (active day is 1)"
        assert backing.get("user-1").onboarding_complete is False
        assert not any("Congratulations" in message for message in sink.messages)

    def test_begin_journey_again_keeps_progress(self, progress, backing):
        progress.complete_day(1, NOW)

        with pytest.raises(InvalidPhaseTransition):
            progress.begin_journey(name="Alex R.")

        stored = backing.get("user-1")
        assert stored.is_day_completed(1)
        assert stored.onboarding_day == 2
        assert stored.name == "Alex Rivera"

    def test_begin_journey_sets_identity(self, backing, journal):
        progress = UserProgressStore(backing, "new-hire", journal=journal)
        progress.begin_journey(name="Sam Patel", job_title="Designer")

        stored = backing.get("new-hire")
        assert stored.name == "Sam Patel"
        assert stored.job_title == "Designer"
        assert stored.onboarding_day == 1


class TestSaveGuards:
    @pytest.fixture
    def advanced(self, progress):
        progress.complete_day(1, NOW)
        progress.complete_day(2, NOW)
        return progress

    def test_identity_edit_allowed(self, advanced, backing):
        advanced.save(advanced.profile.copy(job_title="Senior Product Manager"))
        assert backing.get("user-1").job_title == "Senior Product Manager"

    @pytest.mark.parametrize(
        "changes",
        [
            {"day_progress": {}},
            {"onboarding_day": 1},
            {"onboarding_day": 0, "day_progress": {}},
        ],
    )
    def test_progress_cannot_regress(self, advanced, backing, changes):
        with pytest.raises(InvalidPhaseTransition):
            advanced.save(advanced.profile.copy(**changes))

        stored = backing.get("user-1")
        assert stored.onboarding_day == 3
        assert stored.is_day_completed(2)
