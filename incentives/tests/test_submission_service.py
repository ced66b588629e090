"""
Tests for SubmissionService.

Tests cover:
1. Storage form of submission timestamps
2. One submission per user per business day
3. Cache invalidation on write
"""
import json
import pytest
from datetime import datetime, timedelta, timezone

from incentives.cache import TTLCache
from incentives.exceptions import DuplicateSubmissionException
from incentives.schemas import SubmissionCreate
from incentives.services.submission_service import SubmissionService
from incentives.tests.conftest import utc

BRT = timezone(timedelta(hours=-3))


def checklist(user_id="alice"):
    return SubmissionCreate(user_id=user_id, checklist={"1": True, "2": "7"})


class TestStoredTimestamps:
    """Submissions are stored as naive UTC"""

    def test_aware_time_converted_to_utc(self, db_session):
        submission = SubmissionService(db_session).create_submission(
            checklist(), now=datetime(2024, 1, 30, 22, 30, tzinfo=BRT)
        )

        assert submission.created_at == datetime(2024, 1, 31, 1, 30)
        assert submission.date == submission.created_at

    def test_naive_time_kept_as_utc(self, db_session):
        submission = SubmissionService(db_session).create_submission(
            checklist(), now=datetime(2024, 1, 30, 22, 30)
        )

        assert submission.created_at == datetime(2024, 1, 30, 22, 30)

    def test_checklist_stored_as_json(self, db_session):
        submission = SubmissionService(db_session).create_submission(checklist(), now=utc(2024, 1, 30, 9))

        assert json.loads(submission.checklist) == {"1": True, "2": "7"}


class TestOneSubmissionPerDay:
    """Duplicate detection by business day"""

    def test_second_submission_same_day_rejected(self, db_session):
        service = SubmissionService(db_session)
        service.create_submission(checklist(), now=utc(2024, 1, 30, 9))

        with pytest.raises(DuplicateSubmissionException):
            service.create_submission(checklist(), now=utc(2024, 1, 30, 17))

    def test_next_day_accepted(self, db_session):
        service = SubmissionService(db_session)
        service.create_submission(checklist(), now=utc(2024, 1, 30, 23, 59))
        service.create_submission(checklist(), now=utc(2024, 1, 31, 0, 1))

        assert len(service.get_submissions("alice")) == 2

    def test_other_user_same_day_accepted(self, db_session):
        service = SubmissionService(db_session)
        service.create_submission(checklist("alice"), now=utc(2024, 1, 30, 9))
        service.create_submission(checklist("bob"), now=utc(2024, 1, 30, 9))

        assert service.has_submission_on("bob", utc(2024, 1, 30, 12))
        assert not service.has_submission_on("carol", utc(2024, 1, 30, 12))


class TestCacheInvalidation:

    def test_write_drops_cached_submissions(self, db_session):
        cache = TTLCache(300)
        cache.set(("submissions", "alice", "2024-01-30"), [])
        cache.set(("submissions", "bob", "2024-01-30"), [])

        SubmissionService(db_session, cache).create_submission(checklist(), now=utc(2024, 1, 30, 9))

        assert cache.get(("submissions", "alice", "2024-01-30")) is None
        assert cache.get(("submissions", "bob", "2024-01-30")) == []
