"""
Submission service.
Records daily checklists, one per user per business day.
"""
import json
import logging
from datetime import datetime, timezone
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.cache import TTLCache
from incentives.models import Submission
from incentives.schemas import SubmissionCreate
from incentives.repositories.submission_repository import SubmissionRepository
from incentives.exceptions import DuplicateSubmissionException
from incentives.services.date_service import DateService

logger = logging.getLogger("incentives.submissions")


def _to_utc_naive(dt: datetime) -> datetime:
    """Storage form of a timestamp; naive input is already UTC"""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(timezone.utc).replace(tzinfo=None)


class SubmissionService:
    """Service for checklist submissions"""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache
        self.submission_repo = SubmissionRepository()

    def get_submissions(self, user_id: str) -> List[Submission]:
        """Get submission history of a user"""
        return self.submission_repo.get_by_user(self.db, user_id)

    def has_submission_on(self, user_id: str, now: datetime) -> bool:
        """Whether user already submitted on the business day containing now"""
        day_start, day_end = DateService.get_day_range(DateService.business_date(now))
        existing = self.submission_repo.get_in_range(
            self.db, _to_utc_naive(day_start), _to_utc_naive(day_end), user_id
        )
        return len(existing) > 0

    def create_submission(
        self,
        submission_data: SubmissionCreate,
        now: Optional[datetime] = None
    ) -> Submission:
        """
        Record a checklist submission.

        Raises:
            DuplicateSubmissionException: If the user already submitted today
        """
        now = now or datetime.now(timezone.utc)
        if self.has_submission_on(submission_data.user_id, now):
            raise DuplicateSubmissionException(
                submission_data.user_id, DateService.business_date(now)
            )

        stored_at = _to_utc_naive(now)
        submission = Submission(
            user_id=submission_data.user_id,
            date=stored_at,
            checklist=json.dumps(submission_data.checklist),
            observation=submission_data.observation,
            attachment_id=submission_data.attachment_id,
            created_at=stored_at
        )
        submission = self.submission_repo.create(self.db, submission)
        logger.info(f"Submission {submission.id} recorded for {submission.user_id}")

        if self.cache is not None:
            self.cache.invalidate("submissions", submission.user_id)
        return submission
