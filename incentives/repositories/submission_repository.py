"""
Submission repository - Data access layer for Submission model.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.models import Submission


class SubmissionRepository:
    """Repository for Submission data access"""

    @staticmethod
    def get_by_user(db: Session, user_id: str) -> List[Submission]:
        """Get full submission history of a user"""
        return db.query(Submission).filter(
            Submission.user_id == user_id
        ).order_by(Submission.created_at).all()

    @staticmethod
    def get_in_range(
        db: Session,
        start: datetime,
        end: datetime,
        user_id: Optional[str] = None
    ) -> List[Submission]:
        """Get submissions created in [start, end), optionally for one user"""
        query = db.query(Submission).filter(
            Submission.created_at >= start,
            Submission.created_at < end
        )
        if user_id:
            query = query.filter(Submission.user_id == user_id)
        return query.order_by(Submission.created_at).all()

    @staticmethod
    def create(db: Session, submission: Submission) -> Submission:
        """Create new submission"""
        db.add(submission)
        db.commit()
        db.refresh(submission)
        return submission
