"""
Profile repository - Data access layer for Profile model.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.models import Profile
from incentives.constants import ROLE_COLLABORATOR


class ProfileRepository:
    """Repository for Profile data access"""

    @staticmethod
    def get_all(db: Session, sector: Optional[str] = None) -> List[Profile]:
        """Get profiles, optionally restricted to one sector"""
        query = db.query(Profile)
        if sector:
            query = query.filter(Profile.sector == sector)
        return query.order_by(Profile.user_id).all()

    @staticmethod
    def get_collaborators(db: Session, sector: str) -> List[Profile]:
        """Get collaborator profiles of a sector"""
        return db.query(Profile).filter(
            Profile.sector == sector,
            Profile.role == ROLE_COLLABORATOR
        ).order_by(Profile.user_id).all()

    @staticmethod
    def get_by_user_id(db: Session, user_id: str) -> Optional[Profile]:
        """Get profile by external user id"""
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    @staticmethod
    def create(db: Session, profile: Profile) -> Profile:
        """Create new profile"""
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile
