"""
Profile service.
Profile lookups are read-through cached per sector filter.
"""
import logging
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.cache import TTLCache
from incentives.models import Profile
from incentives.schemas import ProfileCreate
from incentives.repositories.profile_repository import ProfileRepository
from incentives.exceptions import ProfileNotFoundException, ValidationException

logger = logging.getLogger("incentives.profiles")


class ProfileService:
    """Service for user profiles"""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache
        self.profile_repo = ProfileRepository()

    @staticmethod
    def cache_key(sector: Optional[str]) -> tuple:
        if sector and sector != "all":
            return ("profiles", "sector", sector)
        return ("profiles", "all")

    def get_profiles(self, sector: Optional[str] = None) -> List[Profile]:
        """Get profiles, optionally for one sector ("all" means no filter)"""
        sector_filter = sector if sector and sector != "all" else None

        def load():
            profiles = self.profile_repo.get_all(self.db, sector_filter)
            logger.info(f"Loaded {len(profiles)} profiles (sector={sector_filter or 'all'})")
            return profiles

        if self.cache is None:
            return load()
        return self.cache.get_or_load(self.cache_key(sector), load)

    def get_profile(self, user_id: str) -> Profile:
        """
        Get a profile by external user id.

        Raises:
            ProfileNotFoundException: If no profile exists for user_id
        """
        profile = self.profile_repo.get_by_user_id(self.db, user_id)
        if not profile:
            raise ProfileNotFoundException(user_id)
        return profile

    def create_profile(self, profile_data: ProfileCreate) -> Profile:
        """Create a profile"""
        if self.profile_repo.get_by_user_id(self.db, profile_data.user_id):
            raise ValidationException("user_id", f"profile for {profile_data.user_id} already exists")

        profile = self.profile_repo.create(self.db, Profile(**profile_data.model_dump()))
        if self.cache is not None:
            self.cache.invalidate("profiles")
        return profile
