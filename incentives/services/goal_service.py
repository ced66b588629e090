"""
Goal management service.
Handles goal creation, updates and period lookups.
"""
from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.cache import TTLCache
from incentives.models import Goal
from incentives.schemas import GoalCreate, GoalUpdate, GoalPeriodResponse
from incentives.repositories.goal_repository import GoalRepository
from incentives.exceptions import GoalNotFoundException
from incentives.services.period_service import PeriodService
from incentives.services.date_service import DateService


class GoalService:
    """Service for managing goals"""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache
        self.goal_repo = GoalRepository()

    def get_goals(
        self,
        include_inactive: bool = False,
        assigned_user_id: Optional[str] = None,
        sector: Optional[str] = None
    ) -> List[Goal]:
        """Get goals with optional filtering"""
        return self.goal_repo.get_all(self.db, include_inactive, assigned_user_id, sector)

    def get_goal(self, goal_id: int) -> Goal:
        """
        Get a goal by ID.

        Raises:
            GoalNotFoundException: If goal does not exist
        """
        goal = self.goal_repo.get_by_id(self.db, goal_id)
        if not goal:
            raise GoalNotFoundException(goal_id)
        return goal

    def create_goal(self, goal_data: GoalCreate) -> Goal:
        """Create a new goal"""
        goal = Goal(**goal_data.model_dump())
        goal = self.goal_repo.create(self.db, goal)
        self._invalidate(goal.assigned_user_id)
        return goal

    def update_goal(self, goal_id: int, goal_update: GoalUpdate) -> Goal:
        """Update an existing goal (activation toggling included)"""
        goal = self.get_goal(goal_id)

        update_data = goal_update.model_dump(exclude_unset=True)
        for key, value in update_data.items():
            setattr(goal, key, value)

        goal = self.goal_repo.update(self.db, goal)
        self._invalidate(goal.assigned_user_id)
        return goal

    def get_goal_period(
        self,
        goal_id: int,
        reference_date: Optional[datetime] = None
    ) -> GoalPeriodResponse:
        """Current evaluation window of a goal"""
        goal = self.get_goal(goal_id)
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        interval = PeriodService.resolve_interval(goal.period, goal.created_at, reference_date)

        return GoalPeriodResponse(
            goal_id=goal.id,
            period=goal.period,
            start=interval.start,
            end=interval.end,
            days_in_period=PeriodService.days_between(interval.start, interval.end),
            next_reset=interval.end,
            is_active=PeriodService.is_period_active(goal.period, goal.created_at, reference_date)
        )

    def _invalidate(self, user_id: Optional[str]) -> None:
        if self.cache is None or not user_id:
            return
        self.cache.invalidate("goals", user_id)
