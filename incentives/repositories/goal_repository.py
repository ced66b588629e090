"""
Goal repository - Data access layer for Goal model.
"""
from typing import List, Optional
from sqlalchemy.orm import Session

from incentives.models import Goal
from incentives.constants import SCOPE_INDIVIDUAL


class GoalRepository:
    """Repository for Goal data access"""

    @staticmethod
    def get_all(
        db: Session,
        include_inactive: bool = False,
        assigned_user_id: Optional[str] = None,
        sector: Optional[str] = None
    ) -> List[Goal]:
        """Get goals with optional filtering"""
        query = db.query(Goal)
        if not include_inactive:
            query = query.filter(Goal.is_active == True)
        if assigned_user_id:
            query = query.filter(Goal.assigned_user_id == assigned_user_id)
        if sector:
            query = query.filter(Goal.sector == sector)
        return query.order_by(Goal.id).all()

    @staticmethod
    def get_reward_goals_for_user(db: Session, user_id: str) -> List[Goal]:
        """Get active individual goals with a monetary reward assigned to user"""
        return db.query(Goal).filter(
            Goal.scope == SCOPE_INDIVIDUAL,
            Goal.assigned_user_id == user_id,
            Goal.has_monetary_reward == True,
            Goal.is_active == True
        ).order_by(Goal.id).all()

    @staticmethod
    def get_by_id(db: Session, goal_id: int) -> Optional[Goal]:
        """Get goal by ID"""
        return db.query(Goal).filter(Goal.id == goal_id).first()

    @staticmethod
    def create(db: Session, goal: Goal) -> Goal:
        """Create new goal"""
        db.add(goal)
        db.commit()
        db.refresh(goal)
        return goal

    @staticmethod
    def update(db: Session, goal: Goal) -> Goal:
        """Update existing goal"""
        db.commit()
        db.refresh(goal)
        return goal
