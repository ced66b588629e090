from pydantic import BaseModel, Field, model_validator
from datetime import datetime
from typing import List, Optional


PERIOD_PATTERN = "^(daily|weekly|monthly|quarterly|yearly)$"
GOAL_TYPE_PATTERN = "^(numeric|percentage|task_completion|boolean_checklist)$"


# Profile schemas
class ProfileBase(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=100)
    name: Optional[str] = Field(None, max_length=200)
    sector: str = Field(..., min_length=1, max_length=100)
    role: str = Field(default="collaborator", pattern="^(collaborator|manager|admin)$")


class ProfileCreate(ProfileBase):
    pass


class ProfileResponse(ProfileBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# Goal schemas
class GoalBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    scope: str = Field(default="individual", pattern="^(individual|sector)$")
    sector: Optional[str] = Field(None, max_length=100)
    assigned_user_id: Optional[str] = None
    goal_type: str = Field(default="task_completion", pattern=GOAL_TYPE_PATTERN)
    target_value: float = Field(default=0.0, ge=0)
    period: str = Field(default="monthly", pattern=PERIOD_PATTERN)
    has_monetary_reward: bool = False
    monetary_value: int = Field(default=0, ge=0)  # Minor currency units (cents)
    is_active: bool = True


class GoalCreate(GoalBase):
    @model_validator(mode="after")
    def check_assignment(self):
        if self.scope == "individual" and not self.assigned_user_id:
            raise ValueError("assigned_user_id is required for individual goals")
        return self


class GoalUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    target_value: Optional[float] = Field(None, ge=0)
    has_monetary_reward: Optional[bool] = None
    monetary_value: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class GoalResponse(GoalBase):
    id: int
    created_at: datetime

    class Config:
        from_attributes = True


# Submission schemas
class SubmissionCreate(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=100)
    # Goal id -> boolean (task goals) or stringified number (numeric/percentage goals)
    checklist: dict[str, bool | float | str]
    observation: Optional[str] = Field(None, max_length=2000)
    attachment_id: Optional[str] = None


class SubmissionResponse(BaseModel):
    id: int
    user_id: str
    date: datetime
    checklist: str
    observation: Optional[str] = None
    attachment_id: Optional[str] = None
    created_at: datetime

    class Config:
        from_attributes = True


# Derived reward values
class PeriodInterval(BaseModel):
    start: datetime
    end: datetime


class GoalPeriodResponse(PeriodInterval):
    goal_id: int
    period: str
    days_in_period: int
    next_reset: datetime
    is_active: bool


class AchievementResult(BaseModel):
    achieved: bool
    completion_rate: float
    days_achieved: int
    total_days_in_period: int
    current_value: Optional[float] = None


class CalculatedReward(BaseModel):
    goal_id: int
    goal_title: str
    period_type: str
    goal_type: str
    total_monetary_value: int  # cents
    daily_value: int  # cents
    period_start: datetime
    period_end: datetime
    is_earned: bool
    completion_rate: float
    days_achieved: int
    total_days_in_period: int
    earned_amount: int  # cents
    target_value: float
    current_value: Optional[float] = None


class UserRewardStats(BaseModel):
    total_earned_this_month: int = 0
    total_earned_this_week: int = 0
    total_earned_today: int = 0
    total_pending_rewards: int = 0
    total_available_rewards: int = 0
    rewards_by_period: List[CalculatedReward] = Field(default_factory=list)


class UserRewardSummary(BaseModel):
    user_id: str
    stats: UserRewardStats


class SectorRewardStats(BaseModel):
    sector: Optional[str] = None
    collaborator_count: int = 0
    collaborators_with_rewards: int = 0
    total_earned_this_month: int = 0
    total_earned_this_week: int = 0
    total_earned_today: int = 0
    total_pending_rewards: int = 0
    total_available_rewards: int = 0
    average_reward_per_collaborator: int = 0
    by_user: List[UserRewardSummary] = Field(default_factory=list)


class MonthlyEarningsResponse(BaseModel):
    user_id: str
    month: str  # YYYY-MM
    total_earned: int
