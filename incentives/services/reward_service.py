"""
Reward calculation service.
Turns goal achievement into monetary rewards and rolls earned amounts up
into today / this week / this month / pending totals.

Payout rules:
    - Daily goals pay daily_value for every achieved day.
    - Other periods pay the full monetary_value once when at least one day
      was achieved. Numeric goals with reported progress are prorated by
      current_value / target_value (capped at 1).
"""
import logging
from datetime import date, datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from incentives.cache import TTLCache
from incentives.constants import (
    SCOPE_INDIVIDUAL, GOAL_TYPE_NUMERIC,
    PERIOD_DAILY, PERIOD_WEEKLY, PERIOD_MONTHLY,
)
from incentives.money import round_half_up, prorate, average_per
from incentives.repositories.goal_repository import GoalRepository
from incentives.repositories.profile_repository import ProfileRepository
from incentives.repositories.submission_repository import SubmissionRepository
from incentives.schemas import (
    AchievementResult, CalculatedReward, UserRewardStats,
    UserRewardSummary, SectorRewardStats,
)
from incentives.services.achievement_service import AchievementService
from incentives.services.date_service import DateService
from incentives.services.period_service import PeriodService

logger = logging.getLogger("incentives.rewards")


class RewardService:
    """Service for monetary reward calculation"""

    def __init__(self, db: Session, cache: Optional[TTLCache] = None):
        self.db = db
        self.cache = cache
        self.goal_repo = GoalRepository()
        self.submission_repo = SubmissionRepository()
        self.profile_repo = ProfileRepository()

    # ------------------------------------------------------------------
    # Pure calculation
    # ------------------------------------------------------------------

    @staticmethod
    def is_eligible(goal, user_id: str) -> bool:
        """Only active individual goals with a positive monetary reward pay out"""
        return (
            goal.scope == SCOPE_INDIVIDUAL
            and goal.assigned_user_id == user_id
            and bool(goal.has_monetary_reward)
            and (goal.monetary_value or 0) > 0
            and bool(goal.is_active)
        )

    @staticmethod
    def calculate_daily_value(monetary_value: int, period: str, reference_date: datetime) -> int:
        """
        Per-day share of a goal's reward, in cents.

        Daily goals: monetary_value / days in the current month
        Weekly goals: monetary_value / 7
        Monthly/quarterly/yearly: monetary_value / days in that calendar period
        """
        days = PeriodService.calendar_days(period, reference_date)
        return round_half_up(monetary_value / days)

    @staticmethod
    def calculate_earned_amount(goal, achievement: AchievementResult, daily_value: int) -> int:
        """Amount earned for the current window, in cents"""
        if goal.period == PERIOD_DAILY:
            return achievement.days_achieved * daily_value

        if achievement.days_achieved <= 0:
            return 0

        current_value = achievement.current_value or 0
        if goal.goal_type == GOAL_TYPE_NUMERIC and current_value > 0:
            if goal.target_value and goal.target_value > 0:
                ratio = current_value / goal.target_value
            else:
                ratio = 1.0
            return prorate(goal.monetary_value, ratio)

        return goal.monetary_value

    @staticmethod
    def calculate_user_rewards(
        goals: Iterable,
        submissions: Iterable,
        user_id: str,
        reference_date: Optional[datetime] = None
    ) -> UserRewardStats:
        """
        Calculate a user's rewards across all of their eligible goals.

        Args:
            goals: Goal definitions (filtered here to the user's eligible goals)
            submissions: Submission history
            user_id: User to calculate for
            reference_date: Evaluation moment (defaults to now)

        Returns:
            UserRewardStats with totals and a per-goal breakdown
        """
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        submissions = list(submissions)
        eligible = [goal for goal in goals if RewardService.is_eligible(goal, user_id)]

        today = PeriodService.calendar_interval(PERIOD_DAILY, reference_date)
        this_week = PeriodService.calendar_interval(PERIOD_WEEKLY, reference_date)
        this_month = PeriodService.calendar_interval(PERIOD_MONTHLY, reference_date)

        stats = UserRewardStats()

        for goal in eligible:
            interval = PeriodService.resolve_interval(goal.period, goal.created_at, reference_date)
            achievement = AchievementService.evaluate(
                goal, submissions, user_id, interval.start, interval.end
            )
            daily_value = RewardService.calculate_daily_value(
                goal.monetary_value, goal.period, reference_date
            )
            earned_amount = RewardService.calculate_earned_amount(goal, achievement, daily_value)

            stats.rewards_by_period.append(CalculatedReward(
                goal_id=goal.id,
                goal_title=goal.title,
                period_type=goal.period,
                goal_type=goal.goal_type,
                total_monetary_value=goal.monetary_value,
                daily_value=daily_value,
                period_start=interval.start,
                period_end=interval.end,
                is_earned=achievement.achieved,
                completion_rate=achievement.completion_rate,
                days_achieved=achievement.days_achieved,
                total_days_in_period=achievement.total_days_in_period,
                earned_amount=earned_amount,
                target_value=goal.target_value,
                current_value=achievement.current_value
            ))
            stats.total_available_rewards += goal.monetary_value

            if earned_amount <= 0:
                continue

            # Closed window: owed but not marked paid
            if reference_date > interval.end:
                stats.total_pending_rewards += earned_amount

            if PeriodService.periods_overlap(interval, this_month):
                stats.total_earned_this_month += earned_amount
            if PeriodService.periods_overlap(interval, this_week):
                stats.total_earned_this_week += earned_amount
            # Lump-sum payouts are not attributed to a single day
            if goal.period == PERIOD_DAILY and PeriodService.periods_overlap(interval, today):
                stats.total_earned_today += min(daily_value, earned_amount)

        logger.debug(
            f"Rewards for {user_id}: {len(eligible)} goals, "
            f"month={stats.total_earned_this_month} pending={stats.total_pending_rewards}"
        )
        return stats

    @staticmethod
    def calculate_monthly_earnings(
        goals: Iterable,
        submissions: Iterable,
        user_id: str,
        month: date
    ) -> int:
        """
        Total earned by user_id from windows overlapping the given month.

        Every window of an eligible goal that overlaps the month is evaluated
        whole and its earned amount added, so a daily goal contributes each of
        the month's days and a weekly goal each overlapping week.
        """
        month_start = datetime.combine(
            month.replace(day=1), datetime.min.time(), tzinfo=DateService.get_timezone()
        )
        month_end = DateService.end_of_month(month_start)
        submissions = list(submissions)

        total = 0
        for goal in goals:
            if not RewardService.is_eligible(goal, user_id):
                continue
            for interval in PeriodService.intervals_within(
                goal.period, goal.created_at, month_start, month_end
            ):
                achievement = AchievementService.evaluate(
                    goal, submissions, user_id, interval.start, interval.end
                )
                daily_value = RewardService.calculate_daily_value(
                    goal.monetary_value, goal.period, interval.end
                )
                total += RewardService.calculate_earned_amount(goal, achievement, daily_value)

        logger.debug(f"Monthly earnings for {user_id} in {month:%Y-%m}: {total}")
        return total

    @staticmethod
    def calculate_sector_rewards(
        goals: Iterable,
        submissions: Iterable,
        user_ids: Iterable[str],
        reference_date: Optional[datetime] = None,
        sector: Optional[str] = None
    ) -> SectorRewardStats:
        """
        Sum reward stats across a team.

        average_reward_per_collaborator divides earned-this-month by the
        number of collaborators who earned something this month.
        """
        goals = list(goals)
        submissions = list(submissions)
        user_ids = list(dict.fromkeys(user_ids))

        summary = SectorRewardStats(sector=sector, collaborator_count=len(user_ids))
        for user_id in user_ids:
            stats = RewardService.calculate_user_rewards(goals, submissions, user_id, reference_date)
            summary.by_user.append(UserRewardSummary(user_id=user_id, stats=stats))

            summary.total_earned_this_month += stats.total_earned_this_month
            summary.total_earned_this_week += stats.total_earned_this_week
            summary.total_earned_today += stats.total_earned_today
            summary.total_pending_rewards += stats.total_pending_rewards
            summary.total_available_rewards += stats.total_available_rewards
            if stats.total_earned_this_month > 0:
                summary.collaborators_with_rewards += 1

        summary.average_reward_per_collaborator = average_per(
            summary.total_earned_this_month, summary.collaborators_with_rewards
        )
        return summary

    # ------------------------------------------------------------------
    # Database-backed entry points
    # ------------------------------------------------------------------

    def _cached(self, key: tuple, loader):
        if self.cache is None:
            return loader()
        return self.cache.get_or_load(key, loader)

    def _load_inputs(self, user_ids: List[str], day: date) -> tuple[list, list]:
        goals: list = []
        submissions: list = []
        for user_id in user_ids:
            goals.extend(self._cached(
                ("goals", user_id, day),
                lambda uid=user_id: self.goal_repo.get_reward_goals_for_user(self.db, uid)
            ))
            submissions.extend(self._cached(
                ("submissions", user_id, day),
                lambda uid=user_id: self.submission_repo.get_by_user(self.db, uid)
            ))
        return goals, submissions

    def get_user_rewards(
        self,
        user_id: str,
        reference_date: Optional[datetime] = None
    ) -> UserRewardStats:
        """Calculate rewards for a stored user"""
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        goals, submissions = self._load_inputs([user_id], reference_date.date())
        return self.calculate_user_rewards(goals, submissions, user_id, reference_date)

    def get_monthly_earnings(self, user_id: str, month: date) -> int:
        """Earned total for a stored user in the given month"""
        goals, submissions = self._load_inputs([user_id], month.replace(day=1))
        return self.calculate_monthly_earnings(goals, submissions, user_id, month)

    def get_sector_rewards(
        self,
        sector: str,
        reference_date: Optional[datetime] = None
    ) -> SectorRewardStats:
        """Calculate team totals for the collaborators of a sector"""
        reference_date = DateService.to_business_time(reference_date or DateService.now())
        profiles = self.profile_repo.get_collaborators(self.db, sector)
        user_ids = [profile.user_id for profile in profiles]
        goals, submissions = self._load_inputs(user_ids, reference_date.date())

        logger.info(f"Calculating sector rewards for {sector}: {len(user_ids)} collaborators")
        return self.calculate_sector_rewards(goals, submissions, user_ids, reference_date, sector)
