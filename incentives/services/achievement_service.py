"""
Achievement evaluation service.
Reads a user's checklist submissions over a period window and decides
whether a goal was achieved, on how many days, and with what value.
"""
import json
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional, Union

from incentives.constants import GOAL_TYPE_NUMERIC, PERIOD_DAILY, VALUE_GOAL_TYPES
from incentives.schemas import AchievementResult
from incentives.services.date_service import DateService
from incentives.services.period_service import PeriodService

logger = logging.getLogger("incentives.achievements")


@dataclass(frozen=True)
class BooleanAnswer:
    value: bool


@dataclass(frozen=True)
class NumericAnswer:
    value: float


@dataclass(frozen=True)
class UnparsableAnswer:
    raw: object = None


ChecklistAnswer = Union[BooleanAnswer, NumericAnswer, UnparsableAnswer]


def parse_answer(raw) -> ChecklistAnswer:
    """
    Classify a recorded checklist answer.

    Booleans and the strings "true"/"false" are boolean answers. Numbers and
    numeric strings are numeric answers. Anything else, including missing
    answers and non-finite numbers, is unparsable.
    """
    if isinstance(raw, bool):
        return BooleanAnswer(raw)
    if isinstance(raw, str):
        text = raw.strip()
        if text.lower() in ("true", "false"):
            return BooleanAnswer(text.lower() == "true")
        try:
            value = float(text)
        except ValueError:
            return UnparsableAnswer(raw)
    elif isinstance(raw, (int, float)):
        value = float(raw)
    else:
        return UnparsableAnswer(raw)

    if not math.isfinite(value):
        return UnparsableAnswer(raw)
    return NumericAnswer(value)


def load_checklist(submission) -> Optional[dict]:
    """Decode a submission's checklist JSON, None when malformed"""
    payload = submission.checklist
    if isinstance(payload, dict):
        return payload
    try:
        checklist = json.loads(payload)
    except (TypeError, ValueError):
        logger.warning(f"Skipping submission {submission.id}: malformed checklist JSON")
        return None
    if not isinstance(checklist, dict):
        logger.warning(f"Skipping submission {submission.id}: checklist is not an object")
        return None
    return checklist


class AchievementService:
    """Service for goal achievement evaluation"""

    @staticmethod
    def submissions_in_window(
        submissions: Iterable,
        user_id: str,
        period_start: datetime,
        period_end: datetime
    ) -> list:
        """Submissions by user_id created inside [period_start, period_end]"""
        return [
            submission for submission in submissions
            if submission.user_id == user_id
            and period_start <= DateService.to_business_time(submission.created_at) <= period_end
        ]

    @staticmethod
    def evaluate(
        goal,
        submissions: Iterable,
        user_id: str,
        period_start: datetime,
        period_end: datetime
    ) -> AchievementResult:
        """
        Evaluate a goal for one user over a period window.

        Per day:
            - Boolean answer: achieved when true
            - Numeric/percentage goal: achieved when value >= target_value
              (unparsable answers count as 0)

        Period:
            - Daily goals require every day of the window to be achieved
            - Other periods require at least one achieved day

        Current value:
            - Numeric goals: sum of reported values
            - Percentage goals: average of non-zero reported values
            - Boolean goal types: None

        Args:
            goal: Goal being evaluated
            submissions: All submissions (filtered here by user and window)
            user_id: User to evaluate
            period_start: Window start (inclusive)
            period_end: Window end (inclusive)

        Returns:
            AchievementResult
        """
        total_days = PeriodService.days_between(period_start, period_end)
        matching = AchievementService.submissions_in_window(
            submissions, user_id, period_start, period_end
        )
        tracks_value = goal.goal_type in VALUE_GOAL_TYPES

        if not matching:
            return AchievementResult(
                achieved=False,
                completion_rate=0.0,
                days_achieved=0,
                total_days_in_period=total_days,
                current_value=0.0 if tracks_value else None
            )

        achieved_days: set[date] = set()
        value_total = 0.0
        values_reported = 0
        goal_key = str(goal.id)

        for submission in matching:
            checklist = load_checklist(submission)
            if checklist is None:
                continue

            answer = parse_answer(checklist.get(goal_key))
            day_achieved = False

            if isinstance(answer, BooleanAnswer):
                day_achieved = answer.value
            elif tracks_value:
                value = answer.value if isinstance(answer, NumericAnswer) else 0.0
                day_achieved = value >= goal.target_value
                if value > 0:
                    value_total += value
                    values_reported += 1

            if day_achieved:
                achieved_days.add(DateService.business_date(submission.created_at))

        days_achieved = len(achieved_days)
        completion_rate = (days_achieved / total_days) * 100 if total_days > 0 else 0.0

        if goal.period == PERIOD_DAILY:
            achieved = days_achieved == total_days
        else:
            achieved = days_achieved > 0

        current_value = None
        if goal.goal_type == GOAL_TYPE_NUMERIC:
            current_value = value_total
        elif tracks_value:
            current_value = value_total / values_reported if values_reported else 0.0

        return AchievementResult(
            achieved=achieved,
            completion_rate=completion_rate,
            days_achieved=days_achieved,
            total_days_in_period=total_days,
            current_value=current_value
        )
