"""
Custom exceptions for the incentives application.
Provides specific exception types for better error handling and recovery.
"""


class IncentivesException(Exception):
    """Base exception for incentives application"""
    pass


class GoalNotFoundException(IncentivesException):
    """Raised when a goal is not found"""
    def __init__(self, goal_id: int):
        self.goal_id = goal_id
        super().__init__(f"Goal with ID {goal_id} not found")


class ProfileNotFoundException(IncentivesException):
    """Raised when a user profile is not found"""
    def __init__(self, user_id: str):
        self.user_id = user_id
        super().__init__(f"Profile for user {user_id} not found")


class DuplicateSubmissionException(IncentivesException):
    """Raised when a user already submitted a checklist for the day"""
    def __init__(self, user_id: str, day):
        self.user_id = user_id
        self.day = day
        super().__init__(f"User {user_id} already submitted a checklist on {day}")


class UnsupportedPeriodException(IncentivesException, ValueError):
    """Raised when a goal carries a period value the engine does not know"""
    def __init__(self, period):
        self.period = period
        super().__init__(f"Unsupported period: {period!r}")


class ValidationException(IncentivesException):
    """Raised when data validation fails"""
    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"Validation error for {field}: {message}")
