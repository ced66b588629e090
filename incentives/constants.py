"""
Application constants.
Goal enums, default settings and environment-driven configuration.
"""
import os

# Goal scope
SCOPE_INDIVIDUAL = "individual"
SCOPE_SECTOR = "sector"

# Goal types
GOAL_TYPE_NUMERIC = "numeric"
GOAL_TYPE_PERCENTAGE = "percentage"
GOAL_TYPE_TASK_COMPLETION = "task_completion"
GOAL_TYPE_BOOLEAN_CHECKLIST = "boolean_checklist"

GOAL_TYPES = (
    GOAL_TYPE_NUMERIC,
    GOAL_TYPE_PERCENTAGE,
    GOAL_TYPE_TASK_COMPLETION,
    GOAL_TYPE_BOOLEAN_CHECKLIST,
)
VALUE_GOAL_TYPES = (GOAL_TYPE_NUMERIC, GOAL_TYPE_PERCENTAGE)

# Goal periods
PERIOD_DAILY = "daily"
PERIOD_WEEKLY = "weekly"
PERIOD_MONTHLY = "monthly"
PERIOD_QUARTERLY = "quarterly"
PERIOD_YEARLY = "yearly"

PERIODS = (
    PERIOD_DAILY,
    PERIOD_WEEKLY,
    PERIOD_MONTHLY,
    PERIOD_QUARTERLY,
    PERIOD_YEARLY,
)

# Profile roles
ROLE_COLLABORATOR = "collaborator"
ROLE_MANAGER = "manager"
ROLE_ADMIN = "admin"

# Calendar
DAYS_PER_WEEK = 7

# Cache
DEFAULT_CACHE_TTL_SECONDS = 300  # 5 minutes
CACHE_EVICTION_INTERVAL_MINUTES = 5

# Logging
DEFAULT_LOG_DIRECTORY_PROD = "/var/log/incentives"
DEFAULT_LOG_DIRECTORY_DEV = "./logs"

# Environment
DATABASE_URL = os.getenv("INCENTIVES_DATABASE_URL", "sqlite:///./incentives.db")
# Keep the real key in the environment or a secret store in production
API_KEY = os.getenv("INCENTIVES_API_KEY", "your-secret-key-change-me")
BUSINESS_TIMEZONE = os.getenv("INCENTIVES_TIMEZONE", "UTC")
CACHE_TTL_SECONDS = int(os.getenv("INCENTIVES_CACHE_TTL_SECONDS", DEFAULT_CACHE_TTL_SECONDS))

CORS_ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("INCENTIVES_CORS_ORIGINS", "http://localhost:3000").split(",")
    if origin.strip()
]
