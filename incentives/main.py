from fastapi import FastAPI, Depends, HTTPException, Query, Request, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from datetime import date, datetime
from typing import List, Optional
import logging
import os
from pathlib import Path

from incentives.database import engine, get_db, Base
from incentives import models  # noqa: F401  Import all models to register them with Base
from incentives.auth import verify_api_key
from incentives.cache import TTLCache
from incentives.constants import (
    CACHE_TTL_SECONDS, CORS_ALLOWED_ORIGINS,
    DEFAULT_LOG_DIRECTORY_PROD, DEFAULT_LOG_DIRECTORY_DEV,
)
from incentives.exceptions import (
    GoalNotFoundException, ProfileNotFoundException,
    DuplicateSubmissionException, ValidationException,
)
from incentives.schemas import (
    ProfileCreate, ProfileResponse,
    GoalCreate, GoalUpdate, GoalResponse, GoalPeriodResponse,
    SubmissionCreate, SubmissionResponse,
    UserRewardStats, SectorRewardStats, MonthlyEarningsResponse,
)
from incentives.services.goal_service import GoalService
from incentives.services.profile_service import ProfileService
from incentives.services.reward_service import RewardService
from incentives.services.submission_service import SubmissionService
from incentives.services.scheduler_service import start_scheduler, stop_scheduler

LOG_DIR = os.getenv("INCENTIVES_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("INCENTIVES_LOG_FILE", "app.log")

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()
    ]
)

logger = logging.getLogger("incentives")

app = FastAPI(
    title="Incentives API",
    description="Goal tracking with monetary reward payouts",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.cache = TTLCache(CACHE_TTL_SECONDS)
app.state.scheduler = AsyncIOScheduler()


def get_cache(request: Request) -> TTLCache:
    return request.app.state.cache


@app.on_event("startup")
async def startup_event():
    Base.metadata.create_all(bind=engine)
    start_scheduler(app.state.scheduler, app.state.cache)
    logger.info(f"Incentives API started. Logging to: {log_path}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Incentives API")
    stop_scheduler(app.state.scheduler)


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Incentives API", "status": "active"}


# Profiles
@app.get("/api/profiles", response_model=List[ProfileResponse], dependencies=[Depends(verify_api_key)])
def get_profiles(
    sector: Optional[str] = None,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Get profiles, optionally filtered by sector"""
    return ProfileService(db, cache).get_profiles(sector)


@app.get("/api/profiles/{user_id}", response_model=ProfileResponse, dependencies=[Depends(verify_api_key)])
def get_profile(user_id: str, db: Session = Depends(get_db)):
    """Get a profile by external user id"""
    try:
        return ProfileService(db).get_profile(user_id)
    except ProfileNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.post("/api/profiles", response_model=ProfileResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def create_profile(
    profile: ProfileCreate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Create a profile"""
    try:
        return ProfileService(db, cache).create_profile(profile)
    except ValidationException as e:
        raise HTTPException(status_code=400, detail=str(e))


# Goals
@app.get("/api/goals", response_model=List[GoalResponse], dependencies=[Depends(verify_api_key)])
def get_goals(
    include_inactive: bool = False,
    assigned_user_id: Optional[str] = None,
    sector: Optional[str] = None,
    db: Session = Depends(get_db)
):
    """Get goals with optional filtering"""
    return GoalService(db).get_goals(include_inactive, assigned_user_id, sector)


@app.post("/api/goals", response_model=GoalResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def create_goal(
    goal: GoalCreate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Create a goal"""
    return GoalService(db, cache).create_goal(goal)


@app.get("/api/goals/{goal_id}", response_model=GoalResponse, dependencies=[Depends(verify_api_key)])
def get_goal(goal_id: int, db: Session = Depends(get_db)):
    """Get a specific goal"""
    try:
        return GoalService(db).get_goal(goal_id)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.put("/api/goals/{goal_id}", response_model=GoalResponse, dependencies=[Depends(verify_api_key)])
def update_goal(
    goal_id: int,
    goal_update: GoalUpdate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Update a goal"""
    try:
        return GoalService(db, cache).update_goal(goal_id, goal_update)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.get("/api/goals/{goal_id}/period", response_model=GoalPeriodResponse, dependencies=[Depends(verify_api_key)])
def get_goal_period(
    goal_id: int,
    reference_date: Optional[datetime] = None,
    db: Session = Depends(get_db)
):
    """Get the current evaluation window of a goal"""
    try:
        return GoalService(db).get_goal_period(goal_id, reference_date)
    except GoalNotFoundException as e:
        raise HTTPException(status_code=404, detail=str(e))


# Submissions
@app.get("/api/submissions", response_model=List[SubmissionResponse], dependencies=[Depends(verify_api_key)])
def get_submissions(user_id: str, db: Session = Depends(get_db)):
    """Get submission history of a user"""
    return SubmissionService(db).get_submissions(user_id)


@app.post("/api/submissions", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(verify_api_key)])
def create_submission(
    submission: SubmissionCreate,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Record today's checklist"""
    try:
        return SubmissionService(db, cache).create_submission(submission)
    except DuplicateSubmissionException as e:
        raise HTTPException(status_code=409, detail=str(e))


# Rewards
@app.get("/api/rewards/sector/{sector}", response_model=SectorRewardStats, dependencies=[Depends(verify_api_key)])
def get_sector_rewards(
    sector: str,
    reference_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Get team reward totals for the collaborators of a sector"""
    return RewardService(db, cache).get_sector_rewards(sector, reference_date)


@app.get("/api/rewards/{user_id}", response_model=UserRewardStats, dependencies=[Depends(verify_api_key)])
def get_user_rewards(
    user_id: str,
    reference_date: Optional[datetime] = None,
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Get reward totals and per-goal breakdown for a user"""
    return RewardService(db, cache).get_user_rewards(user_id, reference_date)


@app.get("/api/rewards/{user_id}/monthly", response_model=MonthlyEarningsResponse, dependencies=[Depends(verify_api_key)])
def get_monthly_earnings(
    user_id: str,
    month: str = Query(..., pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    db: Session = Depends(get_db),
    cache: TTLCache = Depends(get_cache)
):
    """Get earned total for a user in a given month (YYYY-MM)"""
    year, month_number = (int(part) for part in month.split("-"))
    total = RewardService(db, cache).get_monthly_earnings(user_id, date(year, month_number, 1))
    return MonthlyEarningsResponse(user_id=user_id, month=month, total_earned=total)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("incentives.main:app", host="0.0.0.0", port=8000)
