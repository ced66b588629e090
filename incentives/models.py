from sqlalchemy import Column, Integer, String, Boolean, DateTime, Float, Text
from datetime import datetime

from incentives.database import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, unique=True, index=True)  # External auth id
    name = Column(String, nullable=True)
    sector = Column(String, nullable=False, index=True)
    role = Column(String, default="collaborator")  # collaborator, manager, admin
    created_at = Column(DateTime, default=datetime.utcnow)


class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    scope = Column(String, default="individual")  # individual, sector
    sector = Column(String, nullable=True, index=True)
    assigned_user_id = Column(String, nullable=True, index=True)  # Only for individual goals

    # numeric, percentage, task_completion, boolean_checklist
    goal_type = Column(String, default="task_completion")
    target_value = Column(Float, default=0.0)  # Count for numeric, percent for percentage
    period = Column(String, default="monthly")  # daily, weekly, monthly, quarterly, yearly

    # Monetary reward (minor currency units)
    has_monetary_reward = Column(Boolean, default=False)
    monetary_value = Column(Integer, default=0)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Submission(Base):
    __tablename__ = "submissions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, nullable=False, index=True)
    date = Column(DateTime, default=datetime.utcnow)

    # JSON object keyed by goal id: boolean or stringified number
    checklist = Column(Text, nullable=False, default="{}")

    observation = Column(Text, nullable=True)
    attachment_id = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)
