"""SQLAlchemy ORM models for the metrics service.

`Profile` holds a user's biometric inputs alongside the metrics derived from
them; `WeightLog` is a per-day weight time series. Models stay behavior-free,
all derivation lives in `services.metrics_calculator`.
"""

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import declarative_base, relationship
from datetime import datetime

Base = declarative_base()


class Profile(Base):
    """ORM model representing a user profile and its stored metrics."""

    __tablename__ = "profiles"
    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, nullable=False, unique=True)
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)

    # Biometric inputs
    age_years = Column(Integer, nullable=True)
    sex = Column(String, nullable=True)
    height_cm = Column(Float, nullable=True)
    weight_kg = Column(Float, nullable=True)
    goal = Column(String, nullable=False, default="maintain")
    activity_level = Column(String, nullable=False, default="sedentary")
    dietary_restrictions = Column(Text, nullable=True)  # JSON-encoded list

    # Derived metrics
    bmi = Column(Float, nullable=True)
    bmi_category = Column(String, nullable=True)
    bmr = Column(Integer, nullable=True)
    tdee = Column(Integer, nullable=True)
    daily_calorie_target = Column(Integer, nullable=True)
    protein_g = Column(Integer, nullable=False, default=0)
    carbs_g = Column(Integer, nullable=False, default=0)
    fats_g = Column(Integer, nullable=False, default=0)

    is_onboarded = Column(Boolean, nullable=False, default=False)
    onboarding_completed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    weight_logs = relationship("WeightLog", back_populates="profile", cascade="all, delete-orphan")


class WeightLog(Base):
    """ORM model for a single weigh-in; one row per profile per date."""

    __tablename__ = "weight_logs"
    __table_args__ = (UniqueConstraint("profile_id", "date", name="uq_weight_log_profile_date"),)

    id = Column(Integer, primary_key=True, index=True)
    profile_id = Column(Integer, ForeignKey("profiles.id"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    weight = Column(Float, nullable=False)
    unit = Column(String, nullable=False, default="kg")
    note = Column(String(200), nullable=True)
    waist_cm = Column(Float, nullable=True)
    hips_cm = Column(Float, nullable=True)
    chest_cm = Column(Float, nullable=True)
    arms_cm = Column(Float, nullable=True)
    thighs_cm = Column(Float, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    profile = relationship("Profile", back_populates="weight_logs")
