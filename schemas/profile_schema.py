"""Schemas for profile creation, onboarding, updates and stats."""

import json
from datetime import date as date_type, datetime
from enum import Enum
from typing import List, Optional

from pydantic import Field, field_validator

from database.models import Profile
from services.metrics_calculator import ActivityLevel, BMICategory, Goal, Sex
from .metrics_schema import CamelModel, MacroTargetsSchema, WeightRangeSchema

EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"


class DietaryRestriction(str, Enum):
    VEGETARIAN = "vegetarian"
    VEGAN = "vegan"
    GLUTEN_FREE = "gluten_free"
    DAIRY_FREE = "dairy_free"
    NUT_FREE = "nut_free"
    HALAL = "halal"
    KOSHER = "kosher"
    KETO = "keto"
    PALEO = "paleo"


class ProfileCreateRequest(CamelModel):
    """Request payload for registering a bare profile before onboarding."""

    email: str = Field(..., pattern=EMAIL_PATTERN, examples=["jane@example.com"])
    first_name: Optional[str] = Field(None, max_length=100, examples=["Jane"])
    last_name: Optional[str] = Field(None, max_length=100, examples=["Doe"])

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, value):
        if isinstance(value, str):
            return value.strip().lower()
        return value


class OnboardingRequest(CamelModel):
    """Biometric data collected by the onboarding flow."""

    age_years: int = Field(..., ge=13, le=120, examples=[25], description="Age in years (13-120)")
    sex: Sex = Field(..., examples=["male"])
    height_cm: float = Field(..., ge=50, le=300, allow_inf_nan=False, examples=[180.0])
    weight_kg: float = Field(..., ge=20, le=500, allow_inf_nan=False, examples=[80.0])
    goal: Goal = Field(..., examples=["lose"])
    activity_level: ActivityLevel = Field(ActivityLevel.SEDENTARY, examples=["moderately_active"])
    dietary_restrictions: List[DietaryRestriction] = Field(default_factory=list, examples=[["vegetarian"]])


class ProfileUpdateRequest(CamelModel):
    """Partial update; only the fields sent are applied."""

    age_years: Optional[int] = Field(None, ge=13, le=120)
    sex: Optional[Sex] = None
    height_cm: Optional[float] = Field(None, ge=50, le=300, allow_inf_nan=False)
    weight_kg: Optional[float] = Field(None, ge=20, le=500, allow_inf_nan=False)
    goal: Optional[Goal] = None
    activity_level: Optional[ActivityLevel] = None
    dietary_restrictions: Optional[List[DietaryRestriction]] = None


class ProfileResponse(CamelModel):
    """Stored profile with its embedded metrics."""

    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age_years: Optional[int] = None
    sex: Optional[Sex] = None
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    goal: Goal = Goal.MAINTAIN
    activity_level: ActivityLevel = ActivityLevel.SEDENTARY
    dietary_restrictions: List[str] = []
    bmi: Optional[float] = None
    bmi_category: Optional[BMICategory] = None
    bmr: Optional[int] = None
    tdee: Optional[int] = None
    daily_calorie_target: Optional[int] = None
    macro_targets: MacroTargetsSchema = MacroTargetsSchema()
    is_onboarded: bool = False
    onboarding_completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_profile(cls, profile: Profile) -> "ProfileResponse":
        return cls(
            id=profile.id,
            email=profile.email,
            first_name=profile.first_name,
            last_name=profile.last_name,
            age_years=profile.age_years,
            sex=profile.sex,
            height_cm=profile.height_cm,
            weight_kg=profile.weight_kg,
            goal=profile.goal,
            activity_level=profile.activity_level,
            dietary_restrictions=json.loads(profile.dietary_restrictions or "[]"),
            bmi=profile.bmi,
            bmi_category=profile.bmi_category,
            bmr=profile.bmr,
            tdee=profile.tdee,
            daily_calorie_target=profile.daily_calorie_target,
            macro_targets=MacroTargetsSchema(
                protein_g=profile.protein_g or 0,
                carbs_g=profile.carbs_g or 0,
                fats_g=profile.fats_g or 0,
            ),
            is_onboarded=bool(profile.is_onboarded),
            onboarding_completed_at=profile.onboarding_completed_at,
            created_at=profile.created_at,
        )


class OnboardingResponse(CamelModel):
    profile: ProfileResponse
    ideal_weight_range_kg: WeightRangeSchema


class WeightHistoryPoint(CamelModel):
    date: date_type
    weight: float
    unit: str = "kg"


class StatsResponse(CamelModel):
    """Progress summary for the stats screen."""

    current_weight: Optional[float] = None
    target_weight: Optional[float] = None
    weight_change: float = 0
    bmi: Optional[float] = None
    bmi_category: Optional[BMICategory] = None
    daily_calorie_target: Optional[int] = None
    macro_targets: MacroTargetsSchema
    ideal_weight_range_kg: WeightRangeSchema
    weight_history: List[WeightHistoryPoint]
