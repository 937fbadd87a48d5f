"""Schemas for biometric input and derived metrics.

Field names are snake_case in Python and camelCase on the wire
(`weightKg`, `dailyCalorieTarget`, ...). Range checks live here, at the
boundary, so the calculator only ever sees validated numbers.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from services.metrics_calculator import (
    ActivityLevel,
    BiometricInput,
    BMICategory,
    Goal,
    MetricsResult,
    Sex,
)


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BiometricInputRequest(CamelModel):
    """Inputs for a one-off metrics calculation."""

    weight_kg: float = Field(..., ge=20, le=500, allow_inf_nan=False, examples=[80.0], description="Body weight in kg (20-500)")
    height_cm: float = Field(..., ge=50, le=300, allow_inf_nan=False, examples=[180.0], description="Height in cm (50-300)")
    age_years: int = Field(..., ge=13, le=120, examples=[25], description="Age in years (13-120)")
    sex: Sex = Field(..., examples=["male"], description="male, female or other")
    activity_level: ActivityLevel = Field(ActivityLevel.SEDENTARY, examples=["moderately_active"])
    goal: Goal = Field(Goal.MAINTAIN, examples=["lose"])

    def to_input(self) -> BiometricInput:
        return BiometricInput(
            weight_kg=self.weight_kg,
            height_cm=self.height_cm,
            age_years=self.age_years,
            sex=self.sex,
            activity_level=self.activity_level,
            goal=self.goal,
        )


class MacroTargetsSchema(CamelModel):
    protein_g: int = 0
    carbs_g: int = 0
    fats_g: int = 0


class WeightRangeSchema(CamelModel):
    min: int
    max: int


class MetricsResponse(CamelModel):
    """MetricsResult as returned by the API."""

    bmi: float
    bmi_category: BMICategory
    bmr: int
    tdee: int
    daily_calorie_target: int
    macro_targets: MacroTargetsSchema
    ideal_weight_range_kg: WeightRangeSchema

    @classmethod
    def from_result(cls, result: MetricsResult) -> "MetricsResponse":
        return cls.model_validate(result.as_dict())
