"""Health metrics derivation engine.

Converts biometric inputs (weight, height, age, sex, activity level, goal)
into BMI, BMR, TDEE, a daily calorie target, macro targets and an ideal
weight range. Everything here is pure arithmetic: no I/O, no shared mutable
state, safe to call from any number of threads or requests.
"""

import math
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, Iterable, Optional, Union

from core.logger import get_logger

logger = get_logger("services.metrics_calculator")


class Sex(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class ActivityLevel(str, Enum):
    SEDENTARY = "sedentary"                  # Little or no exercise
    LIGHTLY_ACTIVE = "lightly_active"        # Light exercise 1-3 days/week
    MODERATELY_ACTIVE = "moderately_active"  # Moderate exercise 3-5 days/week
    VERY_ACTIVE = "very_active"              # Hard exercise 6-7 days/week
    EXTRA_ACTIVE = "extra_active"            # Very hard exercise & physical job


class Goal(str, Enum):
    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


class BMICategory(str, Enum):
    UNDERWEIGHT = "underweight"
    NORMAL = "normal"
    OVERWEIGHT = "overweight"
    OBESE = "obese"


ACTIVITY_FACTORS = MappingProxyType({
    ActivityLevel.SEDENTARY.value: 1.2,
    ActivityLevel.LIGHTLY_ACTIVE.value: 1.375,
    ActivityLevel.MODERATELY_ACTIVE.value: 1.55,
    ActivityLevel.VERY_ACTIVE.value: 1.725,
    ActivityLevel.EXTRA_ACTIVE.value: 1.9,
})

# +/-500 kcal/day is roughly +/-0.5 kg/week at ~7700 kcal per kg.
CALORIE_ADJUSTMENTS = MappingProxyType({
    Goal.LOSE.value: -500,
    Goal.MAINTAIN.value: 0,
    Goal.GAIN.value: 500,
})

# Integer percent of total calories: (protein, carbs, fat). Each row sums to 100.
MACRO_SPLITS = MappingProxyType({
    Goal.LOSE.value: (30, 40, 30),
    Goal.MAINTAIN.value: (25, 45, 30),
    Goal.GAIN.value: (25, 50, 25),
})

KCAL_PER_GRAM = MappingProxyType({"protein": 4, "carbs": 4, "fat": 9})

HEALTHY_BMI_MIN = 18.5
HEALTHY_BMI_MAX = 24.9

TARGET_WEIGHT_DELTA_KG = 5

# Profile fields whose change invalidates the stored metrics.
METRIC_INPUT_FIELDS = frozenset({
    "age_years", "sex", "height_cm", "weight_kg", "goal", "activity_level",
})


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def round_one_decimal(value: float) -> float:
    """Round to one decimal place using the exact decimal value of the float."""
    return float(Decimal(value).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _key(value: Any) -> Optional[str]:
    """Enum members and raw strings both resolve to their plain string value."""
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass(frozen=True)
class BiometricInput:
    """Already range-validated inputs for a single derivation."""

    weight_kg: float
    height_cm: float
    age_years: int
    sex: Union[Sex, str]
    activity_level: Union[ActivityLevel, str] = ActivityLevel.SEDENTARY
    goal: Union[Goal, str] = Goal.MAINTAIN


@dataclass(frozen=True)
class MacroTargets:
    protein_g: int
    carbs_g: int
    fats_g: int

    def as_dict(self) -> Dict[str, int]:
        return {"proteinG": self.protein_g, "carbsG": self.carbs_g, "fatsG": self.fats_g}


@dataclass(frozen=True)
class WeightRange:
    min: int
    max: int

    def as_dict(self) -> Dict[str, int]:
        return {"min": self.min, "max": self.max}


@dataclass(frozen=True)
class MetricsResult:
    """Derived metrics embedded in a profile record.

    A BMI or BMR of 0 means the inputs were insufficient, not a physiological
    value.
    """

    bmi: float
    bmi_category: BMICategory
    bmr: int
    tdee: int
    daily_calorie_target: int
    macro_targets: MacroTargets
    ideal_weight_range_kg: WeightRange

    def as_dict(self) -> Dict[str, Any]:
        """Return the camelCase JSON shape used in API responses."""
        return {
            "bmi": self.bmi,
            "bmiCategory": self.bmi_category.value,
            "bmr": self.bmr,
            "tdee": self.tdee,
            "dailyCalorieTarget": self.daily_calorie_target,
            "macroTargets": self.macro_targets.as_dict(),
            "idealWeightRangeKg": self.ideal_weight_range_kg.as_dict(),
        }


class MetricsCalculator:
    """Stateless calculator shared by onboarding, profile updates and clients."""

    def compute_bmi(self, weight_kg: float, height_cm: float) -> float:
        """Calculate BMI rounded to one decimal; 0 when weight or height is unknown."""
        if not weight_kg or not height_cm:
            return 0.0
        height_m = height_cm / 100
        return round_one_decimal(weight_kg / (height_m * height_m))

    def classify_bmi(self, bmi: float) -> BMICategory:
        """Map a BMI value onto its category (upper bounds exclusive)."""
        if bmi < 18.5:
            return BMICategory.UNDERWEIGHT
        if bmi < 25:
            return BMICategory.NORMAL
        if bmi < 30:
            return BMICategory.OVERWEIGHT
        return BMICategory.OBESE

    def compute_bmr(self, weight_kg: float, height_cm: float, age_years: int,
                    sex: Union[Sex, str, None]) -> int:
        """Calculate BMR using the Mifflin-St Jeor equation.

        Anything other than male (female, other, missing) takes the -161
        offset. Returns 0 when weight, height or age is unknown.
        """
        if not weight_kg or not height_cm or not age_years:
            return 0
        base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
        sex_key = _key(sex)
        if isinstance(sex_key, str) and sex_key.lower() == Sex.MALE.value:
            return round_half_up(base + 5)
        return round_half_up(base - 161)

    def compute_tdee(self, bmr: float,
                     activity_level: Union[ActivityLevel, str, None] = ActivityLevel.SEDENTARY) -> int:
        """Scale BMR by the activity factor; unknown levels count as sedentary."""
        factor = ACTIVITY_FACTORS.get(_key(activity_level), ACTIVITY_FACTORS[ActivityLevel.SEDENTARY.value])
        return round_half_up(bmr * factor)

    def compute_calorie_target(self, tdee: float, goal: Union[Goal, str, None] = Goal.MAINTAIN) -> int:
        """Apply the goal's daily surplus or deficit to TDEE."""
        adjustment = CALORIE_ADJUSTMENTS.get(self._goal_key(goal), 0)
        return round_half_up(tdee + adjustment)

    def macro_split(self, goal: Union[Goal, str, None]):
        """Return the (protein, carbs, fat) percent split for a goal."""
        return MACRO_SPLITS.get(self._goal_key(goal), MACRO_SPLITS[Goal.MAINTAIN.value])

    def compute_macros(self, calories: float, goal: Union[Goal, str, None] = Goal.MAINTAIN) -> MacroTargets:
        """Allocate daily calories to protein, carbs and fat in grams."""
        protein_pct, carbs_pct, fat_pct = self.macro_split(goal)
        macros = MacroTargets(
            protein_g=round_half_up(calories * protein_pct / (100 * KCAL_PER_GRAM["protein"])),
            carbs_g=round_half_up(calories * carbs_pct / (100 * KCAL_PER_GRAM["carbs"])),
            fats_g=round_half_up(calories * fat_pct / (100 * KCAL_PER_GRAM["fat"])),
        )
        logger.debug("Macros calculated for goal %s: %s", _key(goal), macros)
        return macros

    def compute_ideal_weight_range(self, height_cm: float) -> WeightRange:
        """Weight range (kg) that keeps BMI within 18.5-24.9 at this height."""
        if not height_cm:
            return WeightRange(min=0, max=0)
        height_m_sq = (height_cm / 100) ** 2
        return WeightRange(
            min=round_half_up(HEALTHY_BMI_MIN * height_m_sq),
            max=round_half_up(HEALTHY_BMI_MAX * height_m_sq),
        )

    def compute_target_weight(self, current_weight_kg: Optional[float],
                              goal: Union[Goal, str, None]) -> Optional[float]:
        """Short-term target weight shown on the stats view."""
        if current_weight_kg is None:
            return None
        goal_key = self._goal_key(goal)
        if goal_key == Goal.LOSE.value:
            return current_weight_kg - TARGET_WEIGHT_DELTA_KG
        if goal_key == Goal.GAIN.value:
            return current_weight_kg + TARGET_WEIGHT_DELTA_KG
        return current_weight_kg

    def should_recalculate(self, changed_fields: Iterable[str]) -> bool:
        """True when any metrics input is among the changed fields."""
        return any(name in METRIC_INPUT_FIELDS for name in changed_fields)

    def derive_full_profile(self, data: BiometricInput) -> MetricsResult:
        """Run the full chain BMI -> category -> BMR -> TDEE -> target -> macros -> range."""
        activity_level = data.activity_level or ActivityLevel.SEDENTARY
        goal = data.goal or Goal.MAINTAIN

        bmi = self.compute_bmi(data.weight_kg, data.height_cm)
        bmr = self.compute_bmr(data.weight_kg, data.height_cm, data.age_years, data.sex)
        tdee = self.compute_tdee(bmr, activity_level)
        target = self.compute_calorie_target(tdee, goal)

        result = MetricsResult(
            bmi=bmi,
            bmi_category=self.classify_bmi(bmi),
            bmr=bmr,
            tdee=tdee,
            daily_calorie_target=target,
            macro_targets=self.compute_macros(target, goal),
            ideal_weight_range_kg=self.compute_ideal_weight_range(data.height_cm),
        )
        logger.debug("Derived metrics: %s", result)
        return result

    @staticmethod
    def _goal_key(goal: Union[Goal, str, None]) -> Optional[str]:
        goal_key = _key(goal)
        return goal_key.lower() if isinstance(goal_key, str) else goal_key


# export singleton
metrics_calculator = MetricsCalculator()
__all__ = [
    "Sex",
    "ActivityLevel",
    "Goal",
    "BMICategory",
    "BiometricInput",
    "MacroTargets",
    "WeightRange",
    "MetricsResult",
    "MetricsCalculator",
    "metrics_calculator",
    "round_half_up",
    "round_one_decimal",
]
