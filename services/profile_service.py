"""Profile service.

Creates profiles, completes onboarding, applies partial updates and builds
the stats summary. Whenever a metrics input changes, the stored metrics are
recomputed from scratch with `metrics_calculator.derive_full_profile` and
written back onto the profile row.
"""

import json
import os
from datetime import date, datetime, timedelta
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from core.exceptions import ConflictError, NotFoundError, OnboardingRequiredError
from core.logger import get_logger
from core.repository import ProfileRepository, WeightLogRepository
from database import models
from schemas.profile_schema import OnboardingRequest, ProfileCreateRequest, ProfileUpdateRequest
from services.metrics_calculator import (
    BiometricInput,
    MetricsResult,
    WeightRange,
    metrics_calculator,
)
from services.weight_log_service import sync_profile_weight, weight_in_kg

logger = get_logger("services.profile_service")

STATS_HISTORY_DAYS = int(os.getenv("STATS_HISTORY_DAYS", "30"))


def _biometrics(profile: models.Profile) -> BiometricInput:
    return BiometricInput(
        weight_kg=profile.weight_kg,
        height_cm=profile.height_cm,
        age_years=profile.age_years,
        sex=profile.sex,
        activity_level=profile.activity_level,
        goal=profile.goal,
    )


def apply_metrics(profile: models.Profile, result: MetricsResult) -> None:
    """Copy a freshly derived MetricsResult onto the profile columns."""
    profile.bmi = result.bmi
    profile.bmi_category = result.bmi_category.value
    profile.bmr = result.bmr
    profile.tdee = result.tdee
    profile.daily_calorie_target = result.daily_calorie_target
    profile.protein_g = result.macro_targets.protein_g
    profile.carbs_g = result.macro_targets.carbs_g
    profile.fats_g = result.macro_targets.fats_g


def recalculate_metrics(profile: models.Profile) -> MetricsResult:
    """Derive metrics from the profile's current inputs and store them on it."""
    result = metrics_calculator.derive_full_profile(_biometrics(profile))
    apply_metrics(profile, result)
    logger.debug("Recalculated metrics for profile %s: %s", profile.id, result)
    return result


def get_profile(db: Session, profile_id: int) -> models.Profile:
    """Return the profile or raise NotFoundError."""
    profile = ProfileRepository(db).get_by_id(profile_id)
    if not profile:
        raise NotFoundError("Profile", profile_id)
    return profile


def get_onboarded_profile(db: Session, profile_id: int) -> models.Profile:
    profile = get_profile(db, profile_id)
    if not profile.is_onboarded:
        logger.info("Profile %s has not completed onboarding", profile_id)
        raise OnboardingRequiredError(profile_id)
    return profile


def create_profile(db: Session, payload: ProfileCreateRequest) -> models.Profile:
    """Register a profile that has not been onboarded yet.

    Raises:
        ConflictError: If another profile already uses the email.
    """
    repo = ProfileRepository(db)
    if repo.get_by_email(payload.email):
        raise ConflictError("email", payload.email)

    profile = repo.add(models.Profile(
        email=payload.email,
        first_name=payload.first_name,
        last_name=payload.last_name,
    ))
    logger.info("Profile created: id=%s email=%s", profile.id, profile.email)
    return profile


def complete_onboarding(
    db: Session,
    profile_id: int,
    payload: OnboardingRequest,
    today: Optional[date] = None,
) -> Tuple[models.Profile, WeightRange]:
    """Store onboarding biometrics, derive metrics and log the first weigh-in.

    Returns:
        The updated profile and the ideal weight range for its height.
    """
    profile = get_profile(db, profile_id)

    profile.age_years = payload.age_years
    profile.sex = payload.sex.value
    profile.height_cm = payload.height_cm
    profile.weight_kg = payload.weight_kg
    profile.goal = payload.goal.value
    profile.activity_level = payload.activity_level.value
    profile.dietary_restrictions = json.dumps([r.value for r in payload.dietary_restrictions])
    result = recalculate_metrics(profile)
    profile.is_onboarded = True
    profile.onboarding_completed_at = datetime.utcnow()

    sync_profile_weight(db, profile.id, payload.weight_kg, on=today or date.today())
    profile = ProfileRepository(db).update(profile)

    logger.info("Profile %s completed onboarding", profile.id)
    return profile, result.ideal_weight_range_kg


def _changed_fields(payload: ProfileUpdateRequest) -> Dict[str, Any]:
    """Fields the client actually sent with a non-null value, enums unwrapped."""
    changes = {}
    for name, value in payload.model_dump(exclude_unset=True).items():
        if value is None:
            continue
        if name == "dietary_restrictions":
            value = json.dumps([getattr(r, "value", r) for r in value])
        else:
            value = getattr(value, "value", value)
        changes[name] = value
    return changes


def update_profile(
    db: Session,
    profile_id: int,
    payload: ProfileUpdateRequest,
    today: Optional[date] = None,
) -> models.Profile:
    """Apply a partial update, recomputing metrics when an input changed.

    A changed weight is also written to today's weight log entry; an entry
    the user already logged today keeps its note and measurements.

    Raises:
        NotFoundError: If the profile does not exist.
        OnboardingRequiredError: If the profile has not been onboarded.
    """
    profile = get_onboarded_profile(db, profile_id)
    changes = _changed_fields(payload)

    new_weight = changes.get("weight_kg")
    weight_changed = new_weight is not None and new_weight != profile.weight_kg

    for name, value in changes.items():
        setattr(profile, name, value)

    if metrics_calculator.should_recalculate(changes):
        recalculate_metrics(profile)

    if weight_changed:
        sync_profile_weight(db, profile.id, new_weight, on=today or date.today())

    profile = ProfileRepository(db).update(profile)
    logger.info("Updated profile %s fields=%s", profile.id, sorted(changes))
    return profile


def get_stats(db: Session, profile_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    """Build the stats summary: weight trend, targets and ideal weight range.

    Weight change is the difference in kg between the last and first entries
    in the history window (lbs entries converted), or 0 with fewer than two
    entries.
    """
    profile = get_onboarded_profile(db, profile_id)
    since = (today or date.today()) - timedelta(days=STATS_HISTORY_DAYS)
    history = WeightLogRepository(db).list_for_profile(profile.id, since=since)

    weight_change = 0
    if len(history) > 1:
        weight_change = round(weight_in_kg(history[-1]) - weight_in_kg(history[0]), 1)

    ideal = metrics_calculator.compute_ideal_weight_range(profile.height_cm)
    return {
        "current_weight": profile.weight_kg,
        "target_weight": metrics_calculator.compute_target_weight(profile.weight_kg, profile.goal),
        "weight_change": weight_change,
        "bmi": profile.bmi,
        "bmi_category": profile.bmi_category,
        "daily_calorie_target": profile.daily_calorie_target,
        "macro_targets": {
            "protein_g": profile.protein_g,
            "carbs_g": profile.carbs_g,
            "fats_g": profile.fats_g,
        },
        "ideal_weight_range_kg": {"min": ideal.min, "max": ideal.max},
        "weight_history": [{"date": log.date, "weight": log.weight, "unit": log.unit} for log in history],
    }
