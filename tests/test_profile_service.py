"""Tests for profile onboarding, updates, stats and weight logging."""

import json
from datetime import date, timedelta

import pytest

from core.exceptions import ConflictError, NotFoundError, OnboardingRequiredError, ValidationError
from database import models
from schemas.profile_schema import OnboardingRequest, ProfileCreateRequest, ProfileUpdateRequest
from schemas.weight_schema import WeightLogCreateRequest
from services import profile_service, weight_log_service

TODAY = date.today() - timedelta(days=20)


def _onboarded(db, **overrides):
    profile = profile_service.create_profile(db, ProfileCreateRequest(email="sam@example.com"))
    data = {
        "age_years": 25,
        "sex": "male",
        "height_cm": 180,
        "weight_kg": 80,
        "goal": "lose",
        "activity_level": "moderately_active",
    }
    data.update(overrides)
    profile, _ = profile_service.complete_onboarding(db, profile.id, OnboardingRequest(**data), today=TODAY)
    return profile


def test_create_profile_defaults(db):
    profile = profile_service.create_profile(db, ProfileCreateRequest(email=" Sam@Example.com ", firstName="Sam"))
    assert profile.id is not None
    assert profile.email == "sam@example.com"
    assert profile.first_name == "Sam"
    assert profile.is_onboarded is False
    assert profile.goal == "maintain"
    assert profile.activity_level == "sedentary"


def test_create_profile_duplicate_email_raises_conflict(db):
    profile_service.create_profile(db, ProfileCreateRequest(email="sam@example.com"))
    with pytest.raises(ConflictError) as exc_info:
        profile_service.create_profile(db, ProfileCreateRequest(email="SAM@example.com"))
    assert exc_info.value.status_code == 409


def test_get_missing_profile_raises_404(db):
    with pytest.raises(NotFoundError) as exc_info:
        profile_service.get_profile(db, 999)
    assert exc_info.value.status_code == 404
    assert "Profile" in exc_info.value.message


def test_onboarding_stores_metrics_and_first_weight_log(db):
    profile = profile_service.create_profile(db, ProfileCreateRequest(email="sam@example.com"))
    payload = OnboardingRequest(
        age_years=25, sex="male", height_cm=180, weight_kg=80,
        goal="lose", activity_level="moderately_active", dietary_restrictions=["vegetarian"],
    )
    profile, ideal = profile_service.complete_onboarding(db, profile.id, payload, today=TODAY)

    assert profile.is_onboarded is True
    assert profile.onboarding_completed_at is not None
    assert profile.bmi == 24.7
    assert profile.bmi_category == "normal"
    assert profile.bmr == 1805
    assert profile.tdee == 2798
    assert profile.daily_calorie_target == 2298
    assert (profile.protein_g, profile.carbs_g, profile.fats_g) == (172, 230, 77)
    assert json.loads(profile.dietary_restrictions) == ["vegetarian"]
    assert (ideal.min, ideal.max) == (60, 81)

    logs = db.query(models.WeightLog).filter_by(profile_id=profile.id).all()
    assert [(log.date, log.weight) for log in logs] == [(TODAY, 80)]


def test_update_requires_onboarding(db):
    profile = profile_service.create_profile(db, ProfileCreateRequest(email="sam@example.com"))
    with pytest.raises(OnboardingRequiredError) as exc_info:
        profile_service.update_profile(db, profile.id, ProfileUpdateRequest(weight_kg=70))
    assert exc_info.value.status_code == 403


def test_update_goal_recalculates_metrics(db):
    profile = _onboarded(db)
    profile = profile_service.update_profile(db, profile.id, ProfileUpdateRequest(goal="gain"), today=TODAY)

    assert profile.goal == "gain"
    assert profile.tdee == 2798
    assert profile.daily_calorie_target == 3298
    assert (profile.protein_g, profile.carbs_g, profile.fats_g) == (206, 412, 92)


def test_update_weight_recalculates_and_logs_weight(db):
    profile = _onboarded(db)
    later = TODAY + timedelta(days=7)
    profile = profile_service.update_profile(db, profile.id, ProfileUpdateRequest(weightKg=78), today=later)

    assert profile.weight_kg == 78
    assert profile.bmi == 24.1
    assert profile.bmr == 1785
    logs = weight_log_service.list_weight_logs(db, profile.id)
    assert [(log.date, log.weight) for log in logs] == [(TODAY, 80), (later, 78)]


def test_update_same_weight_does_not_log(db):
    profile = _onboarded(db)
    profile_service.update_profile(db, profile.id, ProfileUpdateRequest(weight_kg=80), today=TODAY + timedelta(days=1))
    assert len(weight_log_service.list_weight_logs(db, profile.id)) == 1


def test_update_dietary_restrictions_keeps_metrics(db):
    profile = _onboarded(db)
    before = profile.daily_calorie_target
    profile = profile_service.update_profile(
        db, profile.id, ProfileUpdateRequest(dietary_restrictions=["vegan", "nut_free"]), today=TODAY
    )
    assert json.loads(profile.dietary_restrictions) == ["vegan", "nut_free"]
    assert profile.daily_calorie_target == before


def test_stats_weight_change_and_target(db):
    profile = _onboarded(db)
    profile_service.update_profile(db, profile.id, ProfileUpdateRequest(weight_kg=78.5), today=TODAY + timedelta(days=10))
    # Outside the 30 day window.
    weight_log_service.record_weight(db, profile.id, 90, on=TODAY - timedelta(days=60))
    db.commit()

    stats = profile_service.get_stats(db, profile.id, today=TODAY + timedelta(days=10))

    assert stats["current_weight"] == 78.5
    assert stats["target_weight"] == 73.5
    assert stats["weight_change"] == -1.5
    assert stats["ideal_weight_range_kg"] == {"min": 60, "max": 81}
    assert [p["weight"] for p in stats["weight_history"]] == [80, 78.5]


def test_stats_single_entry_has_zero_change(db):
    profile = _onboarded(db, goal="maintain")
    stats = profile_service.get_stats(db, profile.id, today=TODAY)
    assert stats["weight_change"] == 0
    assert stats["target_weight"] == 80


def test_log_weight_same_date_overwrites(db):
    profile = _onboarded(db)
    day = TODAY + timedelta(days=2)
    weight_log_service.log_weight(db, profile.id, WeightLogCreateRequest(date=day, weight=79.8))
    entry = weight_log_service.log_weight(
        db, profile.id,
        WeightLogCreateRequest(date=day, weight=79.4, note="after run", measurements={"waist": 84}),
    )

    logs = weight_log_service.list_weight_logs(db, profile.id)
    assert len(logs) == 2
    assert entry.weight == 79.4
    assert entry.note == "after run"
    assert entry.waist_cm == 84


def test_log_weight_does_not_change_profile(db):
    profile = _onboarded(db)
    weight_log_service.log_weight(db, profile.id, WeightLogCreateRequest(date=TODAY + timedelta(days=1), weight=70))
    db.refresh(profile)
    assert profile.weight_kg == 80


def test_log_weight_unknown_profile_raises_404(db):
    with pytest.raises(NotFoundError):
        weight_log_service.log_weight(db, 42, WeightLogCreateRequest(weight=70))


def test_log_weight_rejects_future_date(db):
    profile = _onboarded(db)
    with pytest.raises(ValidationError) as exc_info:
        weight_log_service.log_weight(
            db, profile.id, WeightLogCreateRequest(date=date.today() + timedelta(days=1), weight=70)
        )
    assert exc_info.value.status_code == 400
    assert exc_info.value.details == {"field": "date"}


def test_log_weight_same_date_without_measurements_clears_them(db):
    profile = _onboarded(db)
    day = TODAY + timedelta(days=3)
    weight_log_service.log_weight(
        db, profile.id,
        WeightLogCreateRequest(date=day, weight=79, note="am", measurements={"waist": 90, "hips": 101}),
    )
    entry = weight_log_service.log_weight(db, profile.id, WeightLogCreateRequest(date=day, weight=78))

    assert entry.weight == 78
    assert entry.note is None
    assert entry.waist_cm is None
    assert entry.hips_cm is None


def test_update_weight_keeps_manual_log_details(db):
    profile = _onboarded(db)
    day = TODAY + timedelta(days=4)
    weight_log_service.log_weight(
        db, profile.id,
        WeightLogCreateRequest(date=day, weight=170, unit="lbs", note="scale", measurements={"waist": 86}),
    )
    profile_service.update_profile(db, profile.id, ProfileUpdateRequest(weight_kg=77), today=day)

    entries = [log for log in weight_log_service.list_weight_logs(db, profile.id) if log.date == day]
    assert len(entries) == 1
    assert entries[0].weight == 77
    assert entries[0].unit == "kg"
    assert entries[0].note == "scale"
    assert entries[0].waist_cm == 86


def test_stats_weight_change_converts_lbs(db):
    profile = _onboarded(db)
    day = TODAY + timedelta(days=5)
    weight_log_service.log_weight(db, profile.id, WeightLogCreateRequest(date=day, weight=176, unit="lbs"))

    stats = profile_service.get_stats(db, profile.id, today=day)

    assert stats["weight_change"] == -0.2
    assert [(p["weight"], p["unit"]) for p in stats["weight_history"]] == [(80, "kg"), (176, "lbs")]
