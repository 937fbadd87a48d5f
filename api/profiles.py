"""Profile API router.

Endpoints to register a profile, complete onboarding, read and update the
profile, and fetch the stats summary. Metrics recalculation happens in
`services.profile_service`; these handlers only translate between HTTP and
the service layer.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from core.logger import get_logger
from database.deps import get_db_read, get_db_write
from schemas import (
    OnboardingRequest,
    OnboardingResponse,
    ProfileCreateRequest,
    ProfileResponse,
    ProfileUpdateRequest,
    StatsResponse,
    WeightLogCreateRequest,
    WeightLogResponse,
)
from services import profile_service, weight_log_service

logger = get_logger("api.profiles")
router = APIRouter(prefix="/api/profiles", tags=["profiles"])


@router.post("", response_model=ProfileResponse, status_code=201)
def create_profile(payload: ProfileCreateRequest, db: Session = Depends(get_db_write)):
    """Register a new, not yet onboarded profile.

    Raises:
        ConflictError: If the email is already registered.
    """
    profile = profile_service.create_profile(db, payload)
    return ProfileResponse.from_profile(profile)


@router.get("/{profile_id}", response_model=ProfileResponse)
def get_profile(profile_id: int, db: Session = Depends(get_db_read)):
    """Return a profile with its stored metrics.

    Raises:
        NotFoundError: If the profile does not exist.
    """
    return ProfileResponse.from_profile(profile_service.get_profile(db, profile_id))


@router.post("/{profile_id}/onboarding", response_model=OnboardingResponse)
def complete_onboarding(profile_id: int, payload: OnboardingRequest, db: Session = Depends(get_db_write)):
    """Store onboarding biometrics and derive the initial metrics.

    Also records the onboarding weight as the first weight log entry.
    """
    profile, ideal_range = profile_service.complete_onboarding(db, profile_id, payload)
    return OnboardingResponse(
        profile=ProfileResponse.from_profile(profile),
        ideal_weight_range_kg={"min": ideal_range.min, "max": ideal_range.max},
    )


@router.put("/{profile_id}", response_model=ProfileResponse)
def update_profile(profile_id: int, payload: ProfileUpdateRequest, db: Session = Depends(get_db_write)):
    """Apply a partial update and recompute metrics when an input changed.

    Raises:
        NotFoundError: If the profile does not exist.
        OnboardingRequiredError: If onboarding has not been completed.
    """
    profile = profile_service.update_profile(db, profile_id, payload)
    return ProfileResponse.from_profile(profile)


@router.get("/{profile_id}/stats", response_model=StatsResponse)
def get_stats(profile_id: int, db: Session = Depends(get_db_read)):
    """Return weight trend, targets and ideal weight range for the last 30 days."""
    return StatsResponse.model_validate(profile_service.get_stats(db, profile_id))


@router.post("/{profile_id}/weight-logs", response_model=WeightLogResponse, status_code=201)
def log_weight(profile_id: int, payload: WeightLogCreateRequest, db: Session = Depends(get_db_write)):
    """Record a weigh-in; a second entry on the same date replaces the first."""
    entry = weight_log_service.log_weight(db, profile_id, payload)
    return WeightLogResponse.from_log(entry)


@router.get("/{profile_id}/weight-logs", response_model=List[WeightLogResponse])
def list_weight_logs(profile_id: int, since: Optional[date] = None, db: Session = Depends(get_db_read)):
    """List weigh-ins in ascending date order, optionally from `since` onward."""
    entries = weight_log_service.list_weight_logs(db, profile_id, since=since)
    return [WeightLogResponse.from_log(e) for e in entries]
