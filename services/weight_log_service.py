"""Weight log service.

Stores one weigh-in per profile per calendar date; logging again on the
same date overwrites that day's entry instead of adding a second row.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from core.logger import get_logger
from core.repository import ProfileRepository, WeightLogRepository
from database import models
from schemas.weight_schema import WeightLogCreateRequest, WeightUnit

logger = get_logger("services.weight_log_service")


MEASUREMENT_PARTS = ("waist", "hips", "chest", "arms", "thighs")

LBS_TO_KG = 0.45359237


def weight_in_kg(entry: models.WeightLog) -> float:
    """Entry weight converted to kg regardless of the unit it was logged in."""
    if entry.unit == WeightUnit.LBS.value:
        return entry.weight * LBS_TO_KG
    return entry.weight


def record_weight(
    db: Session,
    profile_id: int,
    weight: float,
    on: date,
    unit: str = WeightUnit.KG.value,
    note: Optional[str] = None,
    measurements: Optional[dict] = None,
) -> models.WeightLog:
    """Insert or replace the entry for `on`. Changes are added, not committed."""
    repo = WeightLogRepository(db)
    entry = repo.get_for_date(profile_id, on)
    if entry is None:
        entry = models.WeightLog(profile_id=profile_id, date=on)
        db.add(entry)

    measurements = measurements or {}
    entry.weight = weight
    entry.unit = unit
    entry.note = note
    for part in MEASUREMENT_PARTS:
        setattr(entry, f"{part}_cm", measurements.get(part))
    return entry


def sync_profile_weight(db: Session, profile_id: int, weight_kg: float, on: date) -> models.WeightLog:
    """Record a weight that came from the profile itself.

    An entry the user already logged for `on` keeps its note and measurements;
    only the weight (now in kg) changes. Changes are added, not committed.
    """
    entry = WeightLogRepository(db).get_for_date(profile_id, on)
    if entry is None:
        return record_weight(db, profile_id, weight_kg, on=on)
    entry.weight = weight_kg
    entry.unit = WeightUnit.KG.value
    return entry


def log_weight(db: Session, profile_id: int, payload: WeightLogCreateRequest) -> models.WeightLog:
    """Persist a weigh-in for an existing profile.

    Raises:
        NotFoundError: If the profile does not exist.
        ValidationError: If the entry is dated in the future.
    """
    if not ProfileRepository(db).get_by_id(profile_id):
        raise NotFoundError("Profile", profile_id)

    today = date.today()
    on = payload.date or today
    if on > today:
        raise ValidationError("Weight log date cannot be in the future", field="date")
    entry = record_weight(
        db,
        profile_id,
        payload.weight,
        on=on,
        unit=payload.unit.value,
        note=payload.note,
        measurements=payload.measurements.model_dump() if payload.measurements else None,
    )
    db.commit()
    db.refresh(entry)
    logger.info("Weight logged: profile=%s date=%s weight=%s%s", profile_id, on, entry.weight, entry.unit)
    return entry


def list_weight_logs(db: Session, profile_id: int, since: Optional[date] = None) -> List[models.WeightLog]:
    """Return a profile's weigh-ins in ascending date order."""
    if not ProfileRepository(db).get_by_id(profile_id):
        raise NotFoundError("Profile", profile_id)
    return WeightLogRepository(db).list_for_profile(profile_id, since=since)
