"""Schemas for weight log submission and response."""

from datetime import date as date_type, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from database.models import WeightLog
from .metrics_schema import CamelModel


class WeightUnit(str, Enum):
    KG = "kg"
    LBS = "lbs"


class BodyMeasurements(CamelModel):
    """Optional body measurements in cm."""

    waist: Optional[float] = Field(None, gt=0)
    hips: Optional[float] = Field(None, gt=0)
    chest: Optional[float] = Field(None, gt=0)
    arms: Optional[float] = Field(None, gt=0)
    thighs: Optional[float] = Field(None, gt=0)


class WeightLogCreateRequest(CamelModel):
    """Payload for logging a weigh-in; date defaults to today."""

    date: Optional[date_type] = Field(None, examples=["2026-10-18"])
    weight: float = Field(..., ge=20, le=500, allow_inf_nan=False, examples=[79.4])
    unit: WeightUnit = WeightUnit.KG
    note: Optional[str] = Field(None, max_length=200)
    measurements: Optional[BodyMeasurements] = None


class WeightLogResponse(CamelModel):
    id: int
    profile_id: int
    date: date_type
    weight: float
    unit: WeightUnit
    note: Optional[str] = None
    measurements: BodyMeasurements
    created_at: Optional[datetime] = None

    @classmethod
    def from_log(cls, log: WeightLog) -> "WeightLogResponse":
        return cls(
            id=log.id,
            profile_id=log.profile_id,
            date=log.date,
            weight=log.weight,
            unit=log.unit,
            note=log.note,
            measurements=BodyMeasurements(
                waist=log.waist_cm,
                hips=log.hips_cm,
                chest=log.chest_cm,
                arms=log.arms_cm,
                thighs=log.thighs_cm,
            ),
            created_at=log.created_at,
        )
