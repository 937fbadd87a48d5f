"""Metrics API router.

Exposes the calculator as a stateless endpoint so every client surface uses
the same derivation instead of carrying its own copy of the formulas.
"""

from fastapi import APIRouter
from core.logger import get_logger
from schemas import BiometricInputRequest, MetricsResponse
from services.metrics_calculator import metrics_calculator

logger = get_logger("api.metrics")
router = APIRouter(prefix="/api/metrics", tags=["metrics"])


@router.post("/calculate", response_model=MetricsResponse)
def calculate_metrics(payload: BiometricInputRequest):
    """Derive BMI, BMR, TDEE, calorie target, macros and ideal weight range.

    Nothing is persisted; identical input always yields identical output.
    """
    result = metrics_calculator.derive_full_profile(payload.to_input())
    logger.info(
        "Metrics calculated: bmi=%s bmr=%s tdee=%s target=%s",
        result.bmi, result.bmr, result.tdee, result.daily_calorie_target
    )
    return MetricsResponse.from_result(result)
