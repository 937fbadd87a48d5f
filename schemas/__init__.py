"""Pydantic schema package for request and response models."""

from .metrics_schema import BiometricInputRequest, MetricsResponse
from .profile_schema import (
    ProfileCreateRequest,
    OnboardingRequest,
    ProfileUpdateRequest,
    ProfileResponse,
    OnboardingResponse,
    StatsResponse,
)
from .weight_schema import WeightLogCreateRequest, WeightLogResponse

__all__ = [
    "BiometricInputRequest",
    "MetricsResponse",
    "ProfileCreateRequest",
    "OnboardingRequest",
    "ProfileUpdateRequest",
    "ProfileResponse",
    "OnboardingResponse",
    "StatsResponse",
    "WeightLogCreateRequest",
    "WeightLogResponse",
]
