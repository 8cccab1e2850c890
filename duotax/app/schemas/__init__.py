"""Export Pydantic schema models."""

from .depreciation import (
    AssetParameters,
    DepreciationMethod,
    DepreciationRequest,
    DepreciationSchedule,
    ScheduleRow,
)

__all__ = [
    "AssetParameters",
    "DepreciationMethod",
    "DepreciationRequest",
    "DepreciationSchedule",
    "ScheduleRow",
]
