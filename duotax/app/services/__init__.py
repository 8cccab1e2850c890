"""Service layer exposing the depreciation schedule engine."""

from .depreciation import (
    STRATEGIES,
    ScheduleValidationError,
    build_rows,
    calculate_depreciation_schedule,
    select_snapshot,
    validate_parameters,
)

__all__ = [
    "STRATEGIES",
    "ScheduleValidationError",
    "build_rows",
    "calculate_depreciation_schedule",
    "select_snapshot",
    "validate_parameters",
]
