from enum import Enum
from typing import List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictFloat, StrictInt
from pydantic.alias_generators import to_camel

# Booleans are kept as-is so the engine can reject them by field name.
NumericInput = Union[StrictBool, StrictInt, StrictFloat, str]


class DepreciationMethod(str, Enum):
    STRAIGHT_LINE = "straight-line"
    DECLINING_BALANCE = "declining-balance"
    SUM_OF_YEARS = "sum-of-years"
    DECLINING_150 = "150-declining"
    UNITS_OF_PRODUCTION = "units-of-production"
    MACRS_5_YEAR = "macrs-5year"
    MACRS_7_YEAR = "macrs-7year"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DepreciationRequest(CamelModel):
    """Raw calculation request as decoded from the client form.

    Numeric fields may arrive as numbers or numeric strings; range checks and
    coercion are left to the schedule engine so errors can name the field.
    """

    asset_cost: Optional[NumericInput] = Field(
        default=None,
        description="Original cost of the asset.",
    )
    salvage_value: Optional[NumericInput] = Field(
        default=None,
        description="Expected value at the end of the useful life.",
    )
    useful_life: Optional[NumericInput] = Field(
        default=None,
        description="Useful life in whole years (fractions are truncated).",
    )
    method: Optional[str] = Field(
        default=None,
        description="Depreciation method identifier, e.g. 'straight-line' or 'macrs-5year'.",
    )
    current_year: Optional[NumericInput] = Field(
        default=1,
        description="Year of the schedule to report in the snapshot fields.",
    )
    total_units: Optional[NumericInput] = Field(
        default=0,
        description="Lifetime production units (units-of-production only).",
    )
    units_per_year: List[Optional[NumericInput]] = Field(
        default_factory=list,
        description="Units consumed in each year; spread evenly over the life when empty.",
    )


class AssetParameters(BaseModel):
    """Validated, normalised inputs for a single schedule computation."""

    model_config = ConfigDict(frozen=True)

    asset_cost: float = Field(..., gt=0)
    salvage_value: float = Field(..., ge=0)
    useful_life: int = Field(..., ge=1)
    method: DepreciationMethod
    current_year: int = Field(default=1, ge=1)
    total_units: float = Field(default=0.0, ge=0)
    units_per_year: Tuple[float, ...] = ()

    @property
    def depreciable_base(self) -> float:
        return self.asset_cost - self.salvage_value


class ScheduleRow(CamelModel):
    year: int = Field(..., ge=1)
    units: Optional[float] = Field(
        default=None,
        description="Units consumed in the year (units-of-production only).",
    )
    depreciation_expense: float
    accumulated_depreciation: float
    book_value: float


class DepreciationSchedule(CamelModel):
    method: DepreciationMethod
    asset_cost: float
    salvage_value: float
    useful_life: int
    current_year: int
    current_year_depreciation: float = Field(
        ...,
        description="Expense of the snapshot year (last row when the schedule ended earlier).",
    )
    accumulated_depreciation: float
    book_value: float
    schedule: List[ScheduleRow]
