from __future__ import annotations

import logging
import math
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence

from ..schemas.depreciation import (
    AssetParameters,
    DepreciationMethod,
    DepreciationRequest,
    DepreciationSchedule,
    ScheduleRow,
)

logger = logging.getLogger(__name__)

# Published MACRS half-year convention percentages.
MACRS_5_YEAR_RATES = (0.20, 0.32, 0.192, 0.1152, 0.1152, 0.0576)
MACRS_7_YEAR_RATES = (0.1429, 0.2449, 0.1749, 0.1249, 0.0893, 0.0892, 0.0893, 0.0446)

# Upper bound on schedule length; one row is produced per year.
MAX_USEFUL_LIFE = 100


class ScheduleValidationError(ValueError):
    """Raised when request parameters cannot produce a schedule."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field
        self.message = message


def _format_amount(value: float) -> str:
    return f"{value:,.2f}"


def _is_blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _parse_number(raw: Any, field: str, label: str) -> float:
    if _is_blank(raw):
        raise ScheduleValidationError(field, f"{label} is required.")
    if isinstance(raw, bool):
        raise ScheduleValidationError(field, f"{label} must be a number, got {raw!r}.")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ScheduleValidationError(field, f"{label} must be a number, got {raw!r}.") from None
    if not math.isfinite(value):
        raise ScheduleValidationError(field, f"{label} must be a finite number, got {raw!r}.")
    return value


def _parse_units(raw_units: Sequence[Any]) -> List[float]:
    units: List[float] = []
    for index, raw in enumerate(raw_units, start=1):
        value = _parse_number(raw, "unitsPerYear", f"Units for year {index}")
        if value < 0:
            raise ScheduleValidationError(
                "unitsPerYear",
                f"Units for year {index} must not be negative, got {_format_amount(value)}.",
            )
        units.append(value)
    return units


def validate_parameters(payload: DepreciationRequest) -> AssetParameters:
    """
    Coerce a raw request into ``AssetParameters``.

    Raises ``ScheduleValidationError`` naming the first offending field. Integer
    fields are truncated toward zero before their range checks run.
    """
    asset_cost = _parse_number(payload.asset_cost, "assetCost", "Asset cost")
    salvage_value = _parse_number(payload.salvage_value, "salvageValue", "Salvage value")
    useful_life = int(_parse_number(payload.useful_life, "usefulLife", "Useful life"))

    if asset_cost <= 0:
        raise ScheduleValidationError(
            "assetCost", f"Asset cost must be greater than 0, got {_format_amount(asset_cost)}."
        )
    if salvage_value < 0:
        raise ScheduleValidationError(
            "salvageValue", f"Salvage value must not be negative, got {_format_amount(salvage_value)}."
        )
    if salvage_value >= asset_cost:
        raise ScheduleValidationError(
            "salvageValue",
            f"Salvage value ({_format_amount(salvage_value)}) must be less than "
            f"asset cost ({_format_amount(asset_cost)}).",
        )
    if useful_life <= 0:
        raise ScheduleValidationError(
            "usefulLife", f"Useful life must be at least 1 year, got {useful_life}."
        )
    if useful_life > MAX_USEFUL_LIFE:
        raise ScheduleValidationError(
            "usefulLife", f"Useful life must be at most {MAX_USEFUL_LIFE} years, got {useful_life}."
        )

    raw_year = 1 if _is_blank(payload.current_year) else payload.current_year
    current_year = int(_parse_number(raw_year, "currentYear", "Current year"))
    if current_year < 1 or current_year > useful_life:
        raise ScheduleValidationError(
            "currentYear",
            f"Current year must be between 1 and the useful life ({useful_life}), got {current_year}.",
        )

    valid_methods = ", ".join(item.value for item in DepreciationMethod)
    if _is_blank(payload.method):
        raise ScheduleValidationError("method", f"Depreciation method is required. Expected one of: {valid_methods}.")
    try:
        method = DepreciationMethod(payload.method)
    except ValueError:
        raise ScheduleValidationError(
            "method", f"Invalid depreciation method {payload.method!r}. Expected one of: {valid_methods}."
        ) from None

    total_units = 0.0
    units_per_year: List[float] = []
    if method is DepreciationMethod.UNITS_OF_PRODUCTION:
        raw_total = 0 if _is_blank(payload.total_units) else payload.total_units
        total_units = _parse_number(raw_total, "totalUnits", "Total units")
        if total_units <= 0:
            raise ScheduleValidationError(
                "totalUnits",
                "Total units must be greater than 0 for the units-of-production method, "
                f"got {_format_amount(total_units)}.",
            )
        units_per_year = _parse_units(payload.units_per_year or [])

    return AssetParameters(
        asset_cost=asset_cost,
        salvage_value=salvage_value,
        useful_life=useful_life,
        method=method,
        current_year=current_year,
        total_units=total_units,
        units_per_year=tuple(units_per_year),
    )


class _Ledger:
    """Running tally shared by the strategies of one schedule.

    Posted expenses are clamped to ``[0, book_value - floor]`` so the book value
    never drops below the floor, and accumulated depreciation stays the plain
    sequential sum of the posted expenses.
    """

    def __init__(self, asset_cost: float, floor: float) -> None:
        self.asset_cost = asset_cost
        self.floor = floor
        self.accumulated = 0.0
        self.exhausted = False

    @property
    def book_value(self) -> float:
        return max(self.asset_cost - self.accumulated, self.floor)

    @property
    def headroom(self) -> float:
        return max(self.book_value - self.floor, 0.0)

    def post(self, year: int, expense: float, units: Optional[float] = None) -> ScheduleRow:
        headroom = self.headroom
        expense = max(expense, 0.0)
        if expense >= headroom:
            expense = headroom
            self.exhausted = True
        self.accumulated += expense
        return ScheduleRow(
            year=year,
            units=units,
            depreciation_expense=expense,
            accumulated_depreciation=self.accumulated,
            book_value=self.book_value,
        )


def _straight_line(params: AssetParameters) -> Iterator[ScheduleRow]:
    ledger = _Ledger(params.asset_cost, params.salvage_value)
    annual_expense = params.depreciable_base / params.useful_life
    for year in range(1, params.useful_life + 1):
        yield ledger.post(year, annual_expense)


def _declining_balance(
    params: AssetParameters,
    factor: float,
    switch_to_straight_line: bool,
) -> Iterator[ScheduleRow]:
    ledger = _Ledger(params.asset_cost, params.salvage_value)
    rate = factor / params.useful_life
    for year in range(1, params.useful_life + 1):
        remaining = ledger.book_value
        expense = remaining * rate
        years_left = params.useful_life - year + 1
        # The final year always takes the rest of the depreciable balance.
        if switch_to_straight_line or years_left == 1:
            expense = max(expense, (remaining - params.salvage_value) / years_left)
        yield ledger.post(year, expense)
        # Stops as soon as the salvage floor is reached.
        if ledger.exhausted:
            return


def _double_declining_balance(params: AssetParameters) -> Iterator[ScheduleRow]:
    return _declining_balance(params, factor=2.0, switch_to_straight_line=False)


def _declining_150(params: AssetParameters) -> Iterator[ScheduleRow]:
    return _declining_balance(params, factor=1.5, switch_to_straight_line=True)


def _sum_of_years(params: AssetParameters) -> Iterator[ScheduleRow]:
    ledger = _Ledger(params.asset_cost, params.salvage_value)
    life = params.useful_life
    digit_sum = life * (life + 1) / 2
    for year in range(1, life + 1):
        fraction = (life - year + 1) / digit_sum
        yield ledger.post(year, params.depreciable_base * fraction)


def _units_of_production(params: AssetParameters) -> Iterator[ScheduleRow]:
    ledger = _Ledger(params.asset_cost, params.salvage_value)
    per_unit = params.depreciable_base / params.total_units
    units_used = params.units_per_year or (params.total_units / params.useful_life,) * params.useful_life
    for year, units in enumerate(units_used[: params.useful_life], start=1):
        yield ledger.post(year, per_unit * units, units=units)


def _macrs(params: AssetParameters, rates: Sequence[float]) -> Iterator[ScheduleRow]:
    # Salvage value does not enter the MACRS basis; the floor is zero.
    ledger = _Ledger(params.asset_cost, 0.0)
    for year, rate in enumerate(rates[: params.useful_life], start=1):
        yield ledger.post(year, params.asset_cost * rate)


def _macrs_5_year(params: AssetParameters) -> Iterator[ScheduleRow]:
    return _macrs(params, MACRS_5_YEAR_RATES)


def _macrs_7_year(params: AssetParameters) -> Iterator[ScheduleRow]:
    return _macrs(params, MACRS_7_YEAR_RATES)


STRATEGIES: Dict[DepreciationMethod, Callable[[AssetParameters], Iterator[ScheduleRow]]] = {
    DepreciationMethod.STRAIGHT_LINE: _straight_line,
    DepreciationMethod.DECLINING_BALANCE: _double_declining_balance,
    DepreciationMethod.SUM_OF_YEARS: _sum_of_years,
    DepreciationMethod.DECLINING_150: _declining_150,
    DepreciationMethod.UNITS_OF_PRODUCTION: _units_of_production,
    DepreciationMethod.MACRS_5_YEAR: _macrs_5_year,
    DepreciationMethod.MACRS_7_YEAR: _macrs_7_year,
}


def build_rows(params: AssetParameters) -> List[ScheduleRow]:
    """Run the strategy registered for ``params.method``."""
    return list(STRATEGIES[params.method](params))


def select_snapshot(rows: Sequence[ScheduleRow], current_year: int) -> ScheduleRow:
    """
    Return the row for ``current_year``.

    Declining-balance schedules can end before the useful life does; the last
    row is reported for any later year.
    """
    return rows[min(current_year, len(rows)) - 1]


def calculate_depreciation_schedule(payload: DepreciationRequest) -> DepreciationSchedule:
    """
    Validate a request and compute its full depreciation schedule.

    Returns the echoed inputs, the yearly rows and the snapshot values of the
    requested year. Raises ``ScheduleValidationError`` for unusable input.
    """
    params = validate_parameters(payload)
    rows = build_rows(params)
    snapshot = select_snapshot(rows, params.current_year)
    logger.debug(
        "Computed %s schedule: %d rows for a %d year life",
        params.method.value,
        len(rows),
        params.useful_life,
    )

    return DepreciationSchedule(
        method=params.method,
        asset_cost=params.asset_cost,
        salvage_value=params.salvage_value,
        useful_life=params.useful_life,
        current_year=params.current_year,
        current_year_depreciation=snapshot.depreciation_expense,
        accumulated_depreciation=snapshot.accumulated_depreciation,
        book_value=snapshot.book_value,
        schedule=rows,
    )
