from fastapi import APIRouter

from ...schemas.depreciation import DepreciationRequest, DepreciationSchedule
from ...services.depreciation import calculate_depreciation_schedule

router = APIRouter()


@router.post(
    "/calculate-depreciation",
    response_model=DepreciationSchedule,
    response_model_exclude_none=True,
    summary="Depreciation schedule",
)
def run_depreciation_schedule(payload: DepreciationRequest) -> DepreciationSchedule:
    """
    Compute the yearly depreciation schedule for one asset.

    Returns every computed year plus the expense, accumulated depreciation and
    book value of the requested current year.
    """
    return calculate_depreciation_schedule(payload)


@router.get("/calculate-depreciation", summary="Calculation endpoint probe")
def describe_depreciation_endpoint() -> dict[str, str]:
    """Confirm the endpoint is reachable without running a calculation."""
    return {"message": "API is working! Use POST to calculate depreciation."}
