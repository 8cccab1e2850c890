from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Request

router = APIRouter()

ENDPOINTS = ["/api/health", "/api/test", "/api/calculate-depreciation"]


@router.get("", summary="API index")
def api_index() -> Dict[str, Any]:
    """List the public endpoints."""
    return {"message": "DuoGroup Tax Calculator API", "endpoints": ENDPOINTS}


@router.get("/health", summary="Liveness check")
def health_check() -> dict[str, str]:
    return {"status": "OK", "message": "Tax Depreciation Calculator API is running"}


@router.api_route("/test", methods=["GET", "POST"], summary="Request echo")
def echo_request(request: Request) -> dict[str, str]:
    """Echo the request line back with a UTC timestamp."""
    return {
        "message": "API is working!",
        "method": request.method,
        "url": str(request.url),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
