"""
Utility script to exercise the DuoTax depreciation API with representative payloads.

Usage:
    python -m duotax.examples.sample_requests

Override the default base URL by setting the DUOTAX_API_BASE_URL environment variable,
e.g. `set DUOTAX_API_BASE_URL=https://duotax-api.onrender.com`.
"""

from __future__ import annotations

import json
import os
import textwrap
import urllib.error
import urllib.request
from typing import Dict, Iterable, List, Tuple

BASE_URL = os.getenv("DUOTAX_API_BASE_URL", "http://localhost:8000").rstrip("/")
CALCULATE_PATH = "/api/calculate-depreciation"

BASE_ASSET = {
    "assetCost": 100000.0,
    "salvageValue": 10000.0,
    "usefulLife": 5,
    "currentYear": 3,
}


def _print_heading(title: str) -> None:
    bar = "=" * len(title)
    print(f"\n{title}\n{bar}")


def _get(path: str) -> Tuple[int, str]:
    with urllib.request.urlopen(f"{BASE_URL}{path}") as response:  # type: ignore[no-untyped-call]
        return response.status, response.read().decode("utf-8")


def _post(path: str, payload: Dict) -> Tuple[int, str]:
    data = json.dumps(payload).encode("utf-8")
    request = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=data,
        headers={"Content-Type": "application/json"},
        method="POST",
    )
    try:
        with urllib.request.urlopen(request) as response:  # type: ignore[no-untyped-call]
            return response.status, response.read().decode("utf-8")
    except urllib.error.HTTPError as exc:
        # 400 bodies carry the validation message.
        return exc.code, exc.read().decode("utf-8")


def _summarise(body: str, limit: int = 400) -> str:
    snippet = body if len(body) <= limit else f"{body[:limit]}…"
    return textwrap.indent(snippet, prefix="  ")


def build_samples() -> List[Tuple[str, Dict]]:
    """One request per depreciation method plus a deliberately invalid one."""
    samples: List[Tuple[str, Dict]] = [
        (CALCULATE_PATH, {**BASE_ASSET, "method": method})
        for method in (
            "straight-line",
            "declining-balance",
            "150-declining",
            "sum-of-years",
            "macrs-5year",
            "macrs-7year",
        )
    ]
    samples.append(
        (
            CALCULATE_PATH,
            {
                **BASE_ASSET,
                "method": "units-of-production",
                "totalUnits": 500000,
                "unitsPerYear": [120000, 110000, 100000, 90000, 80000],
            },
        )
    )
    samples.append((CALCULATE_PATH, {**BASE_ASSET, "salvageValue": 150000.0, "method": "straight-line"}))
    return samples


def run_health_check() -> None:
    _print_heading("GET /api/health")
    status, body = _get("/api/health")
    print(f"Status: {status}")
    print("Response:\n" + _summarise(body))


def run_samples(samples: Iterable[Tuple[str, Dict]]) -> None:
    for path, payload in samples:
        _print_heading(f"POST {path} ({payload['method']})")
        status, body = _post(path, payload)
        print(f"Status: {status}")
        print("Payload:")
        print(_summarise(json.dumps(payload, indent=2)))
        print("Response:\n" + _summarise(body))


def main() -> None:
    run_health_check()
    run_samples(build_samples())


if __name__ == "__main__":
    main()
