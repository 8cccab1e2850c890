from fastapi.testclient import TestClient

try:  # pragma: no cover - compatibility for local vs packaged imports
    from duotax.app.api.routes import depreciation as depreciation_routes
    from duotax.app.config import AppSettings
    from duotax.app.main import create_app
    from duotax.examples.sample_requests import build_samples
except ModuleNotFoundError:  # pragma: no cover
    from app.api.routes import depreciation as depreciation_routes
    from app.config import AppSettings
    from app.main import create_app
    from examples.sample_requests import build_samples


client = TestClient(create_app(AppSettings()))


def test_health_endpoint():
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "OK", "message": "Tax Depreciation Calculator API is running"}


def test_index_lists_endpoints():
    response = client.get("/api")
    assert response.status_code == 200
    assert "/api/calculate-depreciation" in response.json()["endpoints"]


def test_echo_endpoint():
    response = client.post("/api/test")
    assert response.status_code == 200
    data = response.json()
    assert data["method"] == "POST"
    assert data["url"].endswith("/api/test")
    assert data["timestamp"]


def test_calculate_probe_on_get():
    response = client.get("/api/calculate-depreciation")
    assert response.status_code == 200
    assert "POST" in response.json()["message"]


def test_straight_line_schedule_endpoint():
    payload = {
        "assetCost": 100000,
        "salvageValue": 10000,
        "usefulLife": 9,
        "method": "straight-line",
        "currentYear": 3,
    }

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert list(data) == [
        "method",
        "assetCost",
        "salvageValue",
        "usefulLife",
        "currentYear",
        "currentYearDepreciation",
        "accumulatedDepreciation",
        "bookValue",
        "schedule",
    ]
    assert data["method"] == "straight-line"
    assert data["currentYear"] == 3
    assert data["accumulatedDepreciation"] == 30000
    assert data["bookValue"] == 70000
    assert len(data["schedule"]) == 9
    assert data["schedule"][0] == {
        "year": 1,
        "depreciationExpense": 10000,
        "accumulatedDepreciation": 10000,
        "bookValue": 90000,
    }


def test_string_inputs_are_coerced():
    payload = {
        "assetCost": "60000",
        "salvageValue": "0",
        "usefulLife": "2",
        "method": "units-of-production",
        "totalUnits": "100000",
        "unitsPerYear": ["40000", 60000],
    }

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert data["currentYear"] == 1
    assert [row["units"] for row in data["schedule"]] == [40000, 60000]
    assert abs(data["schedule"][-1]["accumulatedDepreciation"] - 60000) < 1e-6


def test_macrs_endpoint_caps_rows():
    payload = {
        "assetCost": 50000,
        "salvageValue": 0,
        "usefulLife": 10,
        "method": "macrs-5year",
        "currentYear": 10,
    }

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 200
    data = response.json()
    assert len(data["schedule"]) == 6
    assert data["currentYearDepreciation"] == data["schedule"][-1]["depreciationExpense"]


def test_validation_error_returns_client_error():
    payload = {
        "assetCost": 5000,
        "salvageValue": 5000,
        "usefulLife": 5,
        "method": "straight-line",
    }

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 400
    message = response.json()["error"]
    assert "Salvage value (5,000.00)" in message
    assert "asset cost (5,000.00)" in message


def test_unknown_method_rejected():
    payload = {"assetCost": 5000, "salvageValue": 0, "usefulLife": 5, "method": "bonus"}

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 400
    assert "'bonus'" in response.json()["error"]


def test_malformed_body_returns_client_error():
    payload = {"assetCost": {"amount": 5}, "salvageValue": 0, "usefulLife": 5, "method": "straight-line"}

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 400
    assert response.json()["error"].startswith("Invalid request")


def test_invalid_json_message_has_no_offset():
    response = client.post(
        "/api/calculate-depreciation",
        content='{"assetCost": 5000,, }',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid request: JSON decode error"}


def test_boolean_amount_rejected_by_field():
    payload = {"assetCost": True, "salvageValue": 0, "usefulLife": 5, "method": "straight-line"}

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 400
    assert response.json() == {"error": "Asset cost must be a number, got True."}


def test_oversized_useful_life_rejected():
    payload = {"assetCost": 5000, "salvageValue": 0, "usefulLife": 3000000, "method": "straight-line"}

    response = client.post("/api/calculate-depreciation", json=payload)
    assert response.status_code == 400
    assert "Useful life must be at most 100 years" in response.json()["error"]


def test_unexpected_failure_is_opaque(monkeypatch):
    def explode(payload):
        raise RuntimeError("ledger corrupted")

    monkeypatch.setattr(depreciation_routes, "calculate_depreciation_schedule", explode)
    failing_client = TestClient(create_app(AppSettings()), raise_server_exceptions=False)

    response = failing_client.post(
        "/api/calculate-depreciation",
        json={"assetCost": 1000, "salvageValue": 0, "usefulLife": 2, "method": "straight-line"},
    )
    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}


def test_cors_allows_configured_origin():
    restricted = TestClient(create_app(AppSettings(cors_allow_origins=["https://duotax.example"])))

    response = restricted.options(
        "/api/calculate-depreciation",
        headers={
            "Origin": "https://duotax.example",
            "Access-Control-Request-Method": "POST",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://duotax.example"


def test_sample_payloads_cover_every_method():
    samples = build_samples()
    statuses = {}
    for path, payload in samples:
        response = client.post(path, json=payload)
        statuses.setdefault(response.status_code, []).append(payload["method"])

    assert len(statuses[200]) == 7
    assert statuses[400] == ["straight-line"]
