"""Tests for tax estimator API endpoints."""

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from src.core.config import settings


@pytest.fixture
def fixed_rates(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin the state rate table so results do not depend on defaults."""
    monkeypatch.setattr(
        settings,
        "state_rates",
        {"CO": Decimal("4.4"), "TX": Decimal("0")},
    )


@pytest.mark.usefixtures("fixed_rates")
class TestEstimateEndpoint:
    """Tests for POST /api/tax/estimate."""

    def test_full_estimate(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={
                "gross_income": "50,000.00",
                "deductions": "10,000",
                "filing_status": "S",
                "state": "CO",
                "state_withheld": "2,000",
                "federal_withheld": "4,000",
                "tax_year": 2025,
            },
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["tax_year"] == 2025
        assert payload["taxable_income"] == "40,000.00"
        assert payload["state"]["tax"] == "1,760.00"
        assert payload["state"]["refund"] == "240.00"
        assert payload["federal"]["tax"] == "4,562.00"
        assert payload["federal"]["refund"] == "-562.00"

    def test_numeric_json_values_are_accepted(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={
                "gross_income": 11925,
                "filing_status": "M",
                "state": "TX",
                "federal_withheld": 1000.4,
                "tax_year": 2025,
            },
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["federal"]["tax"] == "1,193.00"
        assert payload["federal"]["refund"] == "-193.00"

    def test_invalid_amount_returns_field_error(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={"gross_income": "lots", "filing_status": "S", "state": "CO"},
        )

        assert response.status_code == 422
        assert response.json() == {
            "detail": "Please enter a valid number.",
            "error": "invalid_numeric_input",
            "field": "gross_income",
        }

    def test_missing_state_returns_error(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={"gross_income": "1000", "filing_status": "S"},
        )

        assert response.status_code == 422
        payload = response.json()
        assert payload["error"] == "unknown_state"
        assert payload["detail"] == "Please select a state."
        assert set(payload) == {"detail", "error", "field"}

    def test_unknown_state_returns_error(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={"gross_income": "1000", "filing_status": "S", "state": "CA"},
        )

        assert response.status_code == 422
        assert response.json()["detail"] == "Tax rate for this state not found."

    def test_missing_filing_status_returns_error(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={"gross_income": "1000", "state": "CO"},
        )

        assert response.status_code == 422
        assert response.json()["error"] == "unselected_filing_status"
        assert response.json()["field"] == "filing_status"

    def test_unknown_tax_year(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/estimate",
            json={"gross_income": "1000", "state": "CO", "filing_status": "S", "tax_year": 1999},
        )

        assert response.status_code == 422
        assert "No tax configuration for year 1999" in response.json()["detail"]


@pytest.mark.usefixtures("fixed_rates")
class TestBranchEndpoints:
    """Tests for the single-jurisdiction endpoints."""

    def test_state_only(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/state",
            json={"gross_income": "10,000", "state": "co", "state_withheld": "500"},
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["taxable_income"] == "10,000.00"
        assert payload["tax"] == "440.00"
        assert payload["withheld"] == "500.00"
        assert payload["refund"] == "60.00"

    def test_federal_only(self, client: TestClient) -> None:
        response = client.post(
            "/api/tax/federal",
            json={
                "gross_income": "30,000",
                "deductions": "40,000",
                "filing_status": "S",
                "tax_year": 2025,
            },
        )

        assert response.status_code == 200
        payload = response.json()
        assert payload["taxable_income"] == "-10,000.00"
        assert payload["tax"] == "-1,000.00"
        assert payload["refund"] == "1,000.00"


class TestReferenceEndpoints:
    """Tests for the rate and bracket tables."""

    def test_state_rates(self, client: TestClient, fixed_rates: None) -> None:
        response = client.get("/api/tax/states")

        assert response.status_code == 200
        states = response.json()["states"]
        assert [item["code"] for item in states] == ["CO", "TX"]
        assert Decimal(states[0]["rate"]) == Decimal("4.4")

    def test_brackets(self, client: TestClient) -> None:
        response = client.get("/api/tax/brackets", params={"year": 2025})

        assert response.status_code == 200
        payload = response.json()
        assert payload["tax_year"] == 2025
        assert len(payload["single"]) == 7
        assert Decimal(payload["single"][0]["upper_limit"]) == Decimal("11925")
        assert payload["single"][-1]["upper_limit"] is None
        assert Decimal(payload["married_filing_jointly"][1]["cumulative_base_tax"]) == Decimal(
            "2385"
        )

    def test_brackets_unknown_year(self, client: TestClient) -> None:
        response = client.get("/api/tax/brackets", params={"year": 1999})
        assert response.status_code == 422

    def test_years(self, client: TestClient) -> None:
        response = client.get("/api/tax/years")
        assert response.status_code == 200
        assert response.json() == [2024, 2025]
