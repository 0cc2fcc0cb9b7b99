"""
Test suite for the decomposition API endpoints.

The tests verify:
1. POST /decompositions returns the result table as columns + rows
2. Results match the library call on the same record set
3. Input errors map to 422 with the error message
4. Non-finite cells leave the API as null
5. Settings are injected through the dependency and can be overridden
"""

from typing import Any, Dict

import pandas as pd
import pytest
from fastapi.testclient import TestClient

from scv2d.core.config import Settings
from scv2d.core.dependencies import get_settings_dependency
from scv2d.services.decomposition import decompose

pytestmark = pytest.mark.api


class TestDecompositionEndpoint:
    """Tests for POST /decompositions."""

    def test_returns_result_table(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        response = client.post("/decompositions", json=decomposition_payload)

        assert response.status_code == 200
        body = response.json()
        assert body["columns"] == ["source", "F.W", "F.B", "M.W", "M.B"]
        assert body["groups"] == ["F", "M"]
        assert [row["source"] for row in body["rows"]] == ["hilabour", "hicapital"]
        assert body["observations"] == 4
        assert body["dropped_rows"] == 0
        assert len(body["source_statistics"]) == 2

    def test_matches_library_result(
        self,
        client: TestClient,
        decomposition_payload: Dict[str, Any],
        default_settings: Settings,
    ) -> None:
        response = client.post("/decompositions", json=decomposition_payload)
        expected = decompose(
            pd.DataFrame(decomposition_payload["records"]),
            "hitotal", "sex", ["hilabour", "hicapital"], "hpopwgt",
            settings=default_settings,
        )

        for row, (_, expected_row) in zip(response.json()["rows"], expected.iterrows()):
            for column in ["F.W", "F.B", "M.W", "M.B"]:
                assert row[column] == pytest.approx(expected_row[column])

    def test_table_sums_to_total_scv(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        body = client.post("/decompositions", json=decomposition_payload).json()

        cells = [value for row in body["rows"] for key, value in row.items() if key != "source"]
        assert sum(cells) == pytest.approx(body["total_scv"])

    def test_defaults_when_roles_omitted(self, client: TestClient) -> None:
        payload = {"records": [{"total": 100}, {"total": 200}], "total": "total"}
        body = client.post("/decompositions", json=payload).json()

        assert body["columns"] == ["source", "all.W", "all.B"]
        assert body["rows"][0]["all.W"] == pytest.approx(1.0 / 18.0)
        assert body["rows"][0]["all.B"] == pytest.approx(0.0, abs=1e-12)

    def test_missing_values_are_dropped(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        payload = dict(decomposition_payload)
        payload["records"] = decomposition_payload["records"] + [
            {"sex": "M", "hitotal": None, "hilabour": 1.0, "hicapital": 1.0, "hpopwgt": 1.0},
            {"sex": "F", "hitotal": 50.0, "hilabour": 50.0, "hpopwgt": 1.0},
        ]
        body = client.post("/decompositions", json=payload).json()

        assert body["observations"] == 4
        assert body["dropped_rows"] == 2

    def test_blocked_layout_from_request(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        payload = dict(decomposition_payload, layout="blocked")
        body = client.post("/decompositions", json=payload).json()

        assert body["columns"] == ["source", "F.W", "M.W", "F.B", "M.B"]


class TestDecompositionErrors:
    """Tests for error mapping of POST /decompositions."""

    def test_nonpositive_weight_returns_422(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        payload = dict(decomposition_payload)
        payload["records"] = [dict(r) for r in decomposition_payload["records"]]
        payload["records"][1]["hpopwgt"] = -1.0

        response = client.post("/decompositions", json=payload)

        assert response.status_code == 422
        assert "nonpositive" in response.json()["detail"]

    def test_missing_column_returns_422(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        payload = dict(decomposition_payload, feature="region")
        response = client.post("/decompositions", json=payload)

        assert response.status_code == 422
        assert "region" in response.json()["detail"]

    def test_empty_records_rejected_by_schema(self, client: TestClient) -> None:
        response = client.post("/decompositions", json={"records": [], "total": "t"})
        assert response.status_code == 422

    def test_degenerate_source_serialized_as_null(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        payload = dict(decomposition_payload, sources=["hilabour", "hirent"])
        payload["records"] = [dict(r, hirent=0.0) for r in decomposition_payload["records"]]

        response = client.post("/decompositions", json=payload)

        assert response.status_code == 200
        rows = {row["source"]: row for row in response.json()["rows"]}
        assert all(rows["hirent"][c] is None for c in ["F.W", "F.B", "M.W", "M.B"])
        assert all(rows["hilabour"][c] is not None for c in ["F.W", "F.B", "M.W", "M.B"])
        stats = {s["source"]: s for s in response.json()["source_statistics"]}
        assert stats["hirent"]["alpha"] is None


class TestSettingsOverride:
    """Tests for settings injection into the endpoint."""

    def test_sorted_group_order_override(
        self, client: TestClient, decomposition_payload: Dict[str, Any]
    ) -> None:
        from scv2d.main import app

        payload = dict(decomposition_payload)
        payload["records"] = list(reversed(decomposition_payload["records"]))

        default_body = client.post("/decompositions", json=payload).json()
        app.dependency_overrides[get_settings_dependency] = lambda: Settings(group_order="sorted")
        sorted_body = client.post("/decompositions", json=payload).json()

        assert default_body["groups"] == ["M", "F"]
        assert sorted_body["groups"] == ["F", "M"]


class TestServiceEndpoints:
    """Tests for health and root endpoints."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy"}

    def test_root(self, client: TestClient) -> None:
        body = client.get("/").json()
        assert body["name"] == "SCV Decomposition API"
        assert body["docs"] == "/docs"
