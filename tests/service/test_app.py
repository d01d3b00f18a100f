"""Tests for the FastAPI service mode."""

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from gdinsight.service import AnalysisService, create_app
from tests._fixtures.project_builder import ProjectBuilder


@pytest.fixture
def client() -> TestClient:
    service = AnalysisService()
    return TestClient(create_app(lambda: service))


def test_health_endpoint(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_endpoint(client: TestClient, project_builder: ProjectBuilder) -> None:
    project_builder.write(
        {
            "player.gd": "class_name Player\nsignal a\nsignal b\nsignal c\n",
            "scripts/enemy.gd": "extends Node\n",
        }
    )

    response = client.post(
        "/analyze",
        json={"root": str(project_builder.path()), "directory_analysis": True},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["summary"]["successful"] == 2
    assert data["insights"]["patterns"] == [{"name": "observer", "count": 1, "percentage": 50.0}]
    assert data["directory"]["max_depth"] >= 1


def test_analyze_respects_option_overrides(client: TestClient, project_builder: ProjectBuilder) -> None:
    project_builder.write({"player.gd": "class_name Player\nsignal a\nfunc jump():\n    pass\n"})

    response = client.post(
        "/analyze",
        json={"root": str(project_builder.path()), "options": {"methods": True}},
    )

    record = response.json()["records"][0]
    assert record["class_name"] == ""
    assert record["signals"] == []
    assert [method["name"] for method in record["methods"]] == ["jump"]


def test_analyze_empty_project_reports_no_scripts(client: TestClient, project_builder: ProjectBuilder) -> None:
    response = client.post("/analyze", json={"root": str(project_builder.path())})

    assert response.status_code == 200
    assert response.json()["status"] == "no_scripts"


def test_analyze_missing_root_is_404(client: TestClient, tmp_path: Path) -> None:
    response = client.post("/analyze", json={"root": str(tmp_path / "missing")})

    assert response.status_code == 404
