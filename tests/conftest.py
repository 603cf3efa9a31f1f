"""
Pytest configuration and fixtures.
"""

import json

import pytest

from slo_gate.core import metrics
from slo_gate.core.config import settings
from slo_gate.core.slo import MetricSnapshot, default_definitions


def _snapshot(values=None, consumption=None, source="test"):
    base_values = {"availability": 99.95, "latency": 98.5, "errorRate": 0.05}
    base_consumption = {"availability": 25, "latency": 30, "errorRate": 20}
    base_values.update(values or {})
    base_consumption.update(consumption or {})
    return MetricSnapshot(values=base_values, budget_consumption=base_consumption, source=source)


@pytest.fixture
def definitions():
    return default_definitions()


@pytest.fixture
def healthy_snapshot():
    return _snapshot()


@pytest.fixture
def write_snapshot(tmp_path):
    """Write a snapshot payload to a JSON file and return its path."""

    def _write(payload, name="metrics.json"):
        path = tmp_path / name
        path.write_text(json.dumps(payload), encoding="utf-8")
        return path

    return _write


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch):
    """Keep tests independent of the caller's environment and .env file."""
    monkeypatch.setattr(settings, "SLO_METRICS_FILE", "")
    monkeypatch.setattr(settings, "SLO_REPORTS_DIR", "REPORTS")
    monkeypatch.setattr(settings, "SLO_BUDGET_CRITICAL_PCT", 80.0)
    monkeypatch.setattr(settings, "SLO_BUDGET_WARNING_PCT", 50.0)
    monkeypatch.setattr(settings, "METRICS_ENABLED", False)
    monkeypatch.setattr(settings, "METRICS_NAMESPACE", "slo_gate")
    metrics.reset_metrics()
    yield
    metrics.reset_metrics()


@pytest.fixture
def make_snapshot():
    """Default readings with per-test overrides."""
    return _snapshot
