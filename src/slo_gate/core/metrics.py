"""Prometheus metrics plumbing (opt-in).

When METRICS_ENABLED=false, this module should not register collectors.
Gauges are exported to a node-exporter textfile next to the reports.
"""

from __future__ import annotations

from pathlib import Path

from prometheus_client import CollectorRegistry, Gauge, write_to_textfile

from slo_gate.core.config import settings
from slo_gate.core.slo.models import BudgetStatus, CheckReport

METRICS_FILENAME = "slo-check.prom"

_registry: CollectorRegistry | None = None
_g_slo_value: Gauge | None = None
_g_slo_target: Gauge | None = None
_g_slo_passed: Gauge | None = None
_g_budget_consumption: Gauge | None = None
_g_budget_status: Gauge | None = None
_g_release_passed: Gauge | None = None

_STATUS_VALUES = {
    BudgetStatus.OK: 0,
    BudgetStatus.WARNING: 1,
    BudgetStatus.CRITICAL: 2,
}


def init_metrics() -> None:
    global _registry, _g_slo_value, _g_slo_target, _g_slo_passed, _g_budget_consumption, _g_budget_status, _g_release_passed
    if not settings.METRICS_ENABLED:
        return
    if _registry is not None:
        return  # avoid duplicate collectors
    _registry = CollectorRegistry()
    ns = settings.METRICS_NAMESPACE
    _g_slo_value = Gauge(
        f"{ns}_slo_current",
        "Observed SLO reading",
        labelnames=("slo", "operator"),
        registry=_registry,
    )
    _g_slo_target = Gauge(
        f"{ns}_slo_target",
        "SLO target value",
        labelnames=("slo", "operator"),
        registry=_registry,
    )
    _g_slo_passed = Gauge(
        f"{ns}_slo_passed",
        "1 when the SLO reading meets its target",
        labelnames=("slo",),
        registry=_registry,
    )
    _g_budget_consumption = Gauge(
        f"{ns}_error_budget_consumed_pct",
        "Error budget consumed, percent",
        labelnames=("slo",),
        registry=_registry,
    )
    _g_budget_status = Gauge(
        f"{ns}_error_budget_status",
        "Error budget status: 0=OK, 1=WARNING, 2=CRITICAL",
        labelnames=("slo",),
        registry=_registry,
    )
    _g_release_passed = Gauge(
        f"{ns}_release_gate_passed",
        "1 when the release gate passed",
        registry=_registry,
    )


def reset_metrics() -> None:
    """Drop the registry so the next init_metrics() starts clean."""
    global _registry
    _registry = None


def record_report(report: CheckReport) -> None:
    if not settings.METRICS_ENABLED or _registry is None:
        return
    for s in report.slos:
        op = s.comparison.symbol
        _g_slo_value.labels(slo=s.name, operator=op).set(s.current)
        _g_slo_target.labels(slo=s.name, operator=op).set(s.target)
        _g_slo_passed.labels(slo=s.name).set(1 if s.passed else 0)
    for b in report.error_budgets:
        _g_budget_consumption.labels(slo=b.name).set(b.consumption)
        _g_budget_status.labels(slo=b.name).set(_STATUS_VALUES[b.status])
    _g_release_passed.set(1 if report.passed else 0)


def write_metrics(reports_dir: "str | Path") -> Path | None:
    """Write the registry as a textfile; returns the path, or None when disabled."""
    if not settings.METRICS_ENABLED or _registry is None:
        return None
    out_dir = Path(reports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    path = out_dir / METRICS_FILENAME
    write_to_textfile(str(path), _registry)
    return path
