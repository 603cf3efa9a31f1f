import json
from dataclasses import replace
from datetime import datetime, timezone

import pytest

from slo_gate.core.slo import (
    SLOEvaluator,
    generate_report,
    render_markdown,
    save_results,
    to_document,
)
from slo_gate.core.slo.report import REPORT_FILENAME, RESULTS_FILENAME


def _report(definitions, snapshot):
    return SLOEvaluator(definitions, snapshot).run_checks()


def test_console_report_passing(definitions, healthy_snapshot):
    text = generate_report(_report(definitions, healthy_snapshot), color=False)

    assert "SLO Check Report" in text
    assert "  availability: ✅ PASS (99.95 >= 99.9)" in text
    assert "  errorRate: ✅ PASS (0.05 <= 0.1)" in text
    assert "  latency: ✅ OK (30% consumed)" in text
    assert "No recommendations at this time." in text
    assert text.rstrip().endswith("All SLOs passed - Release approved")
    assert "\x1b[" not in text


def test_console_report_failing(definitions, make_snapshot):
    report = _report(definitions, make_snapshot(values={"availability": 99.5}, consumption={"latency": 60, "errorRate": 90}))
    text = generate_report(report, color=False)

    assert "  availability: ❌ FAIL (99.5 >= 99.9)" in text
    assert "  latency: ⚠️  WARNING (60% consumed)" in text
    assert "  errorRate: 🚨 CRITICAL (90% consumed)" in text
    assert "  • availability SLO failed: 99.5 >= 99.9" in text
    assert "No recommendations" not in text
    assert text.rstrip().endswith("SLOs failed - Release blocked")


def test_console_report_color(definitions, healthy_snapshot):
    text = generate_report(_report(definitions, healthy_snapshot), color=True)
    assert "\x1b[32m" in text
    assert "\x1b[0m" in text


def test_console_report_is_pure(definitions, healthy_snapshot):
    report = _report(definitions, healthy_snapshot)
    assert generate_report(report, color=False) == generate_report(report, color=False)


def test_document_mirrors_report(definitions, make_snapshot):
    report = _report(definitions, make_snapshot(consumption={"availability": 80}))
    doc = to_document(report)

    assert doc["passed"] is False
    assert list(doc["slos"]) == ["availability", "latency", "errorRate"]
    assert doc["slos"]["errorRate"] == {
        "current": 0.05,
        "target": 0.1,
        "operator": "<=",
        "passed": True,
        "status": "PASS",
    }
    assert doc["errorBudgets"]["availability"] == {
        "consumption": 80,
        "threshold": 80,
        "remaining": 20,
        "status": "CRITICAL",
    }
    assert doc["recommendations"] == ["availability error budget critical: 80% consumed (threshold: 80%)"]
    assert doc["source"] == "test"
    assert "generatedAt" in doc


def test_markdown_report(definitions, make_snapshot):
    report = _report(definitions, make_snapshot(values={"errorRate": 0.3}))
    report = replace(report, generated_at=datetime(2024, 12, 22, 9, 30, tzinfo=timezone.utc))
    md = render_markdown(report)

    assert md.startswith("# SLO Check Report")
    assert "**Date**: 2024-12-22T09:30:00+00:00" in md
    assert "**Status**: ❌ FAILED" in md
    assert "| SLO | Current | Target | Status |" in md
    assert "| errorRate | 0.3 | 0.1 | ❌ FAIL |" in md
    assert "| Metric | Consumption | Threshold | Status |" in md
    assert "| availability | 25% | 80% | OK |" in md
    assert "- errorRate SLO failed: 0.3 <= 0.1" in md
    assert "Release blocked - Address SLO failures before proceeding" in md


def test_markdown_report_no_recommendations(definitions, healthy_snapshot):
    md = render_markdown(_report(definitions, healthy_snapshot))
    assert "No recommendations at this time." in md
    assert "Release approved - All SLOs are within target" in md


def test_save_results_creates_nested_dir(tmp_path, definitions, healthy_snapshot):
    out_dir = tmp_path / "a" / "b" / "REPORTS"
    results_path, report_path = save_results(_report(definitions, healthy_snapshot), out_dir)

    assert results_path == out_dir / RESULTS_FILENAME
    assert report_path == out_dir / REPORT_FILENAME
    data = json.loads(results_path.read_text(encoding="utf-8"))
    assert data["passed"] is True
    assert set(data["errorBudgets"]) == {"availability", "latency", "errorRate"}
    assert report_path.read_text(encoding="utf-8").startswith("# SLO Check Report")


def test_save_results_overwrites(tmp_path, definitions, healthy_snapshot, make_snapshot):
    save_results(_report(definitions, healthy_snapshot), tmp_path)
    save_results(_report(definitions, make_snapshot(values={"latency": 1})), tmp_path)
    data = json.loads((tmp_path / RESULTS_FILENAME).read_text(encoding="utf-8"))
    assert data["passed"] is False


def test_save_results_propagates_os_errors(tmp_path, definitions, healthy_snapshot):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory")
    with pytest.raises(OSError):
        save_results(_report(definitions, healthy_snapshot), blocker / "REPORTS")
