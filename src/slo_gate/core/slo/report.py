"""
SLO check report rendering and persistence.

Three renderings of one CheckReport:
- console text with pass/fail iconography (optionally ANSI-colored)
- structured JSON document (slo-check-results.json)
- narrative Markdown report (slo-check-report.md)
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .models import BudgetStatus, CheckReport, format_number

logger = logging.getLogger(__name__)

RESULTS_FILENAME = "slo-check-results.json"
REPORT_FILENAME = "slo-check-report.md"

COLORS = {
    "green": "\x1b[32m",
    "red": "\x1b[31m",
    "yellow": "\x1b[33m",
    "blue": "\x1b[34m",
    "bold": "\x1b[1m",
    "reset": "\x1b[0m",
}

_BUDGET_ICONS = {
    BudgetStatus.OK: ("✅ OK", "green"),
    BudgetStatus.WARNING: ("⚠️  WARNING", "yellow"),
    BudgetStatus.CRITICAL: ("🚨 CRITICAL", "red"),
}


def paint(message: str, color: str = "reset", enabled: bool = True) -> str:
    if not enabled or color == "reset":
        return message
    return f"{COLORS[color]}{message}{COLORS['reset']}"


def section(title: str, color: str = "blue", enabled: bool = True) -> str:
    """Header line followed by an underline of matching width."""
    return "\n".join([paint(title, color, enabled), paint("=" * len(title), color, enabled)])


# Structured document models
class SLOEntry(BaseModel):
    current: float
    target: float
    operator: str
    passed: bool
    status: str


class ErrorBudgetEntry(BaseModel):
    consumption: float
    threshold: float
    remaining: float
    status: BudgetStatus


class ReportDocument(BaseModel):
    """Machine-readable check results."""

    model_config = ConfigDict(populate_by_name=True)

    passed: bool
    slos: Dict[str, SLOEntry]
    error_budgets: Dict[str, ErrorBudgetEntry] = Field(..., alias="errorBudgets")
    recommendations: List[str]
    generated_at: datetime = Field(..., alias="generatedAt")
    source: str


def build_document(report: CheckReport) -> ReportDocument:
    return ReportDocument(
        passed=report.passed,
        slos={
            s.name: SLOEntry(
                current=s.current,
                target=s.target,
                operator=s.comparison.symbol,
                passed=s.passed,
                status=s.status,
            )
            for s in report.slos
        },
        error_budgets={
            b.name: ErrorBudgetEntry(
                consumption=b.consumption,
                threshold=b.threshold,
                remaining=b.remaining,
                status=b.status,
            )
            for b in report.error_budgets
        },
        recommendations=list(report.recommendations),
        generated_at=report.generated_at,
        source=report.source,
    )


def to_document(report: CheckReport) -> Dict:
    """JSON-compatible dict; key order follows check order."""
    return build_document(report).model_dump(mode="json", by_alias=True)


def generate_report(report: CheckReport, color: bool = True) -> str:
    """Render the console report. Pure function of the report."""
    lines: List[str] = ["", section("📊 SLO Check Report", "bold", color)]

    lines.append("")
    lines.append(paint("📈 SLO Status:", "blue", color))
    for s in report.slos:
        status = "✅ PASS" if s.passed else "❌ FAIL"
        lines.append(
            paint(
                f"  {s.name}: {status} "
                f"({format_number(s.current)} {s.comparison.symbol} {format_number(s.target)})",
                "green" if s.passed else "red",
                color,
            )
        )

    lines.append("")
    lines.append(paint("💰 Error Budget Status:", "blue", color))
    for b in report.error_budgets:
        status, tone = _BUDGET_ICONS[b.status]
        lines.append(paint(f"  {b.name}: {status} ({format_number(b.consumption)}% consumed)", tone, color))

    lines.append("")
    lines.append(paint("💡 Recommendations:", "yellow", color))
    if report.recommendations:
        for rec in report.recommendations:
            lines.append(paint(f"  • {rec}", "yellow", color))
    else:
        lines.append("  No recommendations at this time.")

    lines.append("")
    lines.append(paint("🎯 Overall Status:", "bold", color))
    if report.passed:
        lines.append(paint("✅ All SLOs passed - Release approved", "green", color))
    else:
        lines.append(paint("❌ SLOs failed - Release blocked", "red", color))

    return "\n".join(lines)


def render_markdown(report: CheckReport) -> str:
    status = "✅ PASSED" if report.passed else "❌ FAILED"

    slo_rows = "\n".join(
        f"| {s.name} | {format_number(s.current)} | {format_number(s.target)} | "
        f"{'✅ PASS' if s.passed else '❌ FAIL'} |"
        for s in report.slos
    )
    budget_rows = "\n".join(
        f"| {b.name} | {format_number(b.consumption)}% | {format_number(b.threshold)}% | {b.status.value} |"
        for b in report.error_budgets
    )
    if report.recommendations:
        recommendations = "\n".join(f"- {rec}" for rec in report.recommendations)
    else:
        recommendations = "No recommendations at this time."

    if report.passed:
        next_steps = "✅ Release approved - All SLOs are within target"
    else:
        next_steps = "❌ Release blocked - Address SLO failures before proceeding"

    return f"""# SLO Check Report

**Date**: {report.generated_at.isoformat()}
**Status**: {status}
**Source**: {report.source}

## SLO Compliance

| SLO | Current | Target | Status |
|-----|---------|--------|--------|
{slo_rows}

## Error Budget Status

| Metric | Consumption | Threshold | Status |
|--------|-------------|-----------|--------|
{budget_rows}

## Recommendations

{recommendations}

## Next Steps

{next_steps}
"""


def save_results(report: CheckReport, reports_dir: "str | Path") -> Tuple[Path, Path]:
    """
    Write the JSON results and Markdown report into `reports_dir`.

    The directory is created if needed. OS errors propagate to the caller.
    """
    out_dir = Path(reports_dir)
    out_dir.mkdir(parents=True, exist_ok=True)

    results_path = out_dir / RESULTS_FILENAME
    report_path = out_dir / REPORT_FILENAME

    document = build_document(report)
    results_path.write_text(document.model_dump_json(indent=2, by_alias=True) + "\n", encoding="utf-8")
    report_path.write_text(render_markdown(report), encoding="utf-8")

    logger.info(f"SLO results written to {results_path} and {report_path}")
    return results_path, report_path
