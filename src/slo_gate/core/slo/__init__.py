"""
SLO (Service Level Objective) release gate.

Compares metric readings against SLO targets, classifies error budget
consumption, and renders the release verdict.
"""

from .evaluator import SLOEvaluator, check_error_budget, check_slo, classify_budget
from .models import (
    Accumulator,
    BudgetStatus,
    CheckReport,
    Comparison,
    ErrorBudgetResult,
    MetricSnapshot,
    SLODefinition,
    SLOResult,
)
from .report import generate_report, render_markdown, save_results, to_document
from .sources import SnapshotError, default_definitions, default_snapshot, load_snapshot

__all__ = [
    "SLOEvaluator",
    "check_slo",
    "check_error_budget",
    "classify_budget",
    "Accumulator",
    "BudgetStatus",
    "CheckReport",
    "Comparison",
    "ErrorBudgetResult",
    "MetricSnapshot",
    "SLODefinition",
    "SLOResult",
    "generate_report",
    "render_markdown",
    "save_results",
    "to_document",
    "SnapshotError",
    "default_definitions",
    "default_snapshot",
    "load_snapshot",
]
