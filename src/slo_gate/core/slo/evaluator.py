"""
SLO Evaluator: release-gate checks over a metric snapshot.

Checks, in order:
- Every SLO reading against its target (availability, latency, error rate)
- Every SLO's error budget consumption (OK / WARNING / CRITICAL)

The run passes only when all SLOs pass and no budget is CRITICAL.
"""

import logging
from typing import Callable, Optional, Sequence, Tuple

from .models import (
    Accumulator,
    BudgetStatus,
    CheckReport,
    Comparison,
    ErrorBudgetResult,
    MetricSnapshot,
    SLODefinition,
    SLOResult,
    format_number,
)

logger = logging.getLogger(__name__)

DEFAULT_BUDGET_THRESHOLD = 80.0
DEFAULT_BUDGET_WARNING = 50.0


def classify_budget(
    consumption: float,
    threshold: float = DEFAULT_BUDGET_THRESHOLD,
    warning: float = DEFAULT_BUDGET_WARNING,
) -> BudgetStatus:
    """Classify consumption; both boundaries are inclusive on the worse side."""
    if consumption >= threshold:
        return BudgetStatus.CRITICAL
    if consumption >= warning:
        return BudgetStatus.WARNING
    return BudgetStatus.OK


def check_slo(
    acc: Accumulator,
    name: str,
    current: float,
    target: float,
    comparison: "Comparison | str" = Comparison.GE,
) -> Tuple[Accumulator, bool]:
    """
    Compare one SLO reading against its target.

    Returns the updated accumulator and whether the SLO holds. A failure adds
    one recommendation and marks the run as failed.
    """
    op = Comparison.parse(comparison)
    passed = op.evaluate(current, target)
    result = SLOResult(name=name, current=current, target=target, comparison=op, passed=passed)

    recommendation = None
    if not passed:
        recommendation = f"{name} SLO failed: {format_number(current)} {op.symbol} {format_number(target)}"
        logger.warning(recommendation)
    else:
        logger.info(f"SLO {name} passed: {current} {op.symbol} {target}")

    return acc.with_slo(result, recommendation), passed


def check_error_budget(
    acc: Accumulator,
    name: str,
    consumption: float,
    threshold: float = DEFAULT_BUDGET_THRESHOLD,
    warning: float = DEFAULT_BUDGET_WARNING,
) -> Tuple[Accumulator, bool]:
    """
    Classify one error budget's consumption.

    Returns the updated accumulator and False only for CRITICAL budgets.
    """
    status = classify_budget(consumption, threshold, warning)
    result = ErrorBudgetResult(name=name, consumption=consumption, threshold=threshold, status=status)

    recommendation = None
    if status is BudgetStatus.CRITICAL:
        recommendation = (
            f"{name} error budget critical: {format_number(consumption)}% consumed "
            f"(threshold: {format_number(threshold)}%)"
        )
        logger.warning(recommendation)
    elif status is BudgetStatus.WARNING:
        logger.info(f"Error budget {name} at {consumption}% (warning level {warning}%)")

    return acc.with_budget(result, recommendation), status is not BudgetStatus.CRITICAL


class SLOEvaluator:
    """
    Evaluates a set of SLO definitions against one metric snapshot.

    The evaluator holds no results itself; every `run_checks` call starts
    from an empty accumulator and returns a fresh `CheckReport`.
    """

    def __init__(
        self,
        definitions: Sequence[SLODefinition],
        snapshot: MetricSnapshot,
        budget_threshold: float = DEFAULT_BUDGET_THRESHOLD,
        budget_warning: float = DEFAULT_BUDGET_WARNING,
        announce: Optional[Callable[[str], None]] = None,
    ):
        if budget_warning > budget_threshold:
            raise ValueError(
                f"Budget warning level ({budget_warning}%) is above the critical threshold "
                f"({budget_threshold}%)"
            )
        self.definitions = tuple(definitions)
        self.snapshot = snapshot
        self.budget_threshold = budget_threshold
        self.budget_warning = budget_warning
        # Optional callback for console section headers
        self._announce = announce

    def _section(self, title: str) -> None:
        if self._announce is not None:
            self._announce(title)

    def run_checks(self) -> CheckReport:
        """Run every SLO check, then every error budget check, in definition order."""
        acc = Accumulator()

        self._section("Running SLO Checks")
        for slo in self.definitions:
            acc, _ = check_slo(
                acc,
                slo.name,
                self.snapshot.value(slo.name),
                slo.target,
                slo.comparison,
            )

        self._section("Checking Error Budgets")
        for slo in self.definitions:
            acc, _ = check_error_budget(
                acc,
                slo.name,
                self.snapshot.consumption(slo.name),
                self.budget_threshold,
                self.budget_warning,
            )

        report = acc.to_report(source=self.snapshot.source)
        logger.info(
            f"SLO checks complete: {'passed' if report.passed else 'failed'} "
            f"({len(report.failed_slos)} failed SLOs, {len(report.critical_budgets)} critical budgets)"
        )
        return report
