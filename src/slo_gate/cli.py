"""Command-line interface for the SLO release gate.

Evaluates SLO readings and error budgets, prints the report, writes
REPORTS/slo-check-results.json and REPORTS/slo-check-report.md.

Exit codes: 0 release approved, 1 release blocked, 2 invalid input,
3 unexpected failure.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from slo_gate.core import metrics
from slo_gate.core.config import settings
from slo_gate.core.slo import (
    SLOEvaluator,
    SnapshotError,
    default_definitions,
    default_snapshot,
    generate_report,
    load_snapshot,
    save_results,
    to_document,
)
from slo_gate.core.slo.report import paint, section

logger = logging.getLogger("slo_gate.cli")

EXIT_PASSED = 0
EXIT_BLOCKED = 1
EXIT_INVALID_INPUT = 2
EXIT_ERROR = 3


def _configure_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def cmd_check(args: argparse.Namespace) -> int:
    text = args.format == "text"
    color = text and settings.SLO_COLOR and not args.no_color

    def announce(title: str) -> None:
        if text:
            print("\n" + section(f"🔍 {title}...", "blue", color))

    if text:
        print(paint("🎯 SLO Check Starting...", "bold", color))

    metrics_file = args.metrics or settings.metrics_file
    if metrics_file:
        definitions, snapshot = load_snapshot(metrics_file)
    else:
        definitions, snapshot = default_definitions(), default_snapshot()

    threshold = args.threshold if args.threshold is not None else settings.SLO_BUDGET_CRITICAL_PCT
    evaluator = SLOEvaluator(
        definitions,
        snapshot,
        budget_threshold=threshold,
        budget_warning=min(settings.SLO_BUDGET_WARNING_PCT, threshold),
        announce=announce,
    )
    report = evaluator.run_checks()

    if text:
        print(generate_report(report, color=color))
    else:
        print(json.dumps(to_document(report), ensure_ascii=False))

    if not args.no_save:
        reports_dir = args.reports_dir or settings.SLO_REPORTS_DIR
        results_path, report_path = save_results(report, reports_dir)
        metrics.init_metrics()
        metrics.record_report(report)
        prom_path = metrics.write_metrics(reports_dir)
        if text:
            print(paint(f"\n📁 Results saved to: {results_path}", "blue", color))
            print(paint(f"📁 Report saved to: {report_path}", "blue", color))
            if prom_path is not None:
                print(paint(f"📁 Metrics saved to: {prom_path}", "blue", color))

    return EXIT_PASSED if report.passed else EXIT_BLOCKED


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slo-check", description="SLO compliance and error budget release gate")
    p.add_argument("--format", choices=["text", "json"], default="text")
    p.add_argument("--metrics", help="JSON metric snapshot file (defaults to built-in readings)")
    p.add_argument("--reports-dir", dest="reports_dir", help="Directory for the JSON and Markdown reports")
    p.add_argument(
        "--threshold",
        type=float,
        help="Error budget consumption (percent) at which a budget turns CRITICAL",
    )
    p.add_argument("--no-save", dest="no_save", action="store_true", help="Print the report without writing files")
    p.add_argument("--no-color", dest="no_color", action="store_true")
    p.set_defaults(func=cmd_check)
    return p


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging()
    try:
        code = args.func(args)
        sys.exit(code)
    except SystemExit as e:
        raise e
    except (SnapshotError, ValueError) as e:
        print(f"SLO check failed: {e}", file=sys.stderr)
        sys.exit(EXIT_INVALID_INPUT)
    except Exception as e:
        logger.exception("SLO check aborted")
        print(f"SLO check failed: {e}", file=sys.stderr)
        sys.exit(EXIT_ERROR)


if __name__ == "__main__":
    main()
