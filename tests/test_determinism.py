from slo_gate.core.slo import SLOEvaluator, generate_report, render_markdown, to_document


def test_evaluator_determinism_repeat_5x(definitions, make_snapshot):
    snapshot = make_snapshot(values={"errorRate": 0.2}, consumption={"latency": 65})

    reports = [SLOEvaluator(definitions, snapshot).run_checks() for _ in range(5)]
    for r in reports[1:]:
        assert r == reports[0]
        assert generate_report(r, color=False) == generate_report(reports[0], color=False)


def test_document_determinism_ignoring_timestamp(definitions, healthy_snapshot):
    docs = [to_document(SLOEvaluator(definitions, healthy_snapshot).run_checks()) for _ in range(3)]
    for d in docs:
        d.pop("generatedAt")
    assert docs[0] == docs[1] == docs[2]


def test_markdown_contains_rows_in_check_order(definitions, healthy_snapshot):
    md = render_markdown(SLOEvaluator(definitions, healthy_snapshot).run_checks())
    positions = [md.index("| availability | 99.95"), md.index("| latency | 98.5"), md.index("| errorRate | 0.05")]
    assert positions == sorted(positions)
