from attendance_engine.reconciliation.batch import run_isolated


def _work(n):
    if n % 3 == 0:
        raise ValueError(f"bad item {n}")
    return n * 10


def test_failures_are_isolated_and_order_is_kept():
    outcome = run_isolated(range(1, 8), _work, max_workers=4)

    assert outcome.succeeded == [(1, 10), (2, 20), (4, 40), (5, 50), (7, 70)]
    assert [(f.item, f.error) for f in outcome.failed] == [(3, "bad item 3"), (6, "bad item 6")]


def test_sequential_run_matches_pooled_run():
    assert run_isolated(range(1, 8), _work).succeeded == run_isolated(range(1, 8), _work, max_workers=3).succeeded


def test_empty_batch():
    outcome = run_isolated([], _work, max_workers=4)

    assert outcome.succeeded == [] and outcome.failed == []
