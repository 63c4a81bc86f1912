from stored.metrics import metrics


def test_counters():
    metrics.reset()

    metrics.inc("a")
    metrics.inc("a", 2)

    assert metrics.snapshot() == {"counters": {"a": 3}}
    assert metrics.count("a") == 3
    assert metrics.count("missing") == 0

    metrics.reset()
    assert metrics.snapshot() == {"counters": {}}
