"""Tests for the per-engine step cache."""

from stepviz.engine.cache import StepCache


def test_get_or_compute_runs_once():
    cache = StepCache()
    calls = []

    def compute(index):
        calls.append(index)
        return f"bundle-{index}"

    assert cache.get_or_compute(3, compute) == "bundle-3"
    assert cache.get_or_compute(3, compute) == "bundle-3"
    assert calls == [3]
    assert cache.hits == 1
    assert cache.misses == 1


def test_membership_and_clear():
    cache = StepCache()
    cache.get_or_compute(0, lambda i: "a")
    cache.get_or_compute(2, lambda i: "b")
    assert 0 in cache
    assert 1 not in cache
    assert len(cache) == 2
    assert list(cache) == [0, 2]
    assert cache.get(2) == "b"
    cache.clear()
    assert len(cache) == 0
    assert cache.get(2) is None
