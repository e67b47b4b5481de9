from pathfind.models import Prediction
from pathfind.utils.cache import ResultCache, cache_key


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _preds(label):
    return [Prediction(description=label, main_text=label, type="city")]


def test_key_is_case_insensitive_on_query_only():
    assert cache_key("PaRis", "city,country") == "paris_city,country"
    assert cache_key("paris", "city") != cache_key("paris", "city,country")


def test_fresh_entry_is_returned():
    clock = FakeClock()
    cache = ResultCache(clock=clock)
    cache.put("Paris", "city", _preds("Paris"))
    clock.now += 59.9
    assert cache.get("paris", "city") == _preds("Paris")


def test_expired_entry_is_ignored_not_deleted():
    clock = FakeClock()
    cache = ResultCache(clock=clock)
    cache.put("paris", "city", _preds("Paris"))
    clock.now += 60
    assert cache.get("paris", "city") is None
    assert "paris_city" in cache


def test_types_filter_is_part_of_key():
    cache = ResultCache(clock=FakeClock())
    cache.put("paris", "city", _preds("Paris"))
    assert cache.get("paris", "country") is None


def test_overwrite_refreshes_timestamp():
    clock = FakeClock()
    cache = ResultCache(clock=clock)
    cache.put("rome", "city", _preds("old"))
    clock.now += 50
    cache.put("rome", "city", _preds("new"))
    clock.now += 50
    assert cache.get("rome", "city") == _preds("new")


def test_fifty_first_key_evicts_oldest_inserted():
    cache = ResultCache(clock=FakeClock())
    for i in range(50):
        cache.put(f"q{i}", "city", _preds(str(i)))
    assert len(cache) == 50

    # reading the oldest key does not protect it: eviction is FIFO, not LRU
    assert cache.get("q0", "city") is not None
    cache.put("q50", "city", _preds("50"))

    assert len(cache) == 50
    assert cache.get("q0", "city") is None
    assert cache.get("q1", "city") is not None
    assert cache.get("q50", "city") is not None


def test_returned_list_is_a_copy():
    cache = ResultCache(clock=FakeClock())
    cache.put("oslo", "city", _preds("Oslo"))
    cache.get("oslo", "city").clear()
    assert cache.get("oslo", "city") == _preds("Oslo")


def test_clear():
    cache = ResultCache(clock=FakeClock())
    cache.put("oslo", "city", _preds("Oslo"))
    cache.clear()
    assert len(cache) == 0
