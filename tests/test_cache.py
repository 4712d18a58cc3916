import pytest

from json_variants import cache

from concurrent.futures import ThreadPoolExecutor


def test_forward_action():
    "Test that ForwardAction can replace a function and be updated."

    def func1(a, b):
        return a + b

    def func2(a, b):
        return a * b

    subj = cache.ForwardAction(func1)

    assert subj(3, 7) == 10

    subj.__call__ = func2

    assert subj(3, 7) == 21
    assert repr(subj).startswith("<fwd <function")


def test_simple_cache_get():
    "Test that SimpleCache handles a cache miss."

    subj = cache.SimpleCache()

    assert subj.get(verb="verb", typ=int) is None


@pytest.mark.filterwarnings("error")
def test_simple_cache_flight():
    "Test that the SimpleCache inflight -> complete mechanism produces a forward action."

    subj = cache.SimpleCache()

    subj.in_flight(verb="verb", typ=int)

    # A variant refers back to its base type before the base type's action is ready.
    actual = subj.get(verb="verb", typ=int)

    def action(value):
        return value * 10

    subj.complete(verb="verb", typ=int, action=action)

    assert actual(5) == 50
    assert subj.get(verb="verb", typ=int) is action


def test_simple_cache_de_flight():
    "Test that a failed lookup leaves no forward action behind."

    subj = cache.SimpleCache()

    forward = subj.in_flight(verb="verb", typ=int)
    subj.de_flight(verb="verb", typ=int, forward=forward)

    assert subj.get(verb="verb", typ=int) is None


def test_simple_cache_unfulfilled():
    "Test that calling a forward action that was never completed fails loudly."

    subj = cache.SimpleCache()
    forward = subj.in_flight(verb="verb", typ=int)

    with pytest.raises(TypeError, match="never fulfilled"):
        forward(1)


class NoHashMeta(type):
    __hash__ = None


class NoHash(metaclass=NoHashMeta):
    pass


def test_simple_cache_unhashable():
    "Test that SimpleCache warns on unhashable type instances."

    subj = cache.SimpleCache()

    with pytest.warns(cache.UnhashableType):
        subj.get(verb="verb", typ=NoHash)

    with pytest.warns(cache.UnhashableType):
        subj.complete(verb="verb", typ=NoHash, action=lambda val: val + 1)


class Key:
    "Stands in for an options object: hashed by identity."

    def __init__(self, value):
        self.value = value


def counting_cache():
    calls = []

    def compute(base, options):
        calls.append((base, options))
        return object()

    return cache.ConfigurationCache(compute), calls


def test_configuration_cache_default():
    "Test that the configuration without options is computed once."

    subj, calls = counting_cache()

    first = subj.get_or_compute(int)

    assert subj.get_or_compute(int) is first
    assert subj.get_or_compute(int, None) is first
    assert calls == [(int, None)]


def test_configuration_cache_same_options():
    "Test that the same options object hits the cache."

    subj, calls = counting_cache()
    key = Key(1)

    assert subj.get_or_compute(int, key) is subj.get_or_compute(int, key)
    assert len(calls) == 1


def test_configuration_cache_equal_options():
    "Test that distinct but equal options objects are distinct keys."

    subj, calls = counting_cache()

    first = subj.get_or_compute(int, Key(1))
    second = subj.get_or_compute(int, Key(1))

    assert first is not second
    assert len(calls) == 2


def test_configuration_cache_per_base():
    "Test that the base type is part of the key."

    subj, calls = counting_cache()
    key = Key(1)

    assert subj.get_or_compute(int, key) is not subj.get_or_compute(str, key)
    assert len(subj) == 2


def test_configuration_cache_failure_not_stored():
    "Test that a failed computation leaves nothing in the cache."

    def compute(base, options):
        raise ValueError("nope")

    subj = cache.ConfigurationCache(compute)

    with pytest.raises(ValueError):
        subj.get_or_compute(int)

    assert len(subj) == 0


def test_configuration_cache_threads():
    "Test that concurrent callers all get a computed configuration."

    subj, calls = counting_cache()
    key = Key(1)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(lambda _: subj.get_or_compute(int, key), range(64)))

    assert all(result is not None for result in results)
    assert len(subj) == 1
    assert subj.get_or_compute(int, key) in results
