"""Memoized constructor tests.

Validates instance reuse for structurally equal arguments, cache isolation,
unhashable bypass, statistics, and concurrent first use.
"""

import threading
from functools import partial

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from tagformat.runtime import NumberFormat, PluralFormat
from tagformat.runtime.cache import MemoizedConstructor, memoize_constructor
from tagformat.state import FormatFactories


class Recorder:
    """Constructor double that records its arguments."""

    instances = 0

    def __init__(self, *args: object, **kwargs: object) -> None:
        type(self).instances += 1
        self.args = args
        self.kwargs = kwargs


class TestInstanceReuse:
    """Structurally equal arguments return the identical instance."""

    def test_same_arguments_same_instance(self) -> None:
        get_number_format = memoize_constructor(NumberFormat)
        first = get_number_format("en", style="percent")
        second = get_number_format("en", style="percent")
        assert first is second

    def test_different_arguments_distinct_instances(self) -> None:
        get_number_format = memoize_constructor(NumberFormat)
        assert get_number_format("en") is not get_number_format("de")
        assert get_number_format("en") is not get_number_format("en", style="percent")

    def test_keyword_order_irrelevant(self) -> None:
        make = memoize_constructor(Recorder)
        first = make("en", a=1, b=2)
        second = make("en", b=2, a=1)
        assert first is second

    def test_nested_mappings_compared_structurally(self) -> None:
        """Equal but distinct dicts share one cache entry."""
        make = memoize_constructor(Recorder)
        first = make("en", {"number": {"pct": {"style": "percent"}}})
        second = make("en", {"number": {"pct": {"style": "percent"}}})
        assert first is second

    def test_lists_and_tuples_share_key(self) -> None:
        make = memoize_constructor(Recorder)
        assert make([1, 2]) is make((1, 2))

    @given(
        args=st.lists(st.one_of(st.integers(), st.text(max_size=5), st.none()), max_size=4),
        kwargs=st.dictionaries(
            st.text(alphabet="abcdef", min_size=1, max_size=3),
            st.one_of(st.integers(), st.booleans(), st.text(max_size=5)),
            max_size=4,
        ),
    )
    def test_repeated_calls_reuse(self, args: list[object], kwargs: dict[str, object]) -> None:
        """Property: a second call with equal arguments never constructs."""
        make = memoize_constructor(Recorder)
        first = make(*args, **kwargs)
        second = make(*list(args), **dict(reversed(list(kwargs.items()))))
        assert first is second
        assert make.get_stats()["misses"] == 1
        assert make.get_stats()["hits"] == 1

    @pytest.mark.fuzz
    @settings(max_examples=1000)
    @given(
        options=st.recursive(
            st.one_of(st.integers(), st.text(max_size=5), st.none()),
            lambda children: st.one_of(
                st.lists(children, max_size=3),
                st.dictionaries(st.text(max_size=3), children, max_size=3),
            ),
            max_leaves=20,
        )
    )
    def test_nested_options_rebuilt_in_reverse_order(self, options: object) -> None:
        """Property: a structurally equal rebuild of nested options is a hit."""
        make = memoize_constructor(Recorder)
        first = make("en", formats=options)
        second = make("en", formats=_rebuild_reversed(options))
        assert first is second
        assert make.get_stats()["misses"] == 1


def _rebuild_reversed(value: object) -> object:
    """Deep copy with every mapping's insertion order reversed."""
    if isinstance(value, dict):
        return {key: _rebuild_reversed(value[key]) for key in reversed(list(value))}
    if isinstance(value, list):
        return [_rebuild_reversed(item) for item in value]
    return value


class TestUnhashableArguments:
    """Arguments that cannot be keyed bypass the cache."""

    def test_unhashable_value_constructs_fresh(self) -> None:
        make = memoize_constructor(Recorder)
        opaque = bytearray(b"x")
        first = make(opaque)
        second = make(opaque)

        assert first is not second
        stats = make.get_stats()
        assert stats["unhashable_skips"] == 2
        assert stats["size"] == 0

    def test_unorderable_mapping_keys_bypass(self) -> None:
        """Mixed-type mapping keys cannot be sorted into a key."""
        make = memoize_constructor(Recorder)
        make({1: "a", "b": 2})
        assert make.get_stats()["unhashable_skips"] == 1


class TestStatistics:
    """Cache metrics and maintenance."""

    def test_hits_misses_and_rate(self) -> None:
        make = memoize_constructor(Recorder)
        make("en")
        make("en")
        make("de")
        make("en")

        stats = make.get_stats()
        assert stats["size"] == 2
        assert stats["hits"] == 2
        assert stats["misses"] == 2
        assert stats["hit_rate"] == 50.0
        assert len(make) == 2

    def test_clear_resets(self) -> None:
        make = memoize_constructor(Recorder)
        first = make("en")
        make.clear()

        assert make.get_stats() == {
            "size": 0,
            "hits": 0,
            "misses": 0,
            "hit_rate": 0.0,
            "unhashable_skips": 0,
        }
        assert make("en") is not first

    def test_repr_and_name(self) -> None:
        make = memoize_constructor(NumberFormat)
        make("en")
        assert make.name == "NumberFormat"
        assert repr(make) == "MemoizedConstructor(NumberFormat, size=1)"
        assert make.constructor is NumberFormat

    def test_non_callable_rejected(self) -> None:
        with pytest.raises(TypeError, match="callable"):
            MemoizedConstructor(42)  # type: ignore[arg-type]


class TestConcurrentFirstUse:
    """Racing first uses settle on one instance per key."""

    def test_threads_observe_one_instance(self) -> None:
        make = memoize_constructor(Recorder)
        barrier = threading.Barrier(8)
        results: list[object] = []
        lock = threading.Lock()

        def worker() -> None:
            barrier.wait()
            instance = make("en", style="decimal")
            with lock:
                results.append(instance)

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(results) == 8
        assert all(result is results[0] for result in results)
        assert make("en", style="decimal") is results[0]
        assert len(make) == 1


class TestFormatFactories:
    """Per-kind factory records."""

    def test_create_gives_fresh_caches(self) -> None:
        first = FormatFactories.create()
        second = FormatFactories.create()
        assert first.number is not second.number
        assert first.number("en") is not second.number("en")

    def test_replace_memoizes_raw_constructors(self) -> None:
        factories = FormatFactories.create()
        replaced = factories.replace(plural=partial(PluralFormat, style="ordinal"))

        assert isinstance(replaced.plural, MemoizedConstructor)
        assert replaced.plural("en") is replaced.plural("en")
        assert replaced.plural("en").style == "ordinal"
        assert replaced.number is factories.number

    def test_replace_keeps_memoized_constructors(self) -> None:
        shared = memoize_constructor(NumberFormat)
        replaced = FormatFactories.create().replace(number=shared)
        assert replaced.number is shared

    def test_replace_unknown_kind(self) -> None:
        with pytest.raises(TypeError, match="currency"):
            FormatFactories.create().replace(currency=NumberFormat)

    def test_stats_per_kind(self) -> None:
        factories = FormatFactories.create()
        factories.number("en")
        stats = factories.get_stats()
        assert set(stats) == {"date_time", "number", "message", "relative", "plural"}
        assert stats["number"]["size"] == 1
