from __future__ import annotations

from valloxmqtt.models.register import RegisterEvent
from valloxmqtt.state.cache import ValueCache


class _Clock:
    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _event(register: int, raw: int) -> RegisterEvent:
    return RegisterEvent(register=register, raw_value=raw, value=raw)


def test_first_observation_is_published() -> None:
    cache = ValueCache(clock=_Clock())

    assert cache.should_publish(_event(0x2B, 10)) is True
    assert len(cache) == 0


def test_identical_raw_value_within_window_is_duplicate() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock)
    cache.record(_event(0x2B, 10))

    clock.now += 899.0
    assert cache.should_publish(_event(0x2B, 10)) is False


def test_changed_raw_value_is_published() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock)
    cache.record(_event(0x2B, 10))

    clock.now += 1.0
    assert cache.should_publish(_event(0x2B, 11)) is True


def test_identical_value_after_window_is_published_again() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock)
    cache.record(_event(0x2B, 10))

    clock.now += 901.0
    assert cache.should_publish(_event(0x2B, 10)) is True


def test_duplicate_check_compares_raw_value_only() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock)
    cache.record(RegisterEvent(register=0x32, raw_value=100, value=0))

    assert cache.should_publish(RegisterEvent(register=0x32, raw_value=100, value=99)) is False


def test_record_overwrites_entry() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock)
    cache.record(_event(0x29, 0x01))

    clock.now += 5.0
    entry = cache.record(_event(0x29, 0x03))

    assert 0x29 in cache
    assert cache.get(0x29) == entry
    assert entry.observed_at == clock.now
    assert entry.event.raw_value == 0x03
    assert len(cache) == 1


def test_staleness_and_age() -> None:
    clock = _Clock()
    cache = ValueCache(clock=clock, freshness_window=60.0)

    assert cache.is_stale(0x29) is False
    assert cache.age(0x29) is None

    cache.record(_event(0x29, 0x01))
    clock.now += 60.0
    assert cache.is_stale(0x29) is False
    assert cache.age(0x29) == 60.0

    clock.now += 1.0
    assert cache.is_stale(0x29) is True
