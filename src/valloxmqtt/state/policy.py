"""Timing decisions for caching and speed negotiation.

Pure functions of timestamps and values; all clocks are monotonic seconds.
"""

from __future__ import annotations

from valloxmqtt.models.register import RegisterEvent


def is_older_than(observed_at: float, now: float, window: float) -> bool:
    return now - observed_at > window


def is_duplicate(
    *,
    cached_event: RegisterEvent | None,
    cached_at: float | None,
    incoming: RegisterEvent,
    now: float,
    freshness_window: float,
) -> bool:
    """An observation is a duplicate when the same raw byte was seen recently.

    Only the raw value is compared; decoded values are derived from it.
    """
    if cached_event is None or cached_at is None:
        return False
    if cached_event.raw_value != incoming.raw_value:
        return False
    return now - cached_at < freshness_window


def has_same_recent_speed(
    *,
    confirmed_speed: int,
    confirmed_at: float,
    requested: int,
    now: float,
    confirmation_ttl: float,
) -> bool:
    """Whether the device reported *requested* recently enough to skip the request."""
    return confirmed_speed == requested and now - confirmed_at < confirmation_ttl


def is_debounced(*, requested_at: float, now: float, debounce_window: float) -> bool:
    """Whether the latest request is still too young to be written."""
    return now - requested_at < debounce_window


def needs_write(
    *,
    requested_speed: int,
    confirmed_speed: int,
    confirmed_at: float,
    now: float,
    confirmation_ttl: float,
) -> bool:
    """A write is needed when the device disagrees or its confirmation went stale."""
    return confirmed_speed != requested_speed or now - confirmed_at > confirmation_ttl
