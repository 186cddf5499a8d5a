"""Fan speed negotiation.

A small state machine that debounces user speed requests and decides
when a write to the device is actually needed::

    IDLE --request()--> PENDING_CONFIRM --confirm(requested)--> IDLE
                        PENDING_CONFIRM --attempt_send() is SATISFIED--> IDLE

``confirm`` is driven by telemetry for the current fan speed register and
is the only way externally made speed changes become visible. A write
optimistically marks the requested speed as confirmed; the device's
answer to the follow-up query either reaffirms or corrects it.
"""

from __future__ import annotations

import dataclasses
import math
import time
from collections.abc import Callable
from enum import StrEnum

from valloxmqtt._constants import CONFIRMATION_TTL, DEBOUNCE_WINDOW
from valloxmqtt.state.policy import has_same_recent_speed, is_debounced, needs_write


class SpeedPhase(StrEnum):
    IDLE = "idle"
    PENDING_CONFIRM = "pending_confirm"


class SendDecision(StrEnum):
    DEFER = "defer"
    WRITE = "write"
    SATISFIED = "satisfied"


@dataclasses.dataclass(frozen=True)
class SpeedState:
    """Snapshot of the negotiation.

    Timestamps are monotonic seconds; ``-inf`` means "never".
    """

    requested_speed: int = 0
    requested_at: float = -math.inf
    confirmed_speed: int = 0
    confirmed_at: float = -math.inf


class SpeedCoordinator:
    def __init__(
        self,
        *,
        clock: Callable[[], float] = time.monotonic,
        debounce_window: float = DEBOUNCE_WINDOW,
        confirmation_ttl: float = CONFIRMATION_TTL,
    ) -> None:
        self._clock = clock
        self._debounce_window = debounce_window
        self._confirmation_ttl = confirmation_ttl
        self._state = SpeedState()
        self._phase = SpeedPhase.IDLE

    @property
    def state(self) -> SpeedState:
        return self._state

    @property
    def phase(self) -> SpeedPhase:
        return self._phase

    def request(self, speed: int) -> bool:
        """Register a user request for *speed*.

        Returns ``False`` when the device reported exactly this speed within
        the confirmation TTL; nothing changes in that case. Otherwise the
        request replaces any earlier one and a send attempt should follow.
        """
        now = self._clock()
        if has_same_recent_speed(
            confirmed_speed=self._state.confirmed_speed,
            confirmed_at=self._state.confirmed_at,
            requested=speed,
            now=now,
            confirmation_ttl=self._confirmation_ttl,
        ):
            return False
        self._state = dataclasses.replace(self._state, requested_speed=speed, requested_at=now)
        self._phase = SpeedPhase.PENDING_CONFIRM
        return True

    def attempt_send(self) -> SendDecision:
        """Decide what a send attempt should do right now.

        ``DEFER`` leaves the state untouched. ``WRITE`` marks the requested
        speed as confirmed as of now; the caller must write
        :attr:`SpeedState.requested_speed` to the device. ``SATISFIED``
        settles the negotiation back to :attr:`SpeedPhase.IDLE`.
        """
        now = self._clock()
        state = self._state
        if state.requested_at == -math.inf:
            # nothing was ever requested
            return SendDecision.SATISFIED
        if is_debounced(requested_at=state.requested_at, now=now, debounce_window=self._debounce_window):
            return SendDecision.DEFER
        if needs_write(
            requested_speed=state.requested_speed,
            confirmed_speed=state.confirmed_speed,
            confirmed_at=state.confirmed_at,
            now=now,
            confirmation_ttl=self._confirmation_ttl,
        ):
            self._state = dataclasses.replace(state, confirmed_speed=state.requested_speed, confirmed_at=now)
            return SendDecision.WRITE
        self._phase = SpeedPhase.IDLE
        return SendDecision.SATISFIED

    def confirm(self, speed: int, observed_at: float | None = None) -> None:
        """Record the speed reported by the device."""
        at = self._clock() if observed_at is None else observed_at
        self._state = dataclasses.replace(self._state, confirmed_speed=speed, confirmed_at=at)
        if speed == self._state.requested_speed:
            self._phase = SpeedPhase.IDLE
