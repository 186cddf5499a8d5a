"""Messages accepted by the coordinator loop.

Every producer (serial reader, broker callbacks, retry timers) talks to
the loop exclusively through these messages.
"""

from __future__ import annotations

from dataclasses import dataclass

from valloxmqtt.commands import ConsumerStatus
from valloxmqtt.models.register import RegisterEvent


@dataclass(frozen=True, slots=True)
class DeviceEventMessage:
    event: RegisterEvent


@dataclass(frozen=True, slots=True)
class SpeedRequestMessage:
    speed: int


@dataclass(frozen=True, slots=True)
class SpeedSendMessage:
    """A (possibly deferred) attempt to write the requested speed."""


@dataclass(frozen=True, slots=True)
class ConsumerStatusMessage:
    status: ConsumerStatus
    payload: str = ""


LoopMessage = DeviceEventMessage | SpeedRequestMessage | SpeedSendMessage | ConsumerStatusMessage
