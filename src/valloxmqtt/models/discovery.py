"""Discovery descriptor models.

Descriptors are serialized with sorted keys and without unset fields so
repeated announcements are byte-identical.
"""

from __future__ import annotations

import json
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

from valloxmqtt.config import DeviceIdentity


class Component(StrEnum):
    BINARY_SENSOR = "binary_sensor"
    SENSOR = "sensor"
    NUMBER = "number"


class DiscoveryDevice(BaseModel):
    """Device block embedded in every descriptor."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    identifiers: tuple[str, ...]
    manufacturer: str
    name: str
    model: str

    @classmethod
    def from_identity(cls, identity: DeviceIdentity) -> DiscoveryDevice:
        return cls(
            identifiers=(identity.identifier,),
            manufacturer=identity.manufacturer,
            name=identity.name,
            model=identity.model,
        )


class DiscoveryDescriptor(BaseModel):
    """One monitored quantity advertised to the downstream consumer."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    component: Component = Field(..., exclude=True)
    unique_id: str
    name: str
    device: DiscoveryDevice
    state_topic: str
    device_class: str | None = None
    icon: str | None = None
    payload_on: str | None = None
    payload_off: str | None = None
    command_topic: str | None = None
    min: int | None = None
    max: int | None = None
    mode: str | None = None

    def config_topic(self, prefix: str) -> str:
        return f"{prefix}/{self.component}/{self.unique_id}/config"

    def to_payload(self) -> bytes:
        document = self.model_dump(mode="json", exclude_none=True)
        return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
