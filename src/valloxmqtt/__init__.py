"""valloxmqtt - Bridge a Vallox ventilation unit's RS-485 bus to MQTT."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("vallox-mqtt")
except PackageNotFoundError:
    __version__ = "0+local"
from valloxmqtt.bridge import ValloxBridge
from valloxmqtt.commands import ConsumerStatus, parse_speed_payload, parse_status_payload
from valloxmqtt.config import BridgeConfig, DeviceIdentity
from valloxmqtt.coordinator import Coordinator
from valloxmqtt.exceptions import (
    ValloxBrokerError,
    ValloxCommandError,
    ValloxConfigError,
    ValloxDeviceError,
    ValloxError,
    ValloxPublishError,
    ValloxTransportError,
)
from valloxmqtt.models import Component, DiscoveryDescriptor, DiscoveryDevice, RegisterEvent

__all__ = [
    "BridgeConfig",
    "Component",
    "ConsumerStatus",
    "Coordinator",
    "DeviceIdentity",
    "DiscoveryDescriptor",
    "DiscoveryDevice",
    "RegisterEvent",
    "ValloxBridge",
    "ValloxBrokerError",
    "ValloxCommandError",
    "ValloxConfigError",
    "ValloxDeviceError",
    "ValloxError",
    "ValloxPublishError",
    "ValloxTransportError",
    "__version__",
    "parse_speed_payload",
    "parse_status_payload",
]
