"""Typed models shared across the bridge."""

from valloxmqtt.models.discovery import Component, DiscoveryDescriptor, DiscoveryDevice
from valloxmqtt.models.register import RegisterEvent

__all__ = [
    "Component",
    "DiscoveryDescriptor",
    "DiscoveryDevice",
    "RegisterEvent",
]
