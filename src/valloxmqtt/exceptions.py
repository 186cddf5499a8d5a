"""Custom exception hierarchy for valloxmqtt."""

from __future__ import annotations


class ValloxError(Exception):
    """Base exception for all valloxmqtt errors."""


class ValloxConfigError(ValloxError):
    """Invalid or missing configuration."""


class ValloxTransportError(ValloxError):
    """Device or broker transport failure."""


class ValloxDeviceError(ValloxTransportError):
    """Serial port could not be opened, read or written."""

    def __init__(self, message: str, *, port: str = "") -> None:
        self.port = port
        super().__init__(message)


class ValloxBrokerError(ValloxTransportError):
    """Broker connection failure or client not connected."""


class ValloxPublishError(ValloxBrokerError):
    """The MQTT client refused a publish request."""

    def __init__(self, message: str, *, topic: str = "", rc: int | None = None) -> None:
        self.topic = topic
        self.rc = rc
        super().__init__(message)


class ValloxCommandError(ValloxError, ValueError):
    """Inbound command payload could not be parsed.

    Raised at the broker boundary; the message is logged and dropped
    without touching coordinator state.
    """

    def __init__(self, message: str, *, payload: bytes = b"") -> None:
        self.payload = payload
        super().__init__(message)
