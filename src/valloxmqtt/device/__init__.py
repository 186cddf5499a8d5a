"""Vallox RS-485 device access.

The coordinator only depends on :class:`DeviceDriver`; :class:`SerialDevice`
is the production implementation on top of pyserial.
"""

from valloxmqtt.device.driver import DeviceDriver, SerialDevice

__all__ = ["DeviceDriver", "SerialDevice"]
