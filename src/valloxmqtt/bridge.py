"""Application wiring: broker, device and coordinator."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from valloxmqtt._mqtt import BrokerRuntime, parse_broker_url
from valloxmqtt.commands import parse_speed_payload, parse_status_payload
from valloxmqtt.config import BridgeConfig
from valloxmqtt.coordinator import Coordinator
from valloxmqtt.device.driver import DeviceDriver, SerialDevice
from valloxmqtt.discovery import build_catalog
from valloxmqtt.exceptions import ValloxCommandError
from valloxmqtt.topics import FAN_SPEED_COMMAND_TOPIC, STATUS_TOPIC

_logger = logging.getLogger(__name__)


class ValloxBridge:
    """Bridge between a Vallox bus and an MQTT broker.

    Usage::

        async with ValloxBridge(config) as bridge:
            await bridge.run()

    Entering connects to the broker; a connection failure propagates as
    :class:`~valloxmqtt.exceptions.ValloxBrokerError`. :meth:`run` announces
    discovery, opens the serial port and processes messages until cancelled.
    """

    def __init__(
        self,
        config: BridgeConfig,
        *,
        device: DeviceDriver | None = None,
        broker_factory: Callable[..., Any] = BrokerRuntime,
        logger: logging.Logger | None = None,
    ) -> None:
        self._config = config
        self._logger = logger or _logger
        self._device: DeviceDriver = device or SerialDevice(
            config.serial_device,
            address=config.panel_address,
            enable_write=config.enable_write,
            logger=self._logger,
        )
        self._broker_factory = broker_factory
        self._broker: Any = None
        self._coordinator: Coordinator | None = None
        self._loop: asyncio.AbstractEventLoop | None = None

    @property
    def coordinator(self) -> Coordinator | None:
        return self._coordinator

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ValloxBridge:
        self._loop = asyncio.get_running_loop()
        config = self._config
        broker = self._broker_factory(
            address=parse_broker_url(config.mqtt_url),
            on_message=self._on_broker_message,
            subscriptions=(STATUS_TOPIC, FAN_SPEED_COMMAND_TOPIC),
            client_id=config.mqtt_client_id,
            username=config.mqtt_user,
            password=config.mqtt_password,
            keepalive=config.mqtt_keepalive,
            logger=self._logger,
        )
        self._coordinator = Coordinator(
            device=self._device,
            broker=broker,
            loop=self._loop,
            enable_raw=config.enable_raw,
            catalog=build_catalog(config.device),
            logger=self._logger,
        )
        await self._loop.run_in_executor(None, broker.start)
        self._broker = broker
        return self

    async def __aexit__(self, *exc: Any) -> None:
        loop = self._loop or asyncio.get_running_loop()
        try:
            await loop.run_in_executor(None, self._device.close)
            if self._coordinator is not None:
                await self._coordinator.aclose()
        finally:
            broker = self._broker
            self._broker = None
            if broker is not None:
                await loop.run_in_executor(None, broker.stop)
            self._loop = None

    # ------------------------------------------------------------------
    # Running
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Announce, open the device and run the coordinator loop.

        Raises
        ------
        ValloxDeviceError
            The serial port cannot be opened.
        """
        coordinator = self._require_coordinator()
        loop = self._loop or asyncio.get_running_loop()
        coordinator.announce()
        await loop.run_in_executor(None, self._device.open, coordinator.submit_device_event)
        await coordinator.run()

    def _on_broker_message(self, topic: str, payload: bytes) -> None:
        coordinator = self._require_coordinator()
        if topic == STATUS_TOPIC:
            status = parse_status_payload(payload)
            coordinator.submit_consumer_status(status, payload.decode("utf-8", errors="replace"))
            return
        if topic == FAN_SPEED_COMMAND_TOPIC:
            try:
                speed = parse_speed_payload(payload)
            except ValloxCommandError as exc:
                self._logger.warning("Dropping speed command: %s", exc)
                return
            coordinator.submit_speed_request(speed)
            return
        self._logger.debug("Ignoring message on unexpected topic %s", topic)

    def _require_coordinator(self) -> Coordinator:
        if self._coordinator is None:
            raise RuntimeError("ValloxBridge is not started; use 'async with ValloxBridge(...)'")
        return self._coordinator
