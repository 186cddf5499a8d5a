from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any

import pytest

from valloxmqtt._mqtt import BrokerAddress
from valloxmqtt.bridge import ValloxBridge
from valloxmqtt.config import BridgeConfig, DeviceIdentity
from valloxmqtt.discovery import build_catalog
from valloxmqtt.exceptions import ValloxBrokerError, ValloxDeviceError
from valloxmqtt.models.register import RegisterEvent
from valloxmqtt.topics import FAN_SPEED_COMMAND_TOPIC, STATUS_TOPIC


class _FakeDevice:
    def __init__(self, *, open_error: Exception | None = None) -> None:
        self.open_error = open_error
        self.on_event: Callable[[RegisterEvent], None] | None = None
        self.closed = False
        self.writes: list[int] = []

    def open(self, on_event: Callable[[RegisterEvent], None]) -> None:
        if self.open_error is not None:
            raise self.open_error
        self.on_event = on_event

    def close(self) -> None:
        self.closed = True

    def is_addressed_to_me(self, event: RegisterEvent) -> bool:
        return True

    def write_speed(self, speed: int) -> None:
        self.writes.append(speed)

    def query_register(self, register: int) -> None:
        pass


class _FakeBroker:
    def __init__(self, *, start_error: Exception | None = None, **kwargs: Any) -> None:
        self.kwargs = kwargs
        self.start_error = start_error
        self.started = False
        self.stopped = False
        self.published: list[tuple[str, Any]] = []

    def start(self) -> None:
        if self.start_error is not None:
            raise self.start_error
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def publish(self, topic: str, payload: str | bytes) -> None:
        self.published.append((topic, payload))


def _config(**overrides: Any) -> BridgeConfig:
    values: dict[str, Any] = {
        "serial_device": "/dev/ttyUSB0",
        "mqtt_url": "tcp://broker.local:1884",
        "mqtt_user": "bridge",
        "mqtt_password": "secret",
        "device": DeviceIdentity(identifier="ahu"),
    }
    values.update(overrides)
    return BridgeConfig(**values)


def _bridge(
    device: _FakeDevice,
    brokers: list[_FakeBroker],
    *,
    start_error: Exception | None = None,
    **overrides: Any,
) -> ValloxBridge:
    def factory(**kwargs: Any) -> _FakeBroker:
        broker = _FakeBroker(start_error=start_error, **kwargs)
        brokers.append(broker)
        return broker

    return ValloxBridge(_config(**overrides), device=device, broker_factory=factory)


@pytest.mark.asyncio
async def test_context_manager_starts_and_stops_broker() -> None:
    device = _FakeDevice()
    brokers: list[_FakeBroker] = []

    async with _bridge(device, brokers) as bridge:
        assert bridge.coordinator is not None
        broker = brokers[0]
        assert broker.started
        assert broker.kwargs["address"] == BrokerAddress("broker.local", 1884, tls=False)
        assert broker.kwargs["subscriptions"] == (STATUS_TOPIC, FAN_SPEED_COMMAND_TOPIC)
        assert broker.kwargs["username"] == "bridge"
        assert broker.kwargs["password"] == "secret"
        assert broker.kwargs["client_id"] == "vallox"
        assert broker.kwargs["keepalive"] == 150

    assert broker.stopped
    assert device.closed


@pytest.mark.asyncio
async def test_broker_connect_failure_propagates() -> None:
    brokers: list[_FakeBroker] = []
    bridge = _bridge(_FakeDevice(), brokers, start_error=ValloxBrokerError("refused"))

    with pytest.raises(ValloxBrokerError):
        async with bridge:
            pass  # pragma: no cover


@pytest.mark.asyncio
async def test_run_announces_then_opens_device() -> None:
    device = _FakeDevice()
    brokers: list[_FakeBroker] = []

    async with _bridge(device, brokers) as bridge:
        runner = asyncio.create_task(bridge.run())
        for _ in range(100):
            if device.on_event is not None:
                break
            await asyncio.sleep(0.01)
        runner.cancel()
        await asyncio.gather(runner, return_exceptions=True)

        assert bridge.coordinator is not None
        await bridge.coordinator.flush()
        assert device.on_event == bridge.coordinator.submit_device_event

    catalog = build_catalog(DeviceIdentity(identifier="ahu"))
    assert len(brokers[0].published) == len(catalog)
    assert all(b'"identifiers":["ahu"]' in payload for _, payload in brokers[0].published)


@pytest.mark.asyncio
async def test_device_open_failure_is_fatal() -> None:
    device = _FakeDevice(open_error=ValloxDeviceError("no such port", port="/dev/ttyUSB0"))
    brokers: list[_FakeBroker] = []

    with pytest.raises(ValloxDeviceError):
        async with _bridge(device, brokers) as bridge:
            await bridge.run()
    assert brokers[0].stopped


@pytest.mark.asyncio
async def test_speed_command_is_queued() -> None:
    brokers: list[_FakeBroker] = []

    async with _bridge(_FakeDevice(), brokers) as bridge:
        coordinator = bridge.coordinator
        assert coordinator is not None

        bridge._on_broker_message(FAN_SPEED_COMMAND_TOPIC, b"0x03")  # type: ignore[attr-defined]
        await coordinator.flush()

        assert coordinator.process_pending() == 1
        assert coordinator.speed.state.requested_speed == 3


@pytest.mark.asyncio
async def test_malformed_speed_command_is_dropped(caplog: pytest.LogCaptureFixture) -> None:
    brokers: list[_FakeBroker] = []

    async with _bridge(_FakeDevice(), brokers) as bridge:
        coordinator = bridge.coordinator
        assert coordinator is not None
        before = coordinator.speed.state

        bridge._on_broker_message(FAN_SPEED_COMMAND_TOPIC, b"fast")  # type: ignore[attr-defined]
        await coordinator.flush()

        assert coordinator.process_pending() == 0
        assert coordinator.speed.state == before
    assert "Dropping speed command" in caplog.text


@pytest.mark.asyncio
async def test_online_status_reannounces() -> None:
    brokers: list[_FakeBroker] = []

    async with _bridge(_FakeDevice(), brokers) as bridge:
        coordinator = bridge.coordinator
        assert coordinator is not None

        bridge._on_broker_message(STATUS_TOPIC, b"online")  # type: ignore[attr-defined]
        bridge._on_broker_message("vallox/unexpected", b"1")  # type: ignore[attr-defined]
        await coordinator.flush()
        assert coordinator.process_pending() == 1
        await coordinator.flush()

    assert len(brokers[0].published) == len(build_catalog())
