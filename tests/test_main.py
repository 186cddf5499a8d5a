from __future__ import annotations

import logging

import pytest

from valloxmqtt import __main__ as cli
from valloxmqtt.config import BridgeConfig
from valloxmqtt.exceptions import ValloxBrokerError, ValloxDeviceError


@pytest.fixture
def log_setup(monkeypatch: pytest.MonkeyPatch) -> list[bool]:
    for name in ("VALLOX_SERIAL_DEVICE", "VALLOX_MQTT_URL", "VALLOX_DEBUG"):
        monkeypatch.delenv(name, raising=False)
    calls: list[bool] = []
    monkeypatch.setattr(cli, "configure_logging", calls.append)
    return calls


def test_missing_configuration_exits_with_1(log_setup: list[bool]) -> None:
    assert cli.main([]) == 1
    assert log_setup == [False]


@pytest.mark.parametrize("error", [ValloxBrokerError("refused"), ValloxDeviceError("no port")])
def test_fatal_transport_errors_exit_with_1(
    log_setup: list[bool],
    monkeypatch: pytest.MonkeyPatch,
    error: Exception,
) -> None:
    monkeypatch.setenv("VALLOX_SERIAL_DEVICE", "/dev/ttyUSB0")
    monkeypatch.setenv("VALLOX_MQTT_URL", "tcp://broker")

    async def fail(_config: BridgeConfig) -> None:
        raise error

    monkeypatch.setattr(cli, "_run", fail)

    assert cli.main([]) == 1


def test_debug_flag_overrides_environment(log_setup: list[bool], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VALLOX_SERIAL_DEVICE", "/dev/ttyUSB0")
    monkeypatch.setenv("VALLOX_MQTT_URL", "tcp://broker")
    seen: list[BridgeConfig] = []

    async def record(config: BridgeConfig) -> None:
        seen.append(config)

    monkeypatch.setattr(cli, "_run", record)

    assert cli.main(["--debug"]) == 0
    assert seen[0].debug is True
    assert log_setup == [True]


def test_stdout_filter_passes_only_records_below_warning() -> None:
    below = cli._BelowLevel(logging.WARNING)

    def record(level: int) -> logging.LogRecord:
        return logging.LogRecord("valloxmqtt", level, __file__, 1, "msg", None, None)

    assert below.filter(record(logging.DEBUG))
    assert below.filter(record(logging.INFO))
    assert not below.filter(record(logging.WARNING))
    assert not below.filter(record(logging.ERROR))
