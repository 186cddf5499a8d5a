"""Serial-port driver for the Vallox RS-485 bus."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import Any, Protocol

import serial

from valloxmqtt._constants import (
    BAUDRATE,
    DEFAULT_PANEL_ADDRESS,
    SERIAL_READ_SIZE,
    SERIAL_READ_TIMEOUT,
    SERIAL_REOPEN_DELAY,
)
from valloxmqtt.device.protocol import (
    MAINBOARDS,
    PANELS,
    FrameDecoder,
    decode_frame,
    encode_frame,
    encode_query,
    speed_to_raw,
)
from valloxmqtt.device.registers import REGISTER_CURRENT_FAN_SPEED
from valloxmqtt.exceptions import ValloxDeviceError
from valloxmqtt.models.register import RegisterEvent

_logger = logging.getLogger(__name__)


class DeviceDriver(Protocol):
    """Structural device interface used by the coordinator.

    Writes are fire-and-forget: confirmation only ever arrives as a later
    :class:`RegisterEvent`.
    """

    def open(self, on_event: Callable[[RegisterEvent], None]) -> None: ...

    def close(self) -> None: ...

    def is_addressed_to_me(self, event: RegisterEvent) -> bool: ...

    def write_speed(self, speed: int) -> None: ...

    def query_register(self, register: int) -> None: ...


class SerialDevice:
    """Listens on the bus as a remote panel and emits register events.

    The reader runs on a daemon thread; *on_event* is called from that
    thread and must hand the event over to the event loop itself.
    """

    def __init__(
        self,
        port: str,
        *,
        address: int = DEFAULT_PANEL_ADDRESS,
        enable_write: bool = False,
        baudrate: int = BAUDRATE,
        reopen_delay: float = SERIAL_REOPEN_DELAY,
        serial_factory: Callable[..., Any] = serial.Serial,
        logger: logging.Logger | None = None,
    ) -> None:
        self._port = port
        self._address = address
        self._enable_write = enable_write
        self._baudrate = baudrate
        self._reopen_delay = reopen_delay
        self._serial_factory = serial_factory
        self._logger = logger or _logger
        self._serial: Any = None
        self._write_lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self._on_event: Callable[[RegisterEvent], None] | None = None

    @property
    def address(self) -> int:
        return self._address

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _open_port(self) -> Any:
        try:
            return self._serial_factory(
                self._port,
                baudrate=self._baudrate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                timeout=SERIAL_READ_TIMEOUT,
            )
        except (serial.SerialException, OSError) as exc:
            raise ValloxDeviceError(f"Cannot open serial port {self._port}: {exc}", port=self._port) from exc

    def open(self, on_event: Callable[[RegisterEvent], None]) -> None:
        """Open the serial port and start the reader thread.

        Raises
        ------
        ValloxDeviceError
            The port cannot be opened.
        """
        self.close()
        self._logger.info(
            "Connecting to Vallox serial port %s address=%#x write enabled=%s",
            self._port,
            self._address,
            self._enable_write,
        )
        self._serial = self._open_port()
        self._on_event = on_event
        self._stop.clear()
        self._thread = threading.Thread(target=self._read_loop, name="vallox-serial", daemon=True)
        self._thread.start()

    def close(self) -> None:
        """Stop the reader thread and close the port."""
        self._stop.set()
        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=SERIAL_READ_TIMEOUT * 4)
        port = self._serial
        self._serial = None
        if port is not None:
            try:
                port.close()
            except (serial.SerialException, OSError):
                self._logger.debug("Serial port close failed", exc_info=True)

    def _read_loop(self) -> None:
        decoder = FrameDecoder()
        while not self._stop.is_set():
            port = self._serial
            if port is None:
                if not self._reopen():
                    continue
                port = self._serial
            try:
                chunk = port.read(SERIAL_READ_SIZE)
            except (serial.SerialException, OSError) as exc:
                self._logger.error("Reading serial port %s failed: %s", self._port, exc)
                self._drop_port()
                continue
            if not chunk:
                continue
            for frame in decoder.feed(chunk):
                event = decode_frame(frame)
                if event is None:
                    continue
                self._logger.debug(
                    "Received register=%#04x raw=%#04x value=%s from=%#04x to=%#04x",
                    event.register_id,
                    event.raw_value,
                    event.value,
                    event.source,
                    event.destination,
                )
                callback = self._on_event
                if callback is not None:
                    callback(event)

    def _drop_port(self) -> None:
        port = self._serial
        self._serial = None
        if port is not None:
            try:
                port.close()
            except (serial.SerialException, OSError):
                self._logger.debug("Serial port close failed", exc_info=True)

    def _reopen(self) -> bool:
        if self._stop.wait(self._reopen_delay):
            return False
        try:
            self._serial = self._open_port()
        except ValloxDeviceError as exc:
            self._logger.error("%s", exc)
            return False
        self._logger.info("Reopened serial port %s", self._port)
        return True

    def is_addressed_to_me(self, event: RegisterEvent) -> bool:
        """Whether *event* was sent to every mainboard, every panel, or this panel."""
        return event.destination in (MAINBOARDS, PANELS, self._address)

    def _write(self, frame: bytes) -> None:
        if not self._enable_write:
            self._logger.debug("Write disabled, dropping frame %s", frame.hex())
            return
        port = self._serial
        if port is None:
            raise ValloxDeviceError(f"Serial port {self._port} is not open", port=self._port)
        with self._write_lock:
            try:
                port.write(frame)
                port.flush()
            except (serial.SerialException, OSError) as exc:
                raise ValloxDeviceError(f"Writing serial port {self._port} failed: {exc}", port=self._port) from exc

    def write_speed(self, speed: int) -> None:
        """Set the fan speed (1-8) on every mainboard and tell the other panels."""
        raw = speed_to_raw(speed)
        self._logger.debug("Writing fan speed %d (raw %#04x)", speed, raw)
        for receiver in (MAINBOARDS, PANELS):
            self._write(encode_frame(self._address, receiver, REGISTER_CURRENT_FAN_SPEED, raw))

    def query_register(self, register: int) -> None:
        """Ask the mainboard to send *register*; the answer arrives as an event."""
        self._logger.debug("Querying register %#04x", register)
        self._write(encode_query(self._address, register))
