"""Synchronization loop between the device and the broker.

Owns the value cache and the speed negotiation. Every mutation happens on
the event loop while a single queued message is processed; serial and
broker threads only ever submit messages.
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import time
from collections.abc import Callable, Coroutine
from typing import Any, Protocol

from valloxmqtt._constants import QUERY_SETTLE_DELAY, QUEUE_SIZE, SEND_RETRY_DELAY, SUBMIT_TIMEOUT
from valloxmqtt.commands import ConsumerStatus
from valloxmqtt.device.driver import DeviceDriver
from valloxmqtt.device.protocol import SPEED_MAX, SPEED_MIN
from valloxmqtt.device.registers import REGISTER_CURRENT_FAN_SPEED
from valloxmqtt.discovery import build_catalog, discovery_messages
from valloxmqtt.models.discovery import DiscoveryDescriptor
from valloxmqtt.models.register import RegisterEvent
from valloxmqtt.state.cache import ValueCache
from valloxmqtt.state.events import (
    ConsumerStatusMessage,
    DeviceEventMessage,
    LoopMessage,
    SpeedRequestMessage,
    SpeedSendMessage,
)
from valloxmqtt.state.speed import SendDecision, SpeedCoordinator
from valloxmqtt.topics import publications_for

_logger = logging.getLogger(__name__)


class Publisher(Protocol):
    def publish(self, topic: str, payload: str | bytes) -> None: ...


class Coordinator:
    def __init__(
        self,
        *,
        device: DeviceDriver,
        broker: Publisher,
        loop: asyncio.AbstractEventLoop | None = None,
        enable_raw: bool = False,
        clock: Callable[[], float] = time.monotonic,
        cache: ValueCache | None = None,
        speed: SpeedCoordinator | None = None,
        catalog: tuple[DiscoveryDescriptor, ...] | None = None,
        queue_size: int = QUEUE_SIZE,
        retry_delay: float = SEND_RETRY_DELAY,
        settle_delay: float = QUERY_SETTLE_DELAY,
        submit_timeout: float = SUBMIT_TIMEOUT,
        logger: logging.Logger | None = None,
    ) -> None:
        self._device = device
        self._broker = broker
        self._loop = loop if loop is not None else asyncio.get_running_loop()
        self._enable_raw = enable_raw
        self._cache = cache if cache is not None else ValueCache(clock=clock)
        self._speed = speed if speed is not None else SpeedCoordinator(clock=clock)
        self._catalog = catalog if catalog is not None else build_catalog()
        self._queue: asyncio.Queue[LoopMessage] = asyncio.Queue(maxsize=queue_size)
        self._retry_delay = retry_delay
        self._settle_delay = settle_delay
        self._submit_timeout = submit_timeout
        self._logger = logger or _logger
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def cache(self) -> ValueCache:
        return self._cache

    @property
    def speed(self) -> SpeedCoordinator:
        return self._speed

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    # ------------------------------------------------------------------
    # Producers
    # ------------------------------------------------------------------

    def submit_device_event(self, event: RegisterEvent) -> None:
        """Queue a device observation. Safe to call from any thread."""
        self._submit(DeviceEventMessage(event))

    def submit_speed_request(self, speed: int) -> None:
        """Queue a user speed request. Safe to call from any thread."""
        self._submit(SpeedRequestMessage(speed))

    def submit_consumer_status(self, status: ConsumerStatus, payload: str = "") -> None:
        """Queue a consumer status change. Safe to call from any thread."""
        self._submit(ConsumerStatusMessage(status, payload))

    def _submit(self, message: LoopMessage) -> None:
        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None
        if running is self._loop:
            self._spawn(self._queue.put(message))
            return

        # Foreign threads block while the queue is full, up to the submit timeout.
        coro = self._queue.put(message)
        try:
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        except RuntimeError:
            coro.close()
            self._logger.debug("Event loop closed, dropping %s", message)
            return
        try:
            future.result(timeout=self._submit_timeout)
        except concurrent.futures.TimeoutError:
            future.cancel()
            self._logger.warning("Coordinator queue full for %ss, dropping %s", self._submit_timeout, message)
        except concurrent.futures.CancelledError:
            self._logger.debug("Event loop shut down, dropped %s", message)

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Process queued messages one at a time until cancelled."""
        self._logger.debug("Coordinator loop started")
        while True:
            message = await self._queue.get()
            try:
                self._process(message)
            except Exception:
                self._logger.exception("Processing %s failed", message)
            finally:
                self._queue.task_done()

    def process_pending(self) -> int:
        """Process every message queued right now; returns how many."""
        count = 0
        while True:
            try:
                message = self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return count
            self._process(message)
            self._queue.task_done()
            count += 1

    async def flush(self) -> None:
        """Wait for the detached publishes, writes and retries in flight."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    def _process(self, message: LoopMessage) -> None:
        match message:
            case DeviceEventMessage(event=event):
                self.handle(event)
            case SpeedRequestMessage(speed=speed):
                self.request_speed(speed)
            case SpeedSendMessage():
                self.attempt_send()
            case ConsumerStatusMessage(status=status, payload=payload):
                self.handle_status(status, payload)

    # ------------------------------------------------------------------
    # Telemetry
    # ------------------------------------------------------------------

    def handle(self, event: RegisterEvent) -> None:
        """Cache *event* and publish it unless it repeats a fresh value."""
        if not self._device.is_addressed_to_me(event):
            return

        if not self._cache.should_publish(event):
            self.maybe_refresh()
            return

        entry = self._cache.record(event)
        if event.register_id == REGISTER_CURRENT_FAN_SPEED and isinstance(event.value, int):
            self._speed.confirm(event.value, entry.observed_at)

        for topic, payload in publications_for(event, enable_raw=self._enable_raw):
            self._spawn(self._publish(topic, payload))

    def maybe_refresh(self) -> bool:
        """Query the fan speed when its cached value has gone stale.

        The device does not resend the fan speed on its own, so without a
        query a consumer would eventually consider it unavailable.
        """
        if not self._cache.is_stale(REGISTER_CURRENT_FAN_SPEED):
            return False
        self._logger.debug("Fan speed is stale, querying")
        self._spawn(self._query(REGISTER_CURRENT_FAN_SPEED))
        return True

    # ------------------------------------------------------------------
    # Speed
    # ------------------------------------------------------------------

    def request_speed(self, speed: int) -> bool:
        if not SPEED_MIN <= speed <= SPEED_MAX:
            self._logger.warning("Ignoring fan speed %d outside %d-%d", speed, SPEED_MIN, SPEED_MAX)
            return False
        if not self._speed.request(speed):
            self._logger.debug("Fan speed %d already confirmed", speed)
            return False
        self._logger.info("Fan speed %d requested", speed)
        self._spawn(self._queue.put(SpeedSendMessage()))
        return True

    def attempt_send(self) -> SendDecision:
        decision = self._speed.attempt_send()
        if decision is SendDecision.DEFER:
            self._spawn(self._requeue_later(SpeedSendMessage(), self._retry_delay))
        elif decision is SendDecision.WRITE:
            speed = self._speed.state.requested_speed
            self._logger.info("Writing fan speed %d", speed)
            self._spawn(self._write_speed(speed))
        return decision

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def announce(self) -> int:
        """Publish the discovery catalog; returns the number of messages."""
        messages = discovery_messages(self._catalog)
        self._logger.info("Announcing %d discovery entities", len(messages))
        for topic, payload in messages:
            self._spawn(self._publish(topic, payload))
        return len(messages)

    def handle_status(self, status: ConsumerStatus, payload: str = "") -> None:
        if status is ConsumerStatus.ONLINE:
            self.announce()
        elif status is ConsumerStatus.OFFLINE:
            self._logger.debug("Consumer went offline")
        else:
            self._logger.info("Unknown consumer status %r", payload)

    # ------------------------------------------------------------------
    # Detached side effects
    # ------------------------------------------------------------------

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = self._loop.create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _publish(self, topic: str, payload: str | bytes) -> None:
        try:
            await self._loop.run_in_executor(None, self._broker.publish, topic, payload)
        except Exception:
            self._logger.warning("Publishing to %s failed", topic, exc_info=True)

    async def _query(self, register: int) -> None:
        try:
            await self._loop.run_in_executor(None, self._device.query_register, register)
        except Exception:
            self._logger.warning("Querying register %#04x failed", register, exc_info=True)

    async def _write_speed(self, speed: int) -> None:
        try:
            await self._loop.run_in_executor(None, self._device.write_speed, speed)
        except Exception:
            self._logger.warning("Writing fan speed %d failed", speed, exc_info=True)
            return
        await asyncio.sleep(self._settle_delay)
        await self._query(REGISTER_CURRENT_FAN_SPEED)

    async def _requeue_later(self, message: LoopMessage, delay: float) -> None:
        await asyncio.sleep(delay)
        await self._queue.put(message)
