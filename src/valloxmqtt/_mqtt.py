"""Internal MQTT broker address parsing and runtime."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any, cast

import paho.mqtt.client as mqtt

from valloxmqtt._constants import (
    DEFAULT_CLIENT_ID,
    DEFAULT_KEEPALIVE,
    DEFAULT_PORT,
    DEFAULT_TLS_PORT,
    PLAIN_SCHEMES,
    TLS_SCHEMES,
)
from valloxmqtt.exceptions import ValloxBrokerError, ValloxConfigError, ValloxPublishError

_RECONNECT_MIN_DELAY = 1
_RECONNECT_MAX_DELAY = 120
_CONNECT_TIMEOUT = 10.0


@dataclass(frozen=True)
class BrokerAddress:
    """Where and how to reach the broker."""

    host: str
    port: int
    tls: bool = False


def parse_broker_url(url: str) -> BrokerAddress:
    """Parse ``scheme://host[:port]`` or a bare ``host[:port]``.

    ``tcp`` and ``mqtt`` are plain connections; ``ssl``, ``tls`` and
    ``mqtts`` use TLS and default to port 8883.

    Raises
    ------
    ValloxConfigError
        The value is empty, the scheme is unknown or the port is invalid.
    """
    value = url.strip()
    if not value:
        raise ValloxConfigError("Broker URL is empty")

    tls = False
    if "://" in value:
        scheme, value = value.split("://", 1)
        scheme = scheme.lower()
        if scheme in TLS_SCHEMES:
            tls = True
        elif scheme not in PLAIN_SCHEMES:
            raise ValloxConfigError(f"Unsupported broker scheme {scheme!r} in {url!r}")
    if "/" in value:
        value = value.split("/", 1)[0]

    default_port = DEFAULT_TLS_PORT if tls else DEFAULT_PORT
    host, sep, maybe_port = value.rpartition(":")
    if not sep:
        host, port = value, default_port
    elif maybe_port.isdigit():
        port = int(maybe_port)
    else:
        raise ValloxConfigError(f"Invalid broker port {maybe_port!r} in {url!r}")

    host = host.strip("[]")
    if not host:
        raise ValloxConfigError(f"Broker URL {url!r} has no host")
    if not 0 < port < 65536:
        raise ValloxConfigError(f"Broker port {port} out of range in {url!r}")
    return BrokerAddress(host=host, port=port, tls=tls)


class BrokerRuntime:
    """Threaded paho-mqtt client.

    Inbound messages are handed to *on_message* on paho's network thread;
    the callback must be thread-safe.
    """

    def __init__(
        self,
        *,
        address: BrokerAddress,
        on_message: Callable[[str, bytes], None],
        subscriptions: Iterable[str] = (),
        client_id: str = DEFAULT_CLIENT_ID,
        username: str | None = None,
        password: str | None = None,
        keepalive: int = DEFAULT_KEEPALIVE,
        connect_timeout: float = _CONNECT_TIMEOUT,
        client_factory: Callable[..., mqtt.Client] = mqtt.Client,
        logger: logging.Logger | None = None,
    ) -> None:
        self._address = address
        self._on_message = on_message
        self._subscriptions = tuple(subscriptions)
        self._client_id = client_id
        self._username = username
        self._password = password
        self._keepalive = keepalive
        self._connect_timeout = connect_timeout
        self._client_factory = client_factory
        self._logger = logger or logging.getLogger(__name__)
        self._client: mqtt.Client | None = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """Whether the network loop is running."""
        return self._running

    @property
    def address(self) -> BrokerAddress:
        return self._address

    def start(self) -> None:
        """Connect, start the network loop and subscribe on every connect.

        Blocks until the broker acknowledges the first connection.

        Raises
        ------
        ValloxBrokerError
            The initial connection attempt failed, the broker refused it or
            no acknowledgement arrived within the connect timeout.
        """
        self.stop()
        self._logger.info(
            "Connecting to MQTT broker host=%s port=%s tls=%s client_id=%s",
            self._address.host,
            self._address.port,
            self._address.tls,
            self._client_id,
        )

        client = self._client_factory(
            callback_api_version=cast(Any, mqtt).CallbackAPIVersion.VERSION2,
            client_id=self._client_id,
            protocol=mqtt.MQTTv311,
        )
        client.enable_logger(self._logger)
        if self._username:
            client.username_pw_set(self._username, self._password or None)
        if self._address.tls:
            client.tls_set()
        client.reconnect_delay_set(min_delay=_RECONNECT_MIN_DELAY, max_delay=_RECONNECT_MAX_DELAY)

        first_connect = threading.Event()
        first_result: list[Any] = []

        def on_connect(
            c: mqtt.Client,
            _userdata: Any,
            _flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if not first_connect.is_set():
                first_result.append(reason_code)
                first_connect.set()
            if reason_code.value != 0:
                self._logger.warning("MQTT connect failed: %s", reason_code)
                return
            self._logger.info("MQTT connected")
            for topic in self._subscriptions:
                self._logger.debug("MQTT subscribing topic=%s", topic)
                c.subscribe(topic, qos=0)

        def on_connect_fail(_c: mqtt.Client, _userdata: Any) -> None:
            self._logger.warning("MQTT reconnect failed")

        def on_message(_c: mqtt.Client, _userdata: Any, msg: mqtt.MQTTMessage) -> None:
            self._logger.debug("Received PUBLISH topic=%s payload=%r", msg.topic, msg.payload)
            try:
                self._on_message(msg.topic, msg.payload)
            except Exception:
                self._logger.warning("Handling message on %s failed", msg.topic, exc_info=True)

        def on_disconnect(
            _client: mqtt.Client,
            _userdata: Any,
            _disconnect_flags: Any,
            reason_code: Any,
            _properties: Any,
        ) -> None:
            if self._running:
                self._logger.warning("MQTT connection lost: %s, reconnecting", reason_code)

        client.on_connect = on_connect
        client.on_connect_fail = on_connect_fail
        client.on_message = on_message
        client.on_disconnect = on_disconnect

        try:
            client.connect(self._address.host, self._address.port, keepalive=self._keepalive)
        except (OSError, ValueError) as exc:
            raise ValloxBrokerError(
                f"Cannot connect to MQTT broker {self._address.host}:{self._address.port}: {exc}"
            ) from exc
        client.loop_start()

        target = f"{self._address.host}:{self._address.port}"
        if not first_connect.wait(self._connect_timeout):
            self._abort(client)
            raise ValloxBrokerError(
                f"MQTT broker {target} did not acknowledge the connection within {self._connect_timeout}s"
            )
        reason_code = first_result[0]
        if reason_code.value != 0:
            self._abort(client)
            raise ValloxBrokerError(f"MQTT broker {target} refused the connection: {reason_code}")

        self._client = client
        self._running = True
        self._logger.debug("MQTT network loop started")

    def _abort(self, client: mqtt.Client) -> None:
        try:
            client.disconnect()
        finally:
            client.loop_stop()

    def publish(self, topic: str, payload: str | bytes) -> None:
        """Publish at QoS 0, not retained.

        Raises
        ------
        ValloxBrokerError
            The runtime is not started.
        ValloxPublishError
            The client rejected the message.
        """
        client = self._client
        if client is None:
            raise ValloxBrokerError("MQTT client is not running")
        info = client.publish(topic, payload, qos=0, retain=False)
        if info.rc != mqtt.MQTT_ERR_SUCCESS:
            raise ValloxPublishError(
                f"Publishing to {topic} failed: {mqtt.error_string(info.rc)}",
                topic=topic,
                rc=info.rc,
            )

    def stop(self) -> None:
        """Disconnect and stop the network loop if running."""
        client = self._client
        self._client = None
        was_running = self._running
        self._running = False

        if client is None:
            return
        try:
            if was_running:
                self._logger.debug("MQTT disconnect requested")
                client.disconnect()
        finally:
            client.loop_stop()
            self._logger.debug("MQTT network loop stopped")
