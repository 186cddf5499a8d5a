"""Internal constants shared across the bridge."""

# ------------------------------------------------------------------
# Coordinator timing (seconds)
# ------------------------------------------------------------------

#: Cached values younger than this are not republished when unchanged.
FRESHNESS_WINDOW: float = 15 * 60
#: A speed request younger than this is not written yet.
DEBOUNCE_WINDOW: float = 5.0
#: A confirmed speed older than this is considered stale.
CONFIRMATION_TTL: float = 10.0
#: Delay before a debounced send attempt is retried.
SEND_RETRY_DELAY: float = 1.0
#: Delay between a speed write and the confirming register query.
QUERY_SETTLE_DELAY: float = 0.02

#: Capacity of the coordinator input queue.
QUEUE_SIZE = 64
#: How long a producer thread waits for room in a full queue before dropping.
SUBMIT_TIMEOUT: float = 5.0

# ------------------------------------------------------------------
# Broker defaults
# ------------------------------------------------------------------

DEFAULT_CLIENT_ID = "vallox"
DEFAULT_KEEPALIVE = 150
DEFAULT_PORT = 1883
DEFAULT_TLS_PORT = 8883
TLS_SCHEMES: frozenset[str] = frozenset({"ssl", "tls", "mqtts"})
PLAIN_SCHEMES: frozenset[str] = frozenset({"tcp", "mqtt"})

# ------------------------------------------------------------------
# Serial bus
# ------------------------------------------------------------------

BAUDRATE = 9600
SERIAL_READ_SIZE = 64
SERIAL_READ_TIMEOUT = 0.5
SERIAL_REOPEN_DELAY = 5.0
DEFAULT_PANEL_ADDRESS = 0x27
