import logging
import threading
import time
from enum import Enum

import pika
import pika.exceptions

from common.errors import BrokerConnectionError, NotConnectedError
from common.logger import config_logger
from common.retry import RETRY_ON_FAILURE_ATTEMPTS, RETRY_ON_FAILURE_DELAY, retry_on_failure

rabbit_logger = logging.getLogger("batam.rabbitmq")

ENABLED_PUBLISHER_VALUES = {"on", "true"}


class ConnectionState(Enum):
    UNCONFIGURED = "unconfigured"
    DISABLED = "disabled"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    CLOSED = "closed"


class ConnectionStatus(Enum):
    """Result of inspecting the broker handle before a publish."""
    DISABLED = "disabled"
    CONNECTED = "connected"
    STALE = "stale"
    NEVER_CONNECTED = "never_connected"


def parse_publisher_flag(value):
    """Exactly 'on' or 'true' enable publishing, anything else (None, 'ON', ' true') disables it."""
    if isinstance(value, bool):
        return value
    return value in ENABLED_PUBLISHER_VALUES


class ConnectionConfig:
    FIELDS = ("host", "username", "password", "port", "vhost", "queue")

    def __init__(self, host=None, username=None, password=None, port=None, vhost=None, queue=None, publish=None):
        self.host = host
        self.username = username
        self.password = password
        self.port = port
        self.vhost = vhost
        self.queue = queue
        self.publish = publish

    def merge(self, overrides, defaults):
        """Take each field from *overrides*, else keep it, else pull it from *defaults*."""
        for field in self.FIELDS:
            value = overrides.get(field)
            if value is not None:
                setattr(self, field, value)
            elif getattr(self, field) is None:
                setattr(self, field, defaults.get(field))

    def connection_parameters(self):
        params = {}
        if self.host is not None:
            params["host"] = self.host
        if self.port is not None:
            params["port"] = int(self.port)
        if self.vhost is not None:
            params["virtual_host"] = self.vhost
        if self.username is not None:
            params["credentials"] = pika.PlainCredentials(self.username, self.password or "")
        return pika.ConnectionParameters(**params)

    def __repr__(self):
        # password left out on purpose, this ends up in logs
        return (f"ConnectionConfig(host={self.host!r}, username={self.username!r}, port={self.port!r}, "
                f"vhost={self.vhost!r}, queue={self.queue!r}, publish={self.publish!r})")


class ConnectionManager:
    """Owns the broker connection and channel used to publish messages.

    Configuration is merged field by field on every ``configure`` call and
    kept in memory, so later calls only need to pass what changes. When the
    publisher flag is off no connection is ever opened. Before each publish
    ``ensure_ready`` rebuilds the handle if the broker dropped it.
    """

    def __init__(self, connection_factory=pika.BlockingConnection, config_loader=None,
                 retry_attempts=RETRY_ON_FAILURE_ATTEMPTS, retry_delay=RETRY_ON_FAILURE_DELAY, sleep=time.sleep):
        self._connection_factory = connection_factory
        self._config_loader = config_loader
        self.retry_attempts = retry_attempts
        self.retry_delay = retry_delay
        self.sleep = sleep

        self.config = ConnectionConfig()
        self.state = ConnectionState.UNCONFIGURED
        self.lock = threading.RLock()
        self._connection = None
        self._channel = None
        # True from the first successful connect until an explicit disconnect
        self._was_connected = False

    @property
    def publish_enabled(self):
        return bool(self.config.publish)

    @property
    def queue(self):
        return self.config.queue

    def _load_defaults(self):
        if self._config_loader is None:
            return {}
        defaults = self._config_loader()
        if defaults.get("logging_level"):
            config_logger(defaults["logging_level"])
        return defaults

    def configure(self, host=None, username=None, password=None, port=None, vhost=None, queue=None, publisher=None):
        """Merge explicit values over the stored ones and the configuration source."""
        with self.lock:
            defaults = self._load_defaults()
            overrides = {"host": host, "username": username, "password": password,
                         "port": port, "vhost": vhost, "queue": queue}
            self.config.merge(overrides, defaults)

            if publisher is None:
                publisher = defaults.get("publisher")
            self.config.publish = parse_publisher_flag(publisher)

            if not self.config.publish:
                self.state = ConnectionState.DISABLED
            elif self.state is ConnectionState.DISABLED:
                self.state = ConnectionState.CONNECTED if self._has_handle() else ConnectionState.UNCONFIGURED

            rabbit_logger.debug(f"Configured {self.config}")
            return self.config

    def connect(self):
        """Open a connection and channel and declare the target queue.

        Does nothing but mark the manager as disabled when publishing is off.
        """
        with self.lock:
            if self.config.publish is None:
                self.configure()

            if not self.config.publish:
                self.state = ConnectionState.DISABLED
                rabbit_logger.info("Publisher is off, messages will be printed to stdout")
                return

            self.state = ConnectionState.CONNECTING
            self._release_handle()

            connection = None
            try:
                connection = self._connection_factory(self.config.connection_parameters())
                channel = connection.channel()
                channel.queue_declare(queue=self.config.queue, durable=False, exclusive=False,
                                      auto_delete=False, arguments=None)
            except (pika.exceptions.AMQPError, OSError) as e:
                rabbit_logger.error(f"Failed to connect to RabbitMQ at {self.config.host}:{self.config.port}: {e}")
                if connection is not None and connection.is_open:
                    try:
                        connection.close()
                    except pika.exceptions.AMQPError as close_error:
                        rabbit_logger.error(f"Error closing half-open connection: {close_error}")
                self.state = ConnectionState.CLOSED
                raise BrokerConnectionError(f"Could not connect to RabbitMQ at {self.config.host}: {e}") from e

            self._connection = connection
            self._channel = channel
            self._was_connected = True
            self.state = ConnectionState.CONNECTED
            rabbit_logger.info(f"Successfully connected to RabbitMQ at {self.config.host}, queue '{self.config.queue}' declared")

    def _has_handle(self):
        return self._connection is not None or self._channel is not None

    def status(self):
        with self.lock:
            if self.config.publish is False:
                return ConnectionStatus.DISABLED
            if self._connection is None and self._channel is None:
                # a failed reconnect leaves no handle behind but must be retried
                if self._was_connected:
                    return ConnectionStatus.STALE
                return ConnectionStatus.NEVER_CONNECTED
            if (self._connection is None or self._channel is None
                    or not self._connection.is_open or not self._channel.is_open):
                return ConnectionStatus.STALE
            return ConnectionStatus.CONNECTED

    def ensure_ready(self):
        """Make sure a publish can proceed, reconnecting a stale handle."""
        with self.lock:
            status = self.status()
            if status is ConnectionStatus.NEVER_CONNECTED:
                raise NotConnectedError("Establish a connection before publishing any message.")
            if status is ConnectionStatus.STALE:
                rabbit_logger.warning("Connection or channel is closed. Attempting to reconnect...")
                self.connect()
                status = ConnectionStatus.CONNECTED
            return status

    def publish(self, body):
        """Send *body* to the configured queue through the default exchange."""
        with self.lock:
            if self._channel is None:
                raise NotConnectedError("Establish a connection before publishing any message.")
            self._channel.basic_publish(exchange="", routing_key=self.config.queue, body=body)
            rabbit_logger.debug(f"Published {len(body)} bytes to queue '{self.config.queue}'")

    def _release_handle(self):
        """Close channel then connection if still open and drop both references.

        A resource that fails to close is already dead; the error is logged.
        """
        try:
            for name, resource in (("channel", self._channel), ("connection", self._connection)):
                if resource is None or not resource.is_open:
                    continue
                try:
                    resource.close()
                    rabbit_logger.info(f"RabbitMQ {name} closed.")
                except pika.exceptions.AMQPError as e:
                    rabbit_logger.error(f"Error closing RabbitMQ {name}: {e}")
        finally:
            self._channel = None
            self._connection = None

    def disconnect(self):
        """Close channel then connection. Safe to call when nothing is open."""
        with self.lock:
            try:
                self._release_handle()
            finally:
                self._was_connected = False
                if self.state in (ConnectionState.CONNECTING, ConnectionState.CONNECTED):
                    self.state = ConnectionState.CLOSED

    @retry_on_failure
    def begin_connection(self, host=None, username=None, password=None, port=None, vhost=None, queue=None,
                         publisher=None):
        self.configure(host=host, username=username, password=password, port=port, vhost=vhost,
                       queue=queue, publisher=publisher)
        self.connect()

    @retry_on_failure
    def end_connection(self):
        self.disconnect()
