import pika.exceptions
import pytest

from connector import Connector
from protocol.rabbit_wrapper import ConnectionManager

DEFAULTS = {
    "logging_level": "DEBUG",
    "host": "rabbit.local",
    "username": "guest",
    "password": "guest",
    "port": 5672,
    "vhost": "batam",
    "queue": "batam",
    "publisher": "on",
}


class FakeChannel:
    def __init__(self, broker):
        self.broker = broker
        self.is_open = True
        self.declared = []

    def queue_declare(self, **kwargs):
        self.declared.append(kwargs)

    def basic_publish(self, exchange, routing_key, body, properties=None):
        if not self.is_open:
            raise pika.exceptions.ChannelWrongStateError("Channel is closed.")
        if self.broker.fail_publishes > 0:
            self.broker.fail_publishes -= 1
            self.is_open = False
            raise pika.exceptions.ChannelWrongStateError("Channel is closed.")
        self.broker.published.append(
            {"exchange": exchange, "routing_key": routing_key, "body": body, "properties": properties}
        )

    def close(self):
        self.is_open = False


class FakeConnection:
    def __init__(self, broker, params):
        self.broker = broker
        self.params = params
        self.is_open = True
        self.channels = []

    def channel(self):
        channel = FakeChannel(self.broker)
        self.channels.append(channel)
        return channel

    def close(self):
        self.is_open = False


class FakeBroker:
    """Stands in for pika.BlockingConnection; call it with ConnectionParameters."""

    def __init__(self, fail_connects=0, fail_publishes=0):
        self.fail_connects = fail_connects
        self.fail_publishes = fail_publishes
        self.connections = []
        self.published = []

    def __call__(self, params):
        if self.fail_connects > 0:
            self.fail_connects -= 1
            raise pika.exceptions.AMQPConnectionError("Connection refused")
        connection = FakeConnection(self, params)
        self.connections.append(connection)
        return connection

    @property
    def last_connection(self):
        return self.connections[-1]

    @property
    def bodies(self):
        return [message["body"].decode("utf-8") for message in self.published]


@pytest.fixture
def broker():
    return FakeBroker()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def defaults():
    return dict(DEFAULTS)


@pytest.fixture
def manager(broker, sleeps, defaults):
    return ConnectionManager(connection_factory=broker, config_loader=lambda: defaults, sleep=sleeps.append)


@pytest.fixture
def connector(broker, sleeps, defaults):
    return Connector(connection_factory=broker, config_loader=lambda: defaults, sleep=sleeps.append)
