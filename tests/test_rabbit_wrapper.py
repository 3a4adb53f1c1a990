import pika
import pytest

from common.errors import BrokerConnectionError, NotConnectedError
from protocol.rabbit_wrapper import (
    ConnectionManager,
    ConnectionState,
    ConnectionStatus,
    parse_publisher_flag,
)

from conftest import FakeBroker


@pytest.mark.parametrize("value, expected", [
    ("on", True),
    ("true", True),
    ("ON", False),
    ("True", False),
    (" true ", False),
    (True, True),
    ("off", False),
    ("false", False),
    ("yes", False),
    ("", False),
    (None, False),
    (False, False),
])
def test_parse_publisher_flag(value, expected):
    assert parse_publisher_flag(value) is expected


class TestConfigure:

    def test_takes_values_from_config_source(self, manager):
        config = manager.configure()

        assert config.host == "rabbit.local"
        assert config.port == 5672
        assert config.queue == "batam"
        assert config.publish is True

    def test_explicit_value_wins_over_previous_one(self, manager):
        manager.configure(host="first.local")
        manager.configure(host="second.local")

        assert manager.config.host == "second.local"

    def test_previous_value_is_kept_without_override(self, manager, defaults):
        manager.configure(queue="builds")
        defaults["queue"] = "changed-in-source"
        manager.configure()

        assert manager.config.queue == "builds"

    def test_source_is_used_when_nothing_was_set(self, manager, defaults):
        defaults["vhost"] = "analytics"
        manager.configure(host="explicit.local")

        assert manager.config.vhost == "analytics"
        assert manager.config.host == "explicit.local"

    def test_publisher_flag_is_recomputed_every_call(self, manager, defaults):
        manager.configure(publisher="off")
        assert manager.publish_enabled is False
        assert manager.state is ConnectionState.DISABLED

        manager.configure()
        assert manager.publish_enabled is True

        defaults["publisher"] = None
        manager.configure()
        assert manager.publish_enabled is False

    def test_without_config_source_everything_is_explicit(self, broker):
        manager = ConnectionManager(connection_factory=broker)
        config = manager.configure(host="h", queue="q", publisher="true")

        assert config.host == "h"
        assert config.username is None
        assert config.publish is True

    def test_repr_hides_password(self, manager):
        manager.configure(password="s3cret")
        assert "s3cret" not in repr(manager.config)


class TestConnect:

    def test_opens_connection_and_declares_queue(self, manager, broker):
        manager.configure(host="broker.local", port="5673", username="bob", password="pw", vhost="v", queue="q")
        manager.connect()

        params = broker.last_connection.params
        assert isinstance(params, pika.ConnectionParameters)
        assert params.host == "broker.local"
        assert params.port == 5673
        assert params.virtual_host == "v"
        assert params.credentials.username == "bob"
        assert params.credentials.password == "pw"

        channel = broker.last_connection.channels[-1]
        assert channel.declared == [
            {"queue": "q", "durable": False, "exclusive": False, "auto_delete": False, "arguments": None}
        ]
        assert manager.state is ConnectionState.CONNECTED
        assert manager.status() is ConnectionStatus.CONNECTED

    def test_disabled_publisher_never_opens_a_connection(self, manager, broker):
        manager.configure(publisher="off")
        manager.connect()

        assert broker.connections == []
        assert manager.status() is ConnectionStatus.DISABLED
        assert manager.ensure_ready() is ConnectionStatus.DISABLED

    def test_connect_configures_from_source_when_needed(self, manager, broker):
        manager.connect()

        assert manager.config.host == "rabbit.local"
        assert len(broker.connections) == 1

    def test_unreachable_broker_raises_connection_error(self, sleeps, defaults):
        manager = ConnectionManager(connection_factory=FakeBroker(fail_connects=1),
                                    config_loader=lambda: defaults, sleep=sleeps.append)
        manager.configure()

        with pytest.raises(BrokerConnectionError) as excinfo:
            manager.connect()

        assert isinstance(excinfo.value, ConnectionError)
        assert isinstance(excinfo.value.__cause__, pika.exceptions.AMQPConnectionError)
        assert manager.state is ConnectionState.CLOSED
        # configuration stays usable for a later attempt
        assert manager.config.host == "rabbit.local"

    def test_begin_connection_retries_failed_connects(self, sleeps, defaults):
        broker = FakeBroker(fail_connects=2)
        manager = ConnectionManager(connection_factory=broker, config_loader=lambda: defaults, sleep=sleeps.append)

        manager.begin_connection()

        assert manager.status() is ConnectionStatus.CONNECTED
        assert sleeps == [1, 1]

    def test_begin_connection_gives_up_after_three_attempts(self, sleeps, defaults):
        broker = FakeBroker(fail_connects=3)
        manager = ConnectionManager(connection_factory=broker, config_loader=lambda: defaults, sleep=sleeps.append)

        with pytest.raises(BrokerConnectionError):
            manager.begin_connection()

        assert broker.connections == []
        assert sleeps == [1, 1]


class TestEnsureReady:

    def test_raises_when_never_connected(self, manager):
        manager.configure()

        with pytest.raises(NotConnectedError):
            manager.ensure_ready()

    def test_raises_when_never_configured(self, manager):
        with pytest.raises(NotConnectedError):
            manager.ensure_ready()

    def test_reconnects_when_channel_is_closed(self, manager, broker):
        manager.begin_connection()
        first = broker.last_connection
        first.channels[-1].is_open = False

        assert manager.status() is ConnectionStatus.STALE
        assert manager.ensure_ready() is ConnectionStatus.CONNECTED

        assert len(broker.connections) == 2
        assert first.is_open is False
        assert broker.last_connection.is_open is True

    def test_reconnects_when_connection_is_closed(self, manager, broker):
        manager.begin_connection(queue="builds")
        broker.last_connection.is_open = False

        manager.ensure_ready()

        assert len(broker.connections) == 2
        assert broker.last_connection.channels[-1].declared[0]["queue"] == "builds"

    def test_open_handle_is_left_alone(self, manager, broker):
        manager.begin_connection()

        manager.ensure_ready()

        assert len(broker.connections) == 1

    def test_failed_reconnect_stays_stale(self, manager, broker):
        manager.begin_connection()
        broker.last_connection.is_open = False
        broker.fail_connects = 1

        with pytest.raises(BrokerConnectionError):
            manager.ensure_ready()

        assert manager.status() is ConnectionStatus.STALE
        manager.ensure_ready()
        assert manager.status() is ConnectionStatus.CONNECTED


class TestDisconnect:

    def test_is_a_noop_without_connection(self, manager):
        manager.disconnect()
        manager.disconnect()

        assert manager.state is ConnectionState.UNCONFIGURED

    def test_closes_channel_then_connection(self, manager, broker):
        manager.begin_connection()
        connection = broker.last_connection
        channel = connection.channels[-1]

        manager.end_connection()

        assert channel.is_open is False
        assert connection.is_open is False
        assert manager.state is ConnectionState.CLOSED

    def test_closed_manager_needs_a_new_connect(self, manager):
        manager.begin_connection()
        manager.disconnect()

        with pytest.raises(NotConnectedError):
            manager.ensure_ready()

        manager.connect()
        assert manager.ensure_ready() is ConnectionStatus.CONNECTED

    def test_tolerates_already_closed_resources(self, manager, broker):
        manager.begin_connection()
        broker.last_connection.channels[-1].is_open = False
        broker.last_connection.is_open = False

        manager.disconnect()
        manager.disconnect()

        assert manager.state is ConnectionState.CLOSED

    def test_channel_close_error_still_closes_connection(self, manager, broker, sleeps):
        manager.begin_connection()
        connection = broker.last_connection
        channel = connection.channels[-1]

        def refuse_close():
            raise pika.exceptions.ChannelWrongStateError("Channel is closed.")

        channel.close = refuse_close

        manager.end_connection()

        assert connection.is_open is False
        assert manager.state is ConnectionState.CLOSED
        assert manager.status() is ConnectionStatus.NEVER_CONNECTED
        assert sleeps == []
