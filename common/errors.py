class ConnectorError(Exception):
    """Base class for every error raised by the connector."""


class InvalidArgumentError(ConnectorError, ValueError):
    """A record is missing a required field or carries an unknown custom format."""


class NotConnectedError(ConnectorError):
    """A publish was attempted before a broker connection was ever established."""


class BrokerConnectionError(ConnectorError, ConnectionError):
    """The broker could not be reached or rejected the credentials."""
