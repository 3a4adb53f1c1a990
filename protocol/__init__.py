from .rabbit_wrapper import ConnectionConfig, ConnectionManager, ConnectionState, ConnectionStatus

__all__ = ["ConnectionConfig", "ConnectionManager", "ConnectionState", "ConnectionStatus"]
