from .connector import Connector
from .publisher import ACTIONS, MessagePublisher

__all__ = ["Connector", "MessagePublisher", "ACTIONS"]
