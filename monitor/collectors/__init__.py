from .base import BaseCollector
from .local_collector import LocalCollector
from .remote_collector import RemoteCollector

__all__ = [
    "BaseCollector",
    "LocalCollector",
    "RemoteCollector",
]
