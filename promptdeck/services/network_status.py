"""
Online/offline signal consulted before primary-tier writes.

An explicit offline signal is treated exactly like a primary timeout: the
write degrades to the durable-local tier without attempting the call.
"""

import threading

from promptdeck.setup_logging_optimized import get_logger

logger = get_logger(__name__)


class NetworkStatus:
    """Process-wide connectivity flag. Callable, so it can be injected as ``is_online``."""

    def __init__(self, online: bool = True):
        self._online = online
        self._lock = threading.Lock()

    def is_online(self) -> bool:
        with self._lock:
            return self._online

    def set_online(self, online: bool) -> None:
        with self._lock:
            if online != self._online:
                logger.info(f"Network status changed: {'online' if online else 'offline'}")
            self._online = online

    def __call__(self) -> bool:
        return self.is_online()


_network_status = NetworkStatus()


def get_network_status() -> NetworkStatus:
    return _network_status
