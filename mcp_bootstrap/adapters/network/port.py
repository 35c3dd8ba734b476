"""
Port probe — is anything listening on a local TCP port?

This is a connect test, not a bind test: a port that refuses the
connection is reported free. Another process can still bind it between
the check and the server start.
"""

from __future__ import annotations

import logging
import socket

from mcp_bootstrap.adapters.base import PortProbe

logger = logging.getLogger(__name__)


class SocketPortProbe(PortProbe):
    """Connect-test probe using ``socket.create_connection``."""

    def __init__(self, timeout: float = 0.5):
        self._timeout = timeout

    def is_in_use(self, port: int, host: str = "127.0.0.1") -> bool:
        try:
            with socket.create_connection((host, port), timeout=self._timeout):
                logger.debug("Port %d on %s accepted a connection", port, host)
                return True
        except OSError:
            return False
