"""
Port scanner — find a free local TCP port for the server.

Linear scan from ``start``; the first port nobody answers on wins. The
ceiling is inclusive and bounded so a fully occupied range fails
instead of looping forever.
"""

from __future__ import annotations

import logging

from mcp_bootstrap.adapters.base import PortProbe
from mcp_bootstrap.core.errors import PortExhaustedError
from mcp_bootstrap.core.models.port import MAX_SERVER_PORT, PortAllocation, PortRange

logger = logging.getLogger(__name__)

DEFAULT_START = 8000
DEFAULT_SPAN = 1000


def find_available_port(
    probe: PortProbe,
    start: int = DEFAULT_START,
    ceiling: int | None = None,
    host: str = "127.0.0.1",
) -> PortAllocation:
    """Return the first free port in ``[start, ceiling]`` plus its proxy port.

    Args:
        probe: Port occupancy capability.
        start: First port to try.
        ceiling: Last port to try, inclusive. Defaults to ``start + 1000``.
            Never above 65534, so the proxy port stays valid.
        host: Interface to probe.

    Raises:
        PortExhaustedError: Every port in the range is in use.
    """
    if ceiling is None:
        ceiling = start + DEFAULT_SPAN
    if start > MAX_SERVER_PORT:
        raise PortExhaustedError(
            f"No usable port from {start}: the proxy port would be above 65535.",
            hint=f"Start the scan at or below {MAX_SERVER_PORT}.",
        )
    ceiling = min(ceiling, MAX_SERVER_PORT)
    port_range = PortRange(start=start, end=ceiling)

    for candidate in port_range.candidates():
        if not probe.is_in_use(candidate, host):
            allocation = PortAllocation(port=candidate)
            logger.info(
                "Found available port: %d (proxy port %d is not checked)",
                allocation.port,
                allocation.proxy_port,
            )
            return allocation
        logger.info("Port %d is in use, trying next...", candidate)

    raise PortExhaustedError(
        f"Could not find an available port between {port_range.start} and {port_range.end}.",
        hint="Free a port in that range or start from a different port.",
    )
