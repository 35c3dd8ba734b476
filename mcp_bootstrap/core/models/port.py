"""
Port models — the scanned range and the allocation handed to the server.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator

# Highest server port whose proxy port (port + 1) is still a valid TCP port
MAX_SERVER_PORT = 65534


class PortRange(BaseModel):
    """Inclusive TCP port range. ``start`` must not exceed ``end``."""

    start: int = Field(ge=1, le=65535)
    end: int = Field(ge=1, le=65535)

    @model_validator(mode="after")
    def _check_order(self) -> PortRange:
        if self.start > self.end:
            raise ValueError(f"start ({self.start}) must be <= end ({self.end})")
        return self

    def __contains__(self, port: object) -> bool:
        return isinstance(port, int) and self.start <= port <= self.end

    def candidates(self) -> range:
        """Ports in scan order."""
        return range(self.start, self.end + 1)

    def __len__(self) -> int:
        return self.end - self.start + 1


class PortAllocation(BaseModel):
    """A server port and its derived proxy port.

    The proxy port is always ``port + 1`` and is never probed on its
    own; the downstream server is expected to cope if it is taken.
    """

    port: int = Field(ge=1, le=MAX_SERVER_PORT)

    @property
    def proxy_port(self) -> int:
        return self.port + 1

    def to_dict(self) -> dict:
        return {"port": self.port, "proxy_port": self.proxy_port}
