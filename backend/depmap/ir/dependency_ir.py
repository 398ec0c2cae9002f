from dataclasses import dataclass
from typing import Optional

DEFAULT_PROTOCOL = "TCP"
MIN_PORT = 1
MAX_PORT = 65535


@dataclass(frozen=True)
class DependencyRecord:
    """
    One observed network flow: `source` talks to `destination`.

    Endpoints are trimmed and must be non-empty, the protocol is stored
    upper-case and an unknown port is None.
    """
    source: str
    destination: str
    port: Optional[int] = None
    protocol: str = DEFAULT_PROTOCOL
    service_name: Optional[str] = None
    source_app: Optional[str] = None
    destination_app: Optional[str] = None
    source_ip: Optional[str] = None
    destination_ip: Optional[str] = None
    port_recovered: bool = False  # port found by scanning loose cells

    def __post_init__(self):
        source = (self.source or "").strip()
        destination = (self.destination or "").strip()

        if not source or not destination:
            raise ValueError("dependency source and destination must not be empty")

        if self.port is not None and not (MIN_PORT <= self.port <= MAX_PORT):
            raise ValueError(f"port out of range: {self.port}")

        protocol = (self.protocol or "").strip().upper() or DEFAULT_PROTOCOL

        # frozen dataclass: normalise through object.__setattr__
        object.__setattr__(self, "source", source)
        object.__setattr__(self, "destination", destination)
        object.__setattr__(self, "protocol", protocol)

    @property
    def label(self) -> str:
        if self.port is None:
            return self.protocol
        return f"{self.protocol}:{self.port}"

    def to_dict(self) -> dict:
        return {
            "source": self.source,
            "destination": self.destination,
            "port": self.port,
            "protocol": self.protocol,
            "serviceName": self.service_name,
            "sourceApp": self.source_app,
            "destinationApp": self.destination_app,
            "sourceIP": self.source_ip,
            "destinationIP": self.destination_ip,
            "portRecovered": self.port_recovered,
        }
