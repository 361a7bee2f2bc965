from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config import DEFAULT_VIEWPORT


class ControlState(Enum):
    NORMAL = "normal"
    RELOAD_REQUESTED = "reload_requested"
    QUIT = "quit"


@dataclass(frozen=True)
class MeasurementConfig:
    target: Optional[str] = None    # IP o hostname del servidor iperf3
    ipv6: bool = False
    udp: bool = False
    reverse: bool = False
    port: Optional[str] = None      # "5201" o rango "5200-5209"


@dataclass(frozen=True)
class ViewportSize:
    width: int = DEFAULT_VIEWPORT[0]    # celdas
    height: int = DEFAULT_VIEWPORT[1]


# Factor de cada unidad de iperf3 respecto a Mbits
UNIT_TO_MBITS = {
    "bits": 1e-6,
    "Kbits": 1e-3,
    "Mbits": 1.0,
    "Gbits": 1e3,
    "Tbits": 1e6,
    "Pbits": 1e9,
}


@dataclass(frozen=True)
class Throughput:
    rate: float     # valor tal cual lo informa iperf3
    unit: str       # unidad de origen (p.ej. "Mbits")

    @property
    def megabits(self) -> float:
        """Valor en Mbits/s; una unidad desconocida se toma como Mbits."""
        return self.rate * UNIT_TO_MBITS.get(self.unit, 1.0)


@dataclass
class ServerEntry:
    host: str
    port: Optional[str] = None
    continent: str = ""
    country: str = ""
    site: str = ""
    provider: str = ""
