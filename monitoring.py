# monitoring.py
"""
Módulo de monitorización.

Construye la línea de comandos de iperf3 a partir de una configuración,
lanza el proceso con stdout y stderr separados y permite matarlo.
iperf3 no ofrece un apagado ordenado por esta vía: la única parada es kill.
"""

import shutil
import subprocess
from typing import IO, List, Optional

from config import IPERF3_BASE_ARGS, IPERF3_BINARY
from models import MeasurementConfig


class SpawnError(Exception):
    """No se pudo lanzar iperf3 (binario ausente, permisos...)."""


def has_iperf3(binary: str = IPERF3_BINARY) -> bool:
    """True si el binario está en el PATH."""
    return shutil.which(binary) is not None


def build_iperf3_command(config: MeasurementConfig, binary: str = IPERF3_BINARY) -> List[str]:
    """
    Devuelve el vector de argumentos para iperf3.

    Orden fijo: prefijo base, luego las opciones activas (IPv6, puertos,
    inverso, UDP) y por último el servidor.
    """
    cmd = [binary, *IPERF3_BASE_ARGS]
    if config.ipv6:
        cmd.append('--version6')
    if config.port:
        cmd += ['--port', str(config.port)]
    if config.reverse:
        cmd.append('--reverse')
    if config.udp:
        cmd.append('--udp')
    cmd += ['--client', config.target or '']
    return cmd


class Iperf3Process:
    """
    Posee el Popen del cliente iperf3 durante una sesión.

    Se guarda el objeto del proceso y no solo su PID, así kill actúa
    siempre sobre nuestro hijo y nunca sobre un PID reutilizado.
    """
    def __init__(self, config: MeasurementConfig, binary: str = IPERF3_BINARY) -> None:
        self.config = config
        self.cmd = build_iperf3_command(config, binary)
        self.proc: Optional[subprocess.Popen] = None

    def start(self) -> "Iperf3Process":
        popen_kwargs = {
            'stdin': subprocess.DEVNULL,
            'stdout': subprocess.PIPE,
            'stderr': subprocess.PIPE,
            'bufsize': 0,
        }
        try:
            self.proc = subprocess.Popen(self.cmd, **popen_kwargs)
        except FileNotFoundError as e:
            raise SpawnError(f"No se pudo ejecutar {self.cmd[0]}, ¿está instalado?") from e
        except OSError as e:
            raise SpawnError(f"Error al lanzar {self.cmd[0]}: {e}") from e
        return self

    @property
    def pid(self) -> Optional[int]:
        return self.proc.pid if self.proc else None

    @property
    def stdout(self) -> Optional[IO[bytes]]:
        return self.proc.stdout if self.proc else None

    @property
    def stderr(self) -> Optional[IO[bytes]]:
        return self.proc.stderr if self.proc else None

    def is_running(self) -> bool:
        """True mientras el proceso siga vivo."""
        return self.proc is not None and self.proc.poll() is None

    def terminate(self) -> None:
        """Envía SIGKILL y recoge el proceso."""
        if self.proc is None:
            return
        if self.is_running():
            try:
                self.proc.kill()
            except ProcessLookupError:
                # Ya había terminado
                pass
        self.proc.wait()

    def close(self) -> None:
        """Cierra las tuberías; solo desde el hilo que las lee."""
        if self.proc is None:
            return
        for stream in (self.proc.stdout, self.proc.stderr):
            if stream is not None:
                stream.close()
