# parsing.py
"""
Lectura y análisis de la salida de iperf3.

La salida se lee en trozos con un tiempo de espera por lectura; agotar
la espera no es un error, solo da ocasión a comprobar si hay que parar.
Las líneas se decodifican de forma permisiva y se clasifican una a una.
"""

import os
import re
import select
import time
from collections import deque
from enum import Enum
from typing import IO, Deque, Optional, Tuple

from config import READ_TIMEOUT
from models import Throughput

# "[  5]   0.00-1.00   sec  50.0 MBytes   420 Mbits/sec"
RE_TAGGED = re.compile(r"\[([^\]]+)\]\s(.*)$")
RE_RATE = re.compile(r"(\d+(?:\.\d+)?)\s+(\w+)/sec")

CHUNK_SIZE = 4096


class LineKind(Enum):
    SUMMARY = "summary"     # separador "- - -" previo al resumen final
    HEADER = "header"       # cabecera/pie con "Interval"
    DATA = "data"
    OTHER = "other"         # banners, avisos... se ignoran


def split_tagged_line(line: str) -> Tuple[Optional[str], str]:
    """Separa "[id] resto"; si no hay etiqueta, toda la línea es el resto."""
    m = RE_TAGGED.search(line)
    if not m:
        return None, line.strip()
    return m.group(1).strip(), m.group(2).strip()


def classify_iperf3_line(line: str) -> Tuple[LineKind, Optional[Throughput]]:
    """Clasifica una línea de iperf3 y extrae el caudal si lo tiene."""
    _, remainder = split_tagged_line(line)
    if "- - -" in line:
        return LineKind.SUMMARY, None
    if "Interval" in remainder:
        return LineKind.HEADER, None
    m = RE_RATE.search(remainder)
    if not m:
        return LineKind.OTHER, None
    return LineKind.DATA, Throughput(rate=float(m.group(1)), unit=m.group(2))


def parse_iperf3_line(line: str) -> Optional[Throughput]:
    """Devuelve (valor, unidad) de una línea de datos, o None si no lo es."""
    _, sample = classify_iperf3_line(line)
    return sample


def read_with_deadline(stream: IO[bytes], timeout: float) -> str:
    """
    Lee todo lo que llegue por `stream` hasta `timeout` segundos o EOF.

    Se usa para validar la conexión con stderr: cualquier texto
    recibido en la ventana indica un fallo.
    """
    fd = stream.fileno()
    deadline = time.monotonic() + timeout
    data = bytearray()
    while True:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            break
        ready, _, _ = select.select([fd], [], [], remaining)
        if not ready:
            break
        chunk = os.read(fd, CHUNK_SIZE)
        if not chunk:
            break
        data += chunk
    return data.decode('utf-8', errors='replace')


class StreamParser:
    """
    Reensambla líneas a partir de un flujo de bytes leído con timeout.

    read_line() devuelve la siguiente línea completa, o None si la
    lectura agotó su espera o el flujo terminó (ver `eof`).
    """
    def __init__(self, stream: IO[bytes], timeout: float = READ_TIMEOUT) -> None:
        self._fd = stream.fileno()
        self.timeout = timeout
        self._buffer = bytearray()
        self._lines: Deque[str] = deque()
        self.eof = False

    def read_line(self) -> Optional[str]:
        if self._lines:
            return self._lines.popleft()
        if self.eof:
            return None

        ready, _, _ = select.select([self._fd], [], [], self.timeout)
        if not ready:
            return None
        chunk = os.read(self._fd, CHUNK_SIZE)
        if not chunk:
            self.eof = True
            # Línea final sin terminador
            if self._buffer:
                self._lines.append(self._decode(self._buffer))
                self._buffer.clear()
        else:
            self._feed(chunk)
        return self._lines.popleft() if self._lines else None

    def _feed(self, chunk: bytes) -> None:
        self._buffer += chunk
        while True:
            idx = self._buffer.find(b"\n")
            if idx < 0:
                break
            raw = self._buffer[:idx]
            del self._buffer[:idx + 1]
            self._lines.append(self._decode(raw))

    @staticmethod
    def _decode(raw: bytes) -> str:
        return bytes(raw).decode('utf-8', errors='replace').rstrip("\r")
