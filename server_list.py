# server_list.py
"""
Lista pública de servidores iperf3.

Descarga el CSV y lo convierte en ServerEntry. Algunas filas traen en la
columna del host el comando completo ("iperf3 -c host -p 5201-5210"),
así que se normaliza a host y puerto.
"""

import re
from typing import List, Optional, Tuple

import pandas as pd

from config import SERVER_LIST_COLUMNS, SERVER_LIST_URL
from models import MeasurementConfig, ServerEntry

RE_COMMAND_HOST = re.compile(r"-c\s+(\S+)")
RE_COMMAND_PORT = re.compile(r"-p\s+(\d+(?:-\d+)?)")


class ServerListError(Exception):
    """No se pudo descargar o interpretar la lista de servidores."""


def _clean(value) -> str:
    return "" if pd.isna(value) else str(value).strip()


def normalize_host(raw_host: str, raw_port: str) -> Tuple[str, Optional[str]]:
    """Extrae host y puerto de una celda que puede contener un comando."""
    host = raw_host
    port = raw_port or None
    m_host = RE_COMMAND_HOST.search(raw_host)
    if m_host:
        host = m_host.group(1)
        m_port = RE_COMMAND_PORT.search(raw_host)
        if m_port and not port:
            port = m_port.group(1)
    return host, port


def parse_server_list(df: pd.DataFrame) -> List[ServerEntry]:
    """Convierte el DataFrame del CSV en entradas, descartando filas sin host."""
    missing = [c for c in SERVER_LIST_COLUMNS if c not in df.columns]
    if missing:
        raise ServerListError(f"Faltan columnas en la lista de servidores: {', '.join(missing)}")

    df = df.rename(columns=SERVER_LIST_COLUMNS)
    entries: List[ServerEntry] = []
    for row in df.itertuples(index=False):
        host, port = normalize_host(_clean(row.host), _clean(row.port))
        if not host:
            continue
        entries.append(ServerEntry(
            host=host,
            port=port,
            continent=_clean(row.continent),
            country=_clean(row.country),
            site=_clean(row.site),
            provider=_clean(row.provider),
        ))
    return entries


def load_server_list(source: str = SERVER_LIST_URL) -> List[ServerEntry]:
    """Descarga (o lee de disco) el CSV de servidores."""
    try:
        df = pd.read_csv(source, dtype=str)
    except (OSError, ValueError) as e:
        raise ServerListError(f"No se pudo cargar la lista de servidores: {e}") from e
    return parse_server_list(df)


def describe_server(entry: ServerEntry) -> str:
    """Texto de una línea para el menú de selección."""
    location = ", ".join(p for p in (entry.site, entry.country, entry.continent) if p)
    port = f":{entry.port}" if entry.port else ""
    provider = f" ({entry.provider})" if entry.provider else ""
    return f"{entry.host}{port} - {location}{provider}"


def server_to_config(entry: ServerEntry, current: MeasurementConfig) -> MeasurementConfig:
    """Nueva configuración para el servidor, conservando las opciones activas."""
    return MeasurementConfig(
        target=entry.host,
        ipv6=current.ipv6,
        udp=current.udp,
        reverse=current.reverse,
        port=entry.port,
    )
