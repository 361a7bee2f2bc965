# config.py
"""
Módulo de configuración.

Almacena constantes y configuraciones globales para la aplicación:
argumentos fijos de iperf3, márgenes de la gráfica, tiempos de espera
y el origen de la lista pública de servidores.
"""

from typing import Dict, List, Tuple


IPERF3_BINARY = "iperf3"

# Prefijo fijo: sin buffer entre líneas, informe cada segundo,
# duración ilimitada y salida en megabits.
IPERF3_BASE_ARGS: List[str] = [
    "--forceflush",
    "--interval", "1",
    "--time", "0",
    "--format", "m",
]

# Espera máxima de cada lectura de stdout (s)
READ_TIMEOUT = 5.0
# Ventana de validación sobre stderr (s)
VALIDATION_TIMEOUT = 5.0
# Pausa antes de relanzar tras fin de flujo / fallo de conexión (s)
RESTART_DELAY = 1.0
RETRY_DELAY = 5.0

# Espacio reservado para bordes y etiquetas alrededor de la gráfica
GRAPH_MARGIN_X = 10
GRAPH_MARGIN_Y = 8
UNITS_LABEL_WIDTH = 6

DEFAULT_VIEWPORT: Tuple[int, int] = (80, 24)

LOG_DIR = "logs"

SERVER_LIST_URL = "https://export.iperf3serverlist.net/listed_iperf3_servers.csv"

# Columnas del CSV -> campos de ServerEntry
SERVER_LIST_COLUMNS: Dict[str, str] = {
    "IP/HOST": "host",
    "PORT": "port",
    "CONTINENT": "continent",
    "COUNTRY": "country",
    "SITE": "site",
    "PROVIDER": "provider",
}
