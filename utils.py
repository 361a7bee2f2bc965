import os
from datetime import datetime
from typing import List, Optional, TextIO

from config import LOG_DIR
from models import MeasurementConfig
from theme import console


def left_pad(text: str, width: int) -> str:
    """Rellena con espacios por la izquierda hasta `width` caracteres."""
    return text.rjust(width)


def replace_at_start(original: str, replacement: str) -> str:
    """
    Sustituye los primeros caracteres de `original` por `replacement`.

    Se cuenta en caracteres (no en bytes), así que nunca se parte un
    carácter multibyte; el resto de `original` se conserva tal cual.
    Si `replacement` es más largo que `original`, se devuelve entero.
    """
    n = min(len(replacement), len(original))
    return replacement + original[n:]


def build_title(config: MeasurementConfig) -> str:
    """Resumen legible de la configuración activa, para el título del panel."""
    if not config.target:
        return "Sin servidor seleccionado"
    parts: List[str] = [config.target]
    if config.ipv6:
        parts.append("IPv6")
    if config.udp:
        parts.append("UDP")
    if config.reverse:
        parts.append("inverso")
    if config.port:
        parts.append(f"puerto {config.port}")
    return " ".join(parts)


def setup_logging(target: Optional[str], base_dir: str = LOG_DIR) -> Optional[TextIO]:
    """Configura y abre el archivo de log si es necesario."""
    os.makedirs(base_dir, exist_ok=True)

    timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
    suffix = (target or "sin_servidor").replace(":", "_").replace("/", "_")

    log_filename = os.path.join(base_dir, f"iperf3_{suffix}_{timestamp}.log")
    try:
        log_file = open(log_filename, 'w', encoding='utf-8')
        console.print(f"Guardando log en: [filename]{log_filename}[/filename]")
        return log_file
    except OSError as e:
        console.print(f"[error]Error al abrir el archivo de log: {e}[/error]")
        return None


def write_log_line(log_file: TextIO, config: MeasurementConfig, rate: float, unit: str) -> None:
    """
    Escribe una línea CSV con una muestra: hora, servidor, valor y unidad.
    """
    ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    log_file.write(f"{ts},{config.target or ''},{rate:.3f},{unit}\n")
    log_file.flush()


def write_log_event(log_file: TextIO, message: str) -> None:
    """Escribe un evento de sesión como línea de comentario."""
    ts = datetime.now().strftime("%H:%M:%S.%f")[:-3]
    log_file.write(f"# {ts} {message}\n")
    log_file.flush()
