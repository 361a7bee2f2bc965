# theme.py
"""Consola de rich con los estilos usados fuera de la interfaz de textual."""

from rich.console import Console
from rich.theme import Theme

APP_STYLES = {
    "error":    "bold red",
    "success":  "green",
    "filename": "blue",
    "target":   "bold magenta",
}

console = Console(theme=Theme(APP_STYLES), highlight=False)
# Los errores de arranque van a stderr para no mezclarse con la salida normal
err_console = Console(theme=Theme(APP_STYLES), stderr=True, highlight=False)
