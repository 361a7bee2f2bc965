#!/usr/bin/env python3
# main.py
"""
Script principal: gráfica en vivo del ancho de banda medido con iperf3.

Lanza iperf3 contra el servidor indicado, dibuja el caudal en una gráfica
de texto que se reescala sola y permite cambiar de servidor sin salir.
"""

from typing import Optional
import typer
from config import SERVER_LIST_URL
from models import MeasurementConfig
from monitoring import has_iperf3
from shared_state import SharedState
from theme import console, err_console
from ui import Iperf3Dashboard
from utils import build_title, setup_logging

app = typer.Typer(add_completion=False)


@app.command()
def main(
    server: Optional[str] = typer.Argument(
        None,
        help='Servidor iperf3 (IP o hostname). Si se omite, se elige desde la interfaz.'
    ),
    ipv6: bool = typer.Option(
        False, '-6', '--ipv6',
        help='Usar solo IPv6.'
    ),
    udp: bool = typer.Option(
        False, '-u', '--udp',
        help='Usar UDP en lugar de TCP.'
    ),
    reverse: bool = typer.Option(
        False, '-R', '--reverse',
        help='Modo inverso: el servidor envía y el cliente recibe.'
    ),
    port: Optional[str] = typer.Option(
        None, '-p', '--port',
        help='Puerto o rango de puertos del servidor (ej: 5201 o 5200-5209).'
    ),
    log: bool = typer.Option(
        False, '-l', '--log',
        help='Guardar las muestras en un archivo de log.'
    ),
    servers_url: str = typer.Option(
        SERVER_LIST_URL, '--servers-url',
        help='URL o ruta del CSV con la lista de servidores.'
    ),
):
    """Función principal que orquesta la ejecución del script."""
    if not has_iperf3():
        err_console.print("[error]No se encontró 'iperf3'. Instálalo para continuar.[/error]")
        raise typer.Exit(code=1)

    config = MeasurementConfig(target=server, ipv6=ipv6, udp=udp, reverse=reverse, port=port)
    state = SharedState(config)

    log_file = setup_logging(server) if log else None

    console.print(f"Iniciando medición: [target]{build_title(config)}[/target]")
    dashboard = Iperf3Dashboard(state, log_file, servers_url)
    try:
        dashboard.run()
    except KeyboardInterrupt:
        console.print("\n\n[error]Programa detenido por el usuario.[/error]")
    finally:
        state.request_quit()
        state.kill_process()
        if dashboard.controller is not None:
            dashboard.controller.join(timeout=2)

        if log_file:
            log_file.close()
            console.print("[success]Log cerrado.[/success]")

        console.print("\n[success]Script finalizado.[/success]")


if __name__ == "__main__":
    app()
