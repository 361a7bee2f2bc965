# -*- coding: utf-8 -*-
"""
Controlador de sesiones de medición.

Un hilo dedicado lanza iperf3 con la configuración activa, valida la
conexión leyendo stderr, y después convierte cada línea de stdout en una
muestra que se escala, se dibuja y se entrega a la interfaz. Cuando la
interfaz pide un reinicio, la sesión en curso se aborta y se lanza otra
con la configuración nueva.
"""

import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional, TextIO

from config import (
    IPERF3_BINARY, READ_TIMEOUT, RESTART_DELAY, RETRY_DELAY, VALIDATION_TIMEOUT,
)
from models import ControlState, MeasurementConfig
from monitoring import Iperf3Process, SpawnError
from parsing import StreamParser, parse_iperf3_line, read_with_deadline
from plotting import render_graph, scale
from sample_window import SampleWindow
from shared_state import SharedState
from utils import build_title, write_log_event, write_log_line


IDLE_MESSAGE = (
    "Sin servidor seleccionado.\n"
    "Pulsa 'e' para introducir uno o 's' para elegirlo de la lista."
)


class UIBridge(ABC):
    """
    Canal de un solo sentido hacia el hilo de interfaz.
    Las implementaciones no deben bloquear al hilo de medición.
    """
    @abstractmethod
    def set_content(self, text: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_title(self, title: str) -> None:
        raise NotImplementedError


class SessionEnd(Enum):
    STREAM_END = "stream_end"
    ABORTED = "aborted"
    SPAWN_FAILED = "spawn_failed"
    CONNECTION_FAILED = "connection_failed"
    ERROR = "error"


class SessionController(threading.Thread):
    """
    Bucle de sesiones: se ejecuta hasta que el estado de control sea QUIT.
    """
    def __init__(
        self,
        state: SharedState,
        bridge: UIBridge,
        log_file: Optional[TextIO] = None,
        binary: str = IPERF3_BINARY,
        read_timeout: float = READ_TIMEOUT,
        validation_timeout: float = VALIDATION_TIMEOUT,
        restart_delay: float = RESTART_DELAY,
        retry_delay: float = RETRY_DELAY,
    ) -> None:
        super().__init__(daemon=True, name="iperf3-session")
        self.state = state
        self.bridge = bridge
        self.log_file = log_file
        self.binary = binary
        self.read_timeout = read_timeout
        self.validation_timeout = validation_timeout
        self.restart_delay = restart_delay
        self.retry_delay = retry_delay

    def run(self) -> None:
        try:
            while self.state.get_control_state() is not ControlState.QUIT:
                self.state.consume_reload()
                config = self.state.get_config()
                self.bridge.set_title(build_title(config))

                if not config.target:
                    self.bridge.set_content(IDLE_MESSAGE)
                    self.state.wait_for_change()
                    continue

                try:
                    reason = self.run_session(config)
                except Exception as e:
                    # El hilo sigue vivo: el error se muestra y se reintenta
                    self.bridge.set_content(f"Error en la sesión de medición: {e}")
                    self._log_event(f"error: {e!r}")
                    reason = SessionEnd.ERROR
                self._log_event(f"sesión terminada: {reason.value}")

                if reason is SessionEnd.SPAWN_FAILED:
                    # Sin reintento hasta que llegue otra orden
                    self.state.wait_for_change()
                elif reason in (SessionEnd.CONNECTION_FAILED, SessionEnd.ERROR):
                    self.state.wait_for_change(self.retry_delay)
                elif reason is SessionEnd.STREAM_END:
                    self.state.wait_for_change(self.restart_delay)
        finally:
            self.state.kill_process()

    def run_session(self, config: MeasurementConfig) -> SessionEnd:
        """Una sesión completa: lanzar, validar, leer y dibujar."""
        process = Iperf3Process(config, self.binary)
        try:
            process.start()
        except SpawnError as e:
            self.bridge.set_content(str(e))
            return SessionEnd.SPAWN_FAILED

        self.state.set_process(process)
        self._log_event(f"iperf3 lanzado (pid {self.state.get_process_id()}): {' '.join(process.cmd)}")
        try:
            # Una salida pedida antes de registrar el proceso no lo habría matado
            if self.state.get_control_state() is ControlState.QUIT:
                return SessionEnd.ABORTED
            self.bridge.set_content(f"Comprobando conexión con {config.target}...")
            stderr_text = read_with_deadline(process.stderr, self.validation_timeout)
            if stderr_text:
                error_text = stderr_text.strip() or "iperf3 escribió en stderr"
                self.bridge.set_content(
                    f"{error_text}... revisa el servidor o elige otro"
                )
                self._log_event(f"fallo de conexión: {error_text}")
                return SessionEnd.CONNECTION_FAILED
            return self._stream(process, config)
        finally:
            self.state.kill_process()
            process.terminate()
            process.close()

    def _stream(self, process: Iperf3Process, config: MeasurementConfig) -> SessionEnd:
        parser = StreamParser(process.stdout, self.read_timeout)
        window = SampleWindow(self.state.get_viewport)

        while True:
            if self.state.get_control_state() is not ControlState.NORMAL:
                return SessionEnd.ABORTED

            line = parser.read_line()
            if line is None:
                if parser.eof:
                    return SessionEnd.STREAM_END
                continue

            sample = parse_iperf3_line(line)
            if sample is None:
                continue

            window.push(sample.megabits)
            scaled, label = scale(window.values())
            self.bridge.set_content(render_graph(scaled, label, self.state.get_viewport()))
            if self.log_file:
                write_log_line(self.log_file, config, sample.rate, sample.unit)

    def _log_event(self, message: str) -> None:
        if self.log_file:
            try:
                write_log_event(self.log_file, message)
            except (OSError, ValueError) as e:
                # Log inservible (disco lleno, cerrado...): se deja de escribir
                self.log_file = None
                self.bridge.set_content(f"Log desactivado: {e}")
