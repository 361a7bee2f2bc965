# shared_state.py
"""
Estado compartido entre el hilo de interfaz y el hilo de medición.

Cada campo tiene su propio cerrojo. El estado de control usa además una
condición para que el hilo de medición pueda esperar cambios sin sondear.
"""

import threading
from typing import TYPE_CHECKING, Optional

from models import ControlState, MeasurementConfig, ViewportSize

if TYPE_CHECKING:
    from monitoring import Iperf3Process


class SharedState:
    def __init__(self, config: Optional[MeasurementConfig] = None) -> None:
        self._viewport_lock = threading.Lock()
        self._viewport = ViewportSize()

        self._config_lock = threading.Lock()
        self._config = config or MeasurementConfig()

        self._control = threading.Condition()
        self._control_state = ControlState.NORMAL

        self._process_lock = threading.Lock()
        self._process: Optional["Iperf3Process"] = None

    # --- Tamaño de la vista ---

    def get_viewport(self) -> ViewportSize:
        with self._viewport_lock:
            return self._viewport

    def set_viewport(self, width: int, height: int) -> None:
        with self._viewport_lock:
            self._viewport = ViewportSize(width, height)

    # --- Configuración ---

    def get_config(self) -> MeasurementConfig:
        with self._config_lock:
            return self._config

    def set_config(self, config: MeasurementConfig) -> None:
        with self._config_lock:
            self._config = config

    # --- Estado de control ---

    def get_control_state(self) -> ControlState:
        with self._control:
            return self._control_state

    def request_reload(self, config: Optional[MeasurementConfig] = None) -> bool:
        """
        Guarda la nueva configuración (si la hay) y pide reiniciar la sesión.

        Ambas cosas ocurren bajo la condición de control: quien observe
        RELOAD_REQUESTED ya ve la configuración nueva.
        Devuelve False si la aplicación ya está saliendo.
        """
        with self._control:
            if self._control_state is ControlState.QUIT:
                return False
            if config is not None:
                self.set_config(config)
            self._control_state = ControlState.RELOAD_REQUESTED
            self._control.notify_all()
            return True

    def request_quit(self) -> None:
        with self._control:
            self._control_state = ControlState.QUIT
            self._control.notify_all()

    def consume_reload(self) -> bool:
        """Vuelve a NORMAL si había un reinicio pendiente."""
        with self._control:
            if self._control_state is ControlState.RELOAD_REQUESTED:
                self._control_state = ControlState.NORMAL
                return True
            return False

    def wait_for_change(self, timeout: Optional[float] = None) -> ControlState:
        """Bloquea mientras el estado sea NORMAL (hasta `timeout`)."""
        with self._control:
            self._control.wait_for(
                lambda: self._control_state is not ControlState.NORMAL,
                timeout=timeout,
            )
            return self._control_state

    # --- Proceso iperf3 en curso ---

    def get_process(self) -> Optional["Iperf3Process"]:
        with self._process_lock:
            return self._process

    def set_process(self, process: Optional["Iperf3Process"]) -> None:
        with self._process_lock:
            self._process = process

    def get_process_id(self) -> Optional[int]:
        with self._process_lock:
            return self._process.pid if self._process else None

    def kill_process(self) -> None:
        """Mata el proceso en curso, si lo hay, y después olvida su referencia."""
        process = self.get_process()
        if process is None:
            return
        process.terminate()
        with self._process_lock:
            if self._process is process:
                self._process = None
