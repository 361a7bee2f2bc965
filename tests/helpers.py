"""Utilidades para las pruebas del controlador."""

import os
import threading
import time
from typing import Callable, List

from data_collector import UIBridge

class RecordingBridge(UIBridge):
    """Guarda todo lo que el controlador envía a la interfaz."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.contents: List[str] = []
        self.titles: List[str] = []

    def set_content(self, text: str) -> None:
        with self._lock:
            self.contents.append(text)

    def set_title(self, title: str) -> None:
        with self._lock:
            self.titles.append(title)

    def snapshot(self) -> List[str]:
        with self._lock:
            return list(self.contents)


def wait_until(predicate: Callable[[], bool], timeout: float = 5.0, interval: float = 0.02) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(interval)
    return predicate()

def pid_alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    return True
