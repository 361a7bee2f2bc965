from collections import deque
from typing import Callable, Deque, List

from config import GRAPH_MARGIN_X
from models import ViewportSize


def window_capacity(viewport: ViewportSize) -> int:
    """Número de muestras que caben a lo ancho de la gráfica."""
    return max(viewport.width - GRAPH_MARGIN_X, 1)


class SampleWindow:
    """
    Ventana acotada de muestras, de la más antigua a la más reciente.

    La capacidad se recalcula en cada push a partir del tamaño de vista
    más reciente: encoger la terminal recorta la ventana en la siguiente
    muestra, no antes.
    """
    def __init__(self, viewport: Callable[[], ViewportSize]) -> None:
        self._viewport = viewport
        self._samples: Deque[float] = deque()

    def push(self, rate: float) -> None:
        self._samples.append(rate)
        capacity = window_capacity(self._viewport())
        while len(self._samples) > capacity:
            self._samples.popleft()

    def values(self) -> List[float]:
        return list(self._samples)

    def __len__(self) -> int:
        return len(self._samples)
