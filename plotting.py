import operator
import re
from typing import Callable, List, Sequence, Tuple

import plotext as plt

from config import GRAPH_MARGIN_X, GRAPH_MARGIN_Y, UNITS_LABEL_WIDTH
from models import ViewportSize
from utils import left_pad, replace_at_start


# -----------------------------------------------------------------------------
# Escalado de unidades
# -----------------------------------------------------------------------------

FACTOR = 1000.0

# (comparación, umbral, multiplicador, etiqueta); se evalúa en orden y
# gana la primera que cumple la media. La unidad nativa es Mbits/s.
SCALE_TIERS: List[Tuple[Callable[[float, float], bool], float, float, str]] = [
    (operator.gt, FACTOR ** 3, 1 / FACTOR ** 3, "Pbits"),
    (operator.gt, FACTOR ** 2, 1 / FACTOR ** 2, "Tbits"),
    (operator.gt, FACTOR,      1 / FACTOR,      "Gbits"),
    (operator.lt, FACTOR ** -2, FACTOR ** 2,    "bits"),
    (operator.lt, FACTOR ** -1, FACTOR,         "Kbits"),
]
NATIVE_UNIT = "Mbits"


def pick_scale(mean: float) -> Tuple[float, str]:
    """Multiplicador y etiqueta para una media en Mbits/s."""
    for compare, threshold, multiplier, label in SCALE_TIERS:
        if compare(mean, threshold):
            return multiplier, label
    return 1.0, NATIVE_UNIT


def scale(samples: Sequence[float]) -> Tuple[List[float], str]:
    """
    Escala toda la ventana según su media.

    El multiplicador se aplica a todas las muestras, así que la unidad
    mostrada puede cambiar entre dos repintados si la media cruza un umbral.
    """
    if not samples:
        return [], NATIVE_UNIT
    mean = sum(samples) / len(samples)
    multiplier, label = pick_scale(mean)
    return [s * multiplier for s in samples], label


# -----------------------------------------------------------------------------
# Gráfica en texto
# -----------------------------------------------------------------------------

RE_ANSI = re.compile(r"\x1b\[[0-9;]*m")


def graph_size(viewport: ViewportSize) -> Tuple[int, int]:
    """Ancho y alto de la gráfica descontando márgenes."""
    return (
        max(viewport.width - GRAPH_MARGIN_X, 1),
        max(viewport.height - GRAPH_MARGIN_Y, 1),
    )


def render_graph(samples: Sequence[float], label: str, viewport: ViewportSize) -> str:
    """
    Dibuja la ventana escalada y superpone la etiqueta de unidad al
    principio de la primera línea.
    """
    width, height = graph_size(viewport)

    plt.clf()
    plt.theme("clear")
    plt.limitsize(False, False)
    plt.plotsize(width, height)
    plt.xticks([])
    plt.plot(list(samples))
    content = RE_ANSI.sub("", plt.build())

    return replace_at_start(content, left_pad(label, UNITS_LABEL_WIDTH))
