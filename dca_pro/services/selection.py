"""
Seleccion de Puntos Ancla
=========================

Maquina de estados de los (hasta) dos puntos historicos que el usuario
elige sobre el grafico para parametrizar el ajuste de declinacion.

Politica de desalojo: con la seleccion llena, el siguiente click valido
reemplaza el conjunto completo por un unico punto nuevo (no es una
ventana deslizante).
"""
from dataclasses import dataclass
from typing import Dict, List, Tuple

from dca_pro.utils.constants import MAX_PUNTOS_SELECCION
from dca_pro.utils.exceptions import SelectionError


@dataclass(frozen=True)
class AnchorPoint:
    """Indice en la serie + caudal capturado al momento del click"""
    index: int
    value: float

    def to_dict(self) -> Dict[str, float]:
        return {'index': self.index, 'value': self.value}


class SelectionSet:
    """
    Conjunto ordenado de puntos ancla (primero = t1, segundo = t2).

    Ejemplo de uso:
        seleccion = SelectionSet()
        seleccion.seleccionar(0, 100.0, series_length=3)
        seleccion.seleccionar(2, 81.0, series_length=3)
        seleccion.esta_completa  # True
    """

    def __init__(self, capacidad: int = MAX_PUNTOS_SELECCION):
        self.capacidad = capacidad
        self._puntos: List[AnchorPoint] = []

    def __len__(self) -> int:
        return len(self._puntos)

    def __iter__(self):
        return iter(self._puntos)

    @property
    def puntos(self) -> Tuple[AnchorPoint, ...]:
        return tuple(self._puntos)

    @property
    def esta_completa(self) -> bool:
        return len(self._puntos) == self.capacidad

    def contiene(self, index: int) -> bool:
        return any(p.index == index for p in self._puntos)

    def seleccionar(self, index: int, value: float, series_length: int) -> bool:
        """
        Aplica un click sobre el punto historico `index`.

        Args:
            index: Indice del punto clickeado
            value: Caudal del punto clickeado
            series_length: Longitud de la serie actual

        Returns:
            True si la seleccion cambio, False si fue un re-click (no-op)

        Raises:
            SelectionError: si el indice esta fuera de la serie
        """
        if isinstance(index, bool) or not isinstance(index, int) or not 0 <= index < series_length:
            raise SelectionError(
                "Indice de punto fuera de la serie actual",
                index=index, series_length=series_length
            )

        if self.contiene(index):
            return False

        punto = AnchorPoint(index=index, value=float(value))
        if len(self._puntos) >= self.capacidad:
            self._puntos = [punto]
        else:
            self._puntos.append(punto)
        return True

    def limpiar(self) -> bool:
        """Vacia la seleccion. Devuelve True si habia puntos."""
        habia_puntos = bool(self._puntos)
        self._puntos = []
        return habia_puntos

    def to_list(self) -> List[Dict[str, float]]:
        return [p.to_dict() for p in self._puntos]
