"""
Modelos de Datos de Produccion
==============================
Serie historica de caudales y resumen de importacion.
"""
from dataclasses import dataclass
from typing import Optional, Tuple

import pandas as pd

from dca_pro.utils.constants import COLUMNA_FECHA, COLUMNA_CAUDAL


@dataclass(frozen=True)
class ProductionSeries:
    """
    Serie historica de produccion alineada por indice.

    dates[i] corresponde a flow_rates[i]. Las fechas se guardan como
    strings canonicos 'YYYY-MM-DD' y conservan el orden del archivo
    (no se reordenan: si el archivo viene desordenado, la serie tambien).
    """
    dates: Tuple[str, ...]
    flow_rates: Tuple[float, ...]

    def __post_init__(self):
        if len(self.dates) != len(self.flow_rates):
            raise ValueError(
                f"dates ({len(self.dates)}) y flow_rates ({len(self.flow_rates)}) deben tener igual longitud"
            )
        if len(self.dates) == 0:
            raise ValueError("Una serie de produccion requiere al menos un punto")

    def __len__(self) -> int:
        return len(self.dates)

    @property
    def start_date(self) -> str:
        return self.dates[0]

    def contiene_indice(self, index: int) -> bool:
        """True si el indice referencia un punto de esta serie"""
        return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < len(self.dates)

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({COLUMNA_FECHA: list(self.dates), COLUMNA_CAUDAL: list(self.flow_rates)})


@dataclass(frozen=True)
class IngestionSummary:
    """Estadisticas de una importacion exitosa"""
    filas_aceptadas: int
    filas_descartadas: int
    fecha_inicio: str
    fecha_fin: str
    filename: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            'filas_aceptadas': self.filas_aceptadas,
            'filas_descartadas': self.filas_descartadas,
            'fecha_inicio': self.fecha_inicio,
            'fecha_fin': self.fecha_fin,
            'filename': self.filename,
        }
