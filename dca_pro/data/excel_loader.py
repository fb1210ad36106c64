"""
Cargador de archivos Excel de Produccion
========================================
Convierte las filas de un Excel (columnas 'Date' y 'FlowRate') en una
ProductionSeries validada.
"""
import base64
import binascii
import io
import math
import numbers
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from dca_pro.data.models import IngestionSummary, ProductionSeries
from dca_pro.utils.constants import (
    COLUMNA_CAUDAL,
    COLUMNA_FECHA,
    EXCEL_EPOCH,
    EXTENSIONES_EXCEL,
    FORMATO_FECHA,
)
from dca_pro.utils.exceptions import EmptyDatasetError, FileValidationError, ParseError
from dca_pro.utils.logger import get_logger, log_execution_time

logger = get_logger(__name__)

COLUMNAS_REQUERIDAS = [COLUMNA_FECHA, COLUMNA_CAUDAL]


def decodificar_archivo(contents: str, filename: str = None) -> bytes:
    """
    Decodifica el contenido del archivo subido desde base64.

    Args:
        contents: Contenido en formato base64 (data:application/...;base64,...)
        filename: Nombre del archivo

    Returns:
        Bytes del archivo

    Raises:
        ParseError: si el contenido no es un data URI base64 valido
    """
    try:
        _, content_string = contents.split(',', 1)
        return base64.b64decode(content_string, validate=True)
    except (AttributeError, ValueError, binascii.Error) as e:
        logger.error(f"Error decodificando archivo {filename}: {e}")
        raise ParseError("No se pudo decodificar el archivo", filename) from e


def normalizar_columnas(df: pd.DataFrame) -> pd.DataFrame:
    """Renombra columnas equivalentes (mayusculas, espacios) a 'Date' y 'FlowRate'"""
    canonicas = {col.lower(): col for col in COLUMNAS_REQUERIDAS}
    df.columns = [
        canonicas.get(str(col).strip().lower(), col) for col in df.columns
    ]
    return df


def leer_filas_excel(contenido: bytes, filename: str = None) -> List[Dict[str, Any]]:
    """
    Lee la primera hoja del libro y la devuelve como lista de filas.

    Raises:
        ParseError: si el contenido no se puede leer como tabla
    """
    try:
        df = pd.read_excel(io.BytesIO(contenido), sheet_name=0)
    except Exception as e:
        logger.error(f"Error leyendo Excel {filename}: {e}")
        raise ParseError(f"No se pudo leer el archivo como tabla: {e}", filename) from e

    df = normalizar_columnas(df)
    logger.debug(f"Columnas encontradas en {filename}: {list(df.columns)}")
    return df.to_dict('records')


def _es_faltante(valor: Any) -> bool:
    if valor is None:
        return True
    if isinstance(valor, str):
        return valor.strip() == ""
    try:
        return bool(pd.isna(valor))
    except (TypeError, ValueError):
        return False


def parsear_fecha(valor: Any) -> Optional[str]:
    """
    Resuelve una celda de fecha a 'YYYY-MM-DD' (sin hora).

    Acepta numeros de serie de Excel, fechas/datetimes y texto libre.
    Con zona horaria se conserva la fecha de pared en esa zona
    ("2023-01-01T23:00:00-05:00" -> "2023-01-01"), sin convertir a UTC.
    Devuelve None si la celda no representa una fecha valida.
    """
    if _es_faltante(valor) or isinstance(valor, (bool, np.bool_)):
        return None

    try:
        if isinstance(valor, (datetime, date)):
            ts = pd.Timestamp(valor)
        elif isinstance(valor, numbers.Number):
            serial = float(valor)
            if not math.isfinite(serial) or serial < 1:
                return None
            ts = pd.to_datetime(math.floor(serial), unit='D', origin=EXCEL_EPOCH)
        elif isinstance(valor, str):
            ts = pd.to_datetime(valor.strip(), errors='coerce')
        else:
            return None
    except (ValueError, OverflowError, pd.errors.OutOfBoundsDatetime):
        return None

    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_localize(None)
    return ts.strftime(FORMATO_FECHA)


def coercionar_caudal(valor: Any) -> Optional[float]:
    """
    Convierte la celda de caudal a float.

    Devuelve None si falta o no es un numero finito; esas filas se descartan.
    No hay validacion de rango (ceros y negativos pasan).
    """
    if _es_faltante(valor) or isinstance(valor, (bool, np.bool_)):
        return None
    try:
        numero = float(valor.strip() if isinstance(valor, str) else valor)
    except (TypeError, ValueError):
        return None
    return numero if math.isfinite(numero) else None


def ingerir_filas(
    filas: Iterable[Mapping[str, Any]],
    filename: str = None
) -> Tuple[ProductionSeries, IngestionSummary]:
    """
    Construye la serie de produccion a partir de filas tabulares.

    Las filas sin fecha valida o sin caudal numerico se descartan en
    silencio. El orden de las filas se conserva.

    Args:
        filas: Iterable de mappings con claves 'Date' y 'FlowRate'
        filename: Nombre del archivo de origen (para mensajes)

    Returns:
        Tuple (ProductionSeries, IngestionSummary)

    Raises:
        EmptyDatasetError: si ninguna fila es utilizable
    """
    fechas: List[str] = []
    caudales: List[float] = []
    descartadas = 0

    for fila in filas:
        fecha = parsear_fecha(fila.get(COLUMNA_FECHA))
        caudal = coercionar_caudal(fila.get(COLUMNA_CAUDAL))
        if fecha is None or caudal is None:
            descartadas += 1
            continue
        fechas.append(fecha)
        caudales.append(caudal)

    if not fechas:
        logger.warning(f"Archivo {filename} sin filas validas ({descartadas} descartadas)")
        raise EmptyDatasetError(COLUMNA_FECHA, COLUMNA_CAUDAL, filename)

    if descartadas:
        logger.info(f"Se descartaron {descartadas} filas con fecha o caudal invalidos")

    serie = ProductionSeries(dates=tuple(fechas), flow_rates=tuple(caudales))
    resumen = IngestionSummary(
        filas_aceptadas=len(fechas),
        filas_descartadas=descartadas,
        fecha_inicio=fechas[0],
        fecha_fin=fechas[-1],
        filename=filename,
    )
    return serie, resumen


@log_execution_time
def cargar_excel_produccion(
    contents: str,
    filename: str
) -> Tuple[ProductionSeries, IngestionSummary]:
    """
    Carga y valida un archivo Excel de produccion subido desde el navegador.

    Args:
        contents: Contenido del archivo en base64 (data URI de dcc.Upload)
        filename: Nombre del archivo

    Returns:
        Tuple (ProductionSeries, IngestionSummary)

    Raises:
        FileValidationError: extension no soportada
        ParseError: archivo ilegible o sin filas utilizables
    """
    if not filename or not filename.lower().endswith(EXTENSIONES_EXCEL):
        raise FileValidationError(
            "El archivo debe ser Excel (.xlsx)",
            filename=filename,
            expected_format=", ".join(EXTENSIONES_EXCEL)
        )

    decoded = decodificar_archivo(contents, filename)
    filas = leer_filas_excel(decoded, filename)
    serie, resumen = ingerir_filas(filas, filename)

    logger.info(
        f"Excel cargado exitosamente: {resumen.filas_aceptadas} registros "
        f"({resumen.fecha_inicio} - {resumen.fecha_fin})"
    )
    return serie, resumen
