"""
Funciones de formateo para DCA Pro
"""
from typing import Union

from dca_pro.utils.constants import UNIDAD_VOLUMEN


def formato_numero(valor: Union[float, int], decimales: int = 0) -> str:
    """
    Formatea un número con separadores de miles
    """
    if valor is None:
        return "0"

    try:
        if decimales == 0:
            return f"{int(valor):,}"
        return f"{valor:,.{decimales}f}"
    except (TypeError, ValueError):
        return str(valor)


def formato_volumen(valor: Union[float, int, None], decimales: int = 2) -> str:
    """
    Formatea un volumen acumulado con su unidad

    Args:
        valor: Volumen en MMbbl
        decimales: Cantidad de decimales

    Returns:
        String tipo "12.35 MMbbl", o "--" si no hay valor
    """
    if valor is None:
        return "--"
    return f"{formato_numero(valor, decimales)} {UNIDAD_VOLUMEN}"


def formato_registros(n: int) -> str:
    """Texto del indicador de registros cargados"""
    if not n:
        return "Sin datos cargados"
    return f"{formato_numero(n)} registros cargados"
