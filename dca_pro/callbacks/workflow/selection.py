"""
Callbacks de Seleccion de Puntos - DCA
======================================
Clicks sobre la traza historica y limpieza de la seleccion.
"""
from typing import Any, Dict, Optional, Tuple

from dash import callback, Output, Input, State, no_update

from dca_pro.utils.exceptions import SelectionError
from dca_pro.utils.logger import get_logger
from dca_pro.utils.plotly_helpers import CURVA_HISTORICA
from .state import obtener_sesion, nueva_revision

logger = get_logger(__name__)


def resolver_click(click_data: Optional[Dict[str, Any]]) -> Optional[Tuple[int, Optional[float]]]:
    """
    Extrae (indice, caudal) de clickData de Plotly.

    Devuelve None si el click no fue sobre la traza historica.
    """
    if not click_data or not click_data.get("points"):
        return None

    punto = click_data["points"][0]
    if punto.get("curveNumber") != CURVA_HISTORICA:
        return None

    index = punto.get("pointIndex", punto.get("pointNumber"))
    if not isinstance(index, int):
        return None
    return index, punto.get("y")


@callback(
    Output("store-revision", "data", allow_duplicate=True),
    Input("grafico-produccion", "clickData"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def seleccionar_punto(click_data, session_id):
    """Agrega el punto clickeado a la seleccion"""
    click = resolver_click(click_data)
    if click is None or not session_id:
        return no_update

    index, valor = click
    try:
        cambio = obtener_sesion(session_id).select_point(index, valor)
    except SelectionError as e:
        logger.warning(f"Click ignorado: {e}")
        return no_update

    return nueva_revision() if cambio else no_update


@callback(
    Output("store-revision", "data", allow_duplicate=True),
    Input("btn-limpiar-seleccion", "n_clicks"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def limpiar_seleccion(n_clicks, session_id):
    """Vacia la seleccion de puntos"""
    if not n_clicks or not session_id:
        return no_update

    if obtener_sesion(session_id).clear_selection():
        return nueva_revision()
    return no_update
