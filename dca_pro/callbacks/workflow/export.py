"""
Callbacks de Exportación - DCA
==============================

Descarga de la curva de pronostico en Excel y CSV.
"""
from dash import callback, Output, Input, State, dcc, no_update

from dca_pro.utils.exporters import ForecastExporter, nombre_archivo_reporte
from dca_pro.utils.logger import get_logger
from .state import obtener_sesion

logger = get_logger(__name__)

# Instancia global del exportador
_exporter = None


def get_exporter() -> ForecastExporter:
    """Obtiene instancia singleton del exportador."""
    global _exporter
    if _exporter is None:
        _exporter = ForecastExporter()
    return _exporter


@callback(
    Output("download-reporte-excel", "data"),
    Input("btn-exportar-excel", "n_clicks"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def exportar_curva_excel(n_clicks, session_id):
    """
    Exporta la curva de pronostico a Excel.

    Returns:
        dict: Datos para descarga del Excel (no_update si no hay resultado)
    """
    if not n_clicks or not session_id:
        return no_update

    snapshot = obtener_sesion(session_id).snapshot()
    if snapshot.result is None:
        return no_update

    contenido = get_exporter().exportar_excel(snapshot.result, snapshot.series)
    filename = nombre_archivo_reporte('xlsx')
    logger.info(f"Excel exportado: {filename}")
    return dcc.send_bytes(contenido, filename)


@callback(
    Output("download-reporte-csv", "data"),
    Input("btn-exportar-csv", "n_clicks"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def exportar_curva_csv(n_clicks, session_id):
    """Exporta la curva de pronostico a CSV."""
    if not n_clicks or not session_id:
        return no_update

    snapshot = obtener_sesion(session_id).snapshot()
    if snapshot.result is None:
        return no_update

    filename = nombre_archivo_reporte('csv')
    logger.info(f"CSV exportado: {filename}")
    return dcc.send_string(get_exporter().exportar_csv(snapshot.result, incluir_resumen=True), filename)
