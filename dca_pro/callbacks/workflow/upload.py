"""
Callbacks de Importacion - DCA
==============================
Procesa el Excel subido e instala la serie en la sesion.
"""
from dash import callback, Output, Input, State, no_update

from dca_pro.data.excel_loader import cargar_excel_produccion
from dca_pro.utils.exceptions import ParseError
from dca_pro.utils.logger import get_logger
from .state import obtener_sesion, nueva_revision

logger = get_logger(__name__)


@callback(
    Output("store-revision", "data", allow_duplicate=True),
    Output("upload-excel", "contents"),
    Input("upload-excel", "contents"),
    State("upload-excel", "filename"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def procesar_excel(contents, filename, session_id):
    """
    Importa el archivo y reemplaza serie, seleccion y resultado.

    Si el archivo no sirve, el estado anterior queda intacto y solo se
    registra el mensaje de error. El contenido del Upload se limpia para
    permitir volver a subir el mismo archivo.
    """
    if contents is None or not session_id:
        return no_update, no_update

    sesion = obtener_sesion(session_id)
    try:
        serie, resumen = cargar_excel_produccion(contents, filename)
    except ParseError as e:
        logger.warning(f"Importacion rechazada ({filename}): {e}")
        sesion.registrar_error(e.message)
        return nueva_revision(), None

    sesion.install_series(serie, resumen)
    logger.info(f"Sesion {session_id}: importacion {resumen.to_dict()}")
    return nueva_revision(), None
