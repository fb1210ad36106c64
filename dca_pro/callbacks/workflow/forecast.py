"""
Callbacks de Pronostico - DCA
=============================
Dispara el calculo de la curva de declinacion.
"""
from dash import callback, Output, Input, State, no_update

from dca_pro.services.forecast_service import ForecastOutcome
from dca_pro.utils.logger import get_logger
from .state import get_orchestrator, obtener_sesion, nueva_revision

logger = get_logger(__name__)


@callback(
    Output("store-revision", "data", allow_duplicate=True),
    Input("btn-generar-pronostico", "n_clicks"),
    State("select-modelo-declinacion", "value"),
    State("input-cutoff", "value"),
    State("store-session-id", "data"),
    prevent_initial_call=True
)
def generar_pronostico(n_clicks, decline_type, cutoff, session_id):
    """
    Ejecuta el pronostico para la sesion actual.

    Toda salida que toco la sesion (resultado, error, respuesta obsoleta
    o aviso de calculo en curso) redibuja la vista, de modo que el boton
    vuelve a habilitarse al liberarse el calculo.
    """
    if not n_clicks or not session_id:
        return no_update

    sesion = obtener_sesion(session_id)
    outcome = get_orchestrator().ejecutar(sesion, decline_type, cutoff)
    logger.info(f"Pronostico sesion {session_id}: {outcome.value}")

    if outcome is ForecastOutcome.INCOMPLETE_SELECTION:
        return no_update
    return nueva_revision()
