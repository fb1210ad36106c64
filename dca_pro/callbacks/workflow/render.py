"""
Callback de Renderizado - DCA
=============================
Proyecta el estado de la sesion en grafico, pasos, indicadores y KPIs.
"""
from typing import Any, Dict

import dash_bootstrap_components as dbc
from dash import callback, Output, Input

from dca_pro.layouts.components import alert_message, kpi_card, workflow_stepper
from dca_pro.services.session import WorkflowSnapshot, WorkflowStage
from dca_pro.utils.constants import MAX_PUNTOS_SELECCION
from dca_pro.utils.formatters import formato_registros, formato_volumen
from dca_pro.utils.plotly_helpers import crear_figura_produccion
from .state import obtener_sesion

OCULTO = {"display": "none"}
VISIBLE = {"display": "block"}


def _crear_kpis(snapshot: WorkflowSnapshot) -> list:
    result = snapshot.result
    if result is None:
        return []
    return [
        dbc.Col(kpi_card("Producción histórica", formato_volumen(result.observed_volume),
                         icono="fa-chart-bar", color="primary"), md=4),
        dbc.Col(kpi_card("Producción pronosticada", formato_volumen(result.extrapolated_volume),
                         icono="fa-calculator", color="indigo"), md=4),
        dbc.Col(kpi_card("EUR total", formato_volumen(result.total_volume),
                         icono="fa-oil-can", destacado=True), md=4),
    ]


def construir_vista(snapshot: WorkflowSnapshot) -> Dict[str, Any]:
    """Valores de todos los componentes visibles para un estado dado"""
    hay_datos = snapshot.stage is not WorkflowStage.NO_DATA
    seleccion_completa = snapshot.stage is WorkflowStage.READY_OR_COMPLETE
    n_registros = len(snapshot.series) if snapshot.series is not None else 0

    return {
        "figura": crear_figura_produccion(snapshot.series, snapshot.anchors, snapshot.result),
        "estilo_grafico": VISIBLE if hay_datos else OCULTO,
        "estilo_vacio": OCULTO if hay_datos else VISIBLE,
        "stepper": workflow_stepper(snapshot.step_number),
        "alerta": alert_message(snapshot.error, "danger") if snapshot.error else None,
        "indicador": formato_registros(n_registros),
        "indicador_color": "success" if hay_datos else "secondary",
        "contador": f"{len(snapshot.anchors)} / {MAX_PUNTOS_SELECCION}",
        "estilo_limpiar": {"display": "inline-block"} if snapshot.anchors else OCULTO,
        "estilo_panel": VISIBLE if seleccion_completa else OCULTO,
        "kpis": _crear_kpis(snapshot),
        "estilo_curva": VISIBLE if snapshot.result is not None else OCULTO,
        "filas_curva": snapshot.result.curve_records() if snapshot.result is not None else [],
        "generar_deshabilitado": snapshot.in_flight,
    }


@callback(
    Output("grafico-produccion", "figure"),
    Output("contenedor-grafico", "style"),
    Output("empty-state-grafico", "style"),
    Output("stepper-workflow", "children"),
    Output("alerta-error", "children"),
    Output("indicador-registros", "children"),
    Output("indicador-registros", "color"),
    Output("contador-seleccion", "children"),
    Output("btn-limpiar-seleccion", "style"),
    Output("panel-pronostico", "style"),
    Output("kpis-pronostico", "children"),
    Output("panel-curva", "style"),
    Output("tabla-curva", "rowData"),
    Output("btn-generar-pronostico", "disabled"),
    Input("store-revision", "data"),
    Input("store-session-id", "data"),
)
def renderizar(_revision, session_id):
    """Renderiza la vista completa desde la sesion"""
    sesion = obtener_sesion(session_id) if session_id else None
    if sesion is None:
        return tuple(construir_vista(_snapshot_vacio()).values())
    return tuple(construir_vista(sesion.snapshot()).values())


def _snapshot_vacio() -> WorkflowSnapshot:
    return WorkflowSnapshot(
        series=None, summary=None, anchors=(), result=None, error=None,
        in_flight=False, stage=WorkflowStage.NO_DATA, step_number=1,
    )
