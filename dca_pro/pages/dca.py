"""
Tablero de Analisis de Curvas de Declinacion
============================================
Importar produccion, elegir dos puntos y generar el pronostico.
"""
import uuid

import dash_ag_grid as dag
import dash_bootstrap_components as dbc
from dash import dcc, html

from dca_pro.config import cargar_settings
from dca_pro.layouts.components import empty_state, fa_icon, workflow_stepper
from dca_pro.utils.constants import MODELO_DEFAULT, UNIDAD_CAUDAL, obtener_opciones_modelos
from dca_pro.utils.plotly_helpers import crear_figura_vacia


def crear_componentes_estado() -> html.Div:
    """Stores de sesion y descargas ocultas"""
    return html.Div([
        dcc.Store(id="store-session-id", storage_type="session", data=uuid.uuid4().hex),
        dcc.Store(id="store-revision", storage_type="memory"),
        dcc.Download(id="download-reporte-excel"),
        dcc.Download(id="download-reporte-csv"),
    ], style={"display": "none"})


def crear_controles() -> dbc.Card:
    """Selector de modelo, boton de importacion e indicador de registros"""
    return dbc.Card([
        dbc.CardBody([
            html.Div([
                html.Div([
                    dcc.Dropdown(
                        id="select-modelo-declinacion",
                        options=obtener_opciones_modelos(),
                        value=MODELO_DEFAULT,
                        clearable=False,
                        style={"minWidth": "220px"}
                    ),
                    dcc.Upload(
                        id="upload-excel",
                        children=dbc.Button([
                            fa_icon("fa-cloud-upload-alt", className="me-2"),
                            "Importar datos"
                        ], color="primary", className="fw-bold"),
                        accept=".xlsx",
                    ),
                ], className="d-flex align-items-center gap-3"),
                dbc.Badge(id="indicador-registros", color="secondary", pill=True,
                          className="px-3 py-2 font-monospace"),
            ], className="d-flex flex-wrap justify-content-between align-items-center gap-3")
        ])
    ], className="shadow-sm mb-4", style={"borderRadius": "16px"})


def crear_area_grafico() -> dbc.Card:
    """Grafico de produccion con contador de seleccion"""
    return dbc.Card([
        dbc.CardBody([
            html.Div([
                fa_icon("fa-mouse-pointer", className="me-2"),
                html.Span("Seleccion", className="text-uppercase fw-bold small opacity-75 me-2"),
                html.Span(id="contador-seleccion", className="font-monospace fw-bold"),
                dbc.Button(
                    fa_icon("fa-trash"),
                    id="btn-limpiar-seleccion", color="link", size="sm",
                    className="text-danger ms-2 p-0", title="Limpiar seleccion",
                    style={"display": "none"}
                ),
            ], className="d-flex justify-content-center align-items-center mb-2"),
            html.Div(id="empty-state-grafico", children=empty_state()),
            html.Div(
                dcc.Graph(
                    id="grafico-produccion",
                    figure=crear_figura_vacia("Esperando importacion de Excel..."),
                    config={"displaylogo": False},
                    style={"height": "500px"}
                ),
                id="contenedor-grafico", style={"display": "none"}
            ),
        ])
    ], className="shadow mb-4", style={"borderRadius": "24px", "minHeight": "500px"})


def crear_panel_pronostico(cutoff_default: float) -> html.Div:
    """Limite economico, boton de calculo, KPIs, tabla y exportacion"""
    return html.Div([
        dbc.Card([
            dbc.CardBody([
                html.Div([
                    html.Div([
                        html.Label("Limite economico (qf)",
                                   className="text-uppercase fw-bold small mb-1"),
                        dbc.InputGroup([
                            dbc.Input(id="input-cutoff", type="number", value=cutoff_default,
                                      className="text-center fw-bold"),
                            dbc.InputGroupText(UNIDAD_CAUDAL),
                        ], size="sm"),
                    ], style={"maxWidth": "260px"}),
                    dbc.Button([
                        fa_icon("fa-bolt", className="me-2"),
                        "Generar pronostico"
                    ], id="btn-generar-pronostico", color="success",
                       className="fw-bold px-5"),
                ], className="d-flex flex-wrap justify-content-center align-items-end gap-4")
            ])
        ], className="shadow-sm mb-3", style={"borderRadius": "16px"}),

        dbc.Row(id="kpis-pronostico", className="g-3 mb-3"),

        html.Div([
            html.Div([
                dbc.Button([fa_icon("fa-file-excel", className="me-2"), "Exportar Excel"],
                           id="btn-exportar-excel", color="primary", outline=True,
                           size="sm", className="me-2"),
                dbc.Button([fa_icon("fa-file-csv", className="me-2"), "Exportar CSV"],
                           id="btn-exportar-csv", color="secondary", outline=True, size="sm"),
            ], className="d-flex justify-content-end mb-2"),
            dag.AgGrid(
                id="tabla-curva",
                columnDefs=[
                    {"field": "Date", "headerName": "Fecha"},
                    {"field": "q", "headerName": f"Caudal ({UNIDAD_CAUDAL})",
                     "valueFormatter": {"function": "d3.format(',.2f')(params.value)"}},
                ],
                rowData=[],
                columnSize="sizeToFit",
                dashGridOptions={"pagination": True, "paginationPageSize": 12},
                style={"height": "380px"},
            ),
        ], id="panel-curva", style={"display": "none"}),
    ], id="panel-pronostico", style={"display": "none"})


def layout() -> html.Div:
    """Layout de la pagina. Cada carga propone un id de sesion; el Store conserva el ya guardado."""
    settings = cargar_settings()
    return dbc.Container([
        crear_componentes_estado(),
        html.Div(id="stepper-workflow", children=workflow_stepper(1), className="py-4"),
        html.Div(id="alerta-error"),
        crear_controles(),
        crear_area_grafico(),
        crear_panel_pronostico(settings.default_cutoff),
    ], fluid=False, className="py-4")
