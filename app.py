"""
DCA Pro - Analisis de Curvas de Declinacion
===========================================
Aplicacion Dash para pronosticar produccion a partir de dos puntos ancla
"""
import sys
from dash import Dash, html, callback, Output, Input, State, ctx
import dash_bootstrap_components as dbc
from loguru import logger

from dca_pro.config import cargar_settings

# Configuracion de logging
logger.remove()
logger.add(
    sys.stdout,
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} | {message}",
    level="INFO",
    colorize=True
)

# Inicializar la aplicacion Dash
app = Dash(
    __name__,
    external_stylesheets=[
        dbc.themes.BOOTSTRAP,
        dbc.icons.FONT_AWESOME,
        "https://fonts.googleapis.com/css2?family=Inter:wght@300;400;500;600;700&display=swap"
    ],
    suppress_callback_exceptions=True,
    title="DCA Pro",
    update_title="Calculando..."
)

server = app.server

# Importar paginas
from dca_pro.pages import dca

# Importar callbacks
from dca_pro.callbacks import workflow  # noqa: F401

from dca_pro.layouts.components import fa_icon
from dca_pro.utils.constants import DECLINE_MODELS


def create_header():
    """Barra superior con marca y boton de informacion"""
    return dbc.Navbar(
        dbc.Container([
            html.Div([
                fa_icon("fa-oil-well", className="me-2 text-primary"),
                html.Span("DCA", className="fw-bold"),
                html.Span(" Pro", className="fw-light"),
            ], className="fs-4 d-flex align-items-center"),
            dbc.Button([fa_icon("fa-info-circle", className="me-1"), "Info"],
                       id="btn-info-modal", color="link", className="text-decoration-none"),
        ], className="d-flex justify-content-between"),
        color="white", className="shadow-sm border-bottom"
    )


def create_info_modal():
    """Crea el modal de información de la aplicación"""
    return dbc.Modal([
        dbc.ModalHeader(dbc.ModalTitle([
            fa_icon("fa-info-circle", className="me-2"),
            "Información de la Aplicación"
        ]), close_button=True),
        dbc.ModalBody([
            html.H5("¿Qué es DCA Pro?", className="text-primary mb-3"),
            html.P([
                "Herramienta de ", html.Strong("análisis de curvas de declinación"),
                " que extrapola la producción de un pozo a partir de dos puntos elegidos ",
                "sobre el historial y estima el recuperable final (EUR)."
            ], className="mb-4"),

            html.H5("Modelos de Declinación", className="text-primary mb-3"),
            html.Ul([
                html.Li([html.Strong(f"{modelo['nombre']}: "), modelo['tooltip']])
                for modelo in DECLINE_MODELS.values()
            ], className="mb-4"),

            html.H5("¿Cómo usar la aplicación?", className="text-success mb-3"),
            html.Ol([
                html.Li("Importa un Excel con las columnas 'Date' y 'FlowRate'"),
                html.Li("Haz clic sobre dos puntos del gráfico histórico"),
                html.Li("Ajusta el límite económico (qf) y el modelo"),
                html.Li("Haz clic en 'Generar pronostico' y exporta la curva"),
            ]),
        ]),
        dbc.ModalFooter(
            dbc.Button("Cerrar", id="btn-cerrar-info-modal", className="ms-auto")
        ),
    ], id="modal-info", size="lg", scrollable=True)


def create_layout():
    """Crea el layout principal de la aplicacion"""
    return html.Div([
        create_header(),
        create_info_modal(),
        dca.layout(),
    ], style={"minHeight": "100vh", "backgroundColor": "#F8FAFC"})


# Layout como funcion: cada carga de pagina genera un id de sesion candidato
app.layout = create_layout


# Callback para abrir/cerrar modal de información
@callback(
    Output("modal-info", "is_open"),
    Input("btn-info-modal", "n_clicks"),
    Input("btn-cerrar-info-modal", "n_clicks"),
    State("modal-info", "is_open"),
    prevent_initial_call=True
)
def toggle_info_modal(n_open, n_close, is_open):
    """Abre o cierra el modal de información"""
    if ctx.triggered_id == "btn-info-modal":
        return True
    elif ctx.triggered_id == "btn-cerrar-info-modal":
        return False
    return is_open


if __name__ == "__main__":
    settings = cargar_settings()

    logger.info(f"Iniciando DCA Pro en puerto {settings.port} (API: {settings.api_base_url})")
    # use_reloader=False evita doble ejecucion de callbacks en modo debug
    app.run(debug=settings.debug, host="0.0.0.0", port=settings.port, use_reloader=False)
