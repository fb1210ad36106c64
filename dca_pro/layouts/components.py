"""
Componentes reutilizables para DCA Pro
"""
import dash_bootstrap_components as dbc
from dash import html
from typing import List, Optional

from dca_pro.utils.constants import PASOS_WORKFLOW
from dca_pro.utils.theme import COLORS


def fa_icon(nombre: str, className: str = "", style: Optional[dict] = None) -> html.I:
    """Icono Font Awesome (la hoja de estilos la carga app.py)"""
    return html.I(className=f"fas {nombre} {className}".strip(), style=style or {})


def kpi_card(
    titulo: str,
    valor: str,
    icono: str = "fa-chart-line",
    color: str = "primary",
    destacado: bool = False
) -> dbc.Card:
    """
    Tarjeta KPI de volumen

    Args:
        titulo: Titulo del KPI
        valor: Valor principal ya formateado
        icono: Clase FontAwesome del icono
        color: Clave de COLORS para el acento
        destacado: Si True, fondo con gradiente (tarjeta EUR)
    """
    accent_color = COLORS.get(color, COLORS["primary"])

    estilo_card = {"borderRadius": "20px"}
    color_texto = accent_color
    if destacado:
        estilo_card["background"] = f"linear-gradient(135deg, {COLORS['primary']} 0%, {COLORS['indigo']} 100%)"
        color_texto = "#FFFFFF"

    return dbc.Card([
        dbc.CardBody([
            html.Div([
                fa_icon(icono, className="me-2", style={"color": color_texto}),
                html.Span(titulo, className="text-uppercase", style={
                    "fontSize": "0.7rem",
                    "letterSpacing": "0.5px",
                    "fontWeight": "700",
                    "color": "#FFFFFF" if destacado else COLORS["text_muted"]
                }),
            ], className="d-flex justify-content-center align-items-center mb-2"),
            html.H2(valor, className="text-center mb-0", style={
                "fontWeight": "800",
                "color": color_texto,
                "fontSize": "1.75rem"
            })
        ], style={"padding": "20px"})
    ], className="h-100 shadow-sm", style=estilo_card)


def workflow_stepper(paso_actual: int, pasos: List[str] = None) -> html.Div:
    """
    Indicador de pasos del flujo (1 importar, 2 seleccionar, 3 resultados)

    Args:
        paso_actual: Numero de paso activo (1-based)
        pasos: Etiquetas de los pasos
    """
    pasos = pasos or PASOS_WORKFLOW
    items = []
    for num, etiqueta in enumerate(pasos, start=1):
        completado = paso_actual > num
        activo = paso_actual == num
        color = "primary" if (activo or completado) else "light"
        items.append(html.Div([
            dbc.Badge(
                fa_icon("fa-check") if completado else str(num),
                color=color, pill=True,
                text_color="white" if (activo or completado) else "secondary",
                className="p-2 mb-1",
                style={"width": "36px", "height": "36px", "lineHeight": "20px"}
            ),
            html.Div(etiqueta, className="text-uppercase fw-bold" + ("" if activo else " opacity-50"),
                     style={"fontSize": "0.65rem", "letterSpacing": "0.5px"})
        ], className="d-flex flex-column align-items-center flex-fill"))

    progreso = (paso_actual - 1) / max(len(pasos) - 1, 1) * 100
    return html.Div([
        dbc.Progress(value=progreso, className="mb-3", style={"height": "4px"}),
        html.Div(items, className="d-flex justify-content-between")
    ], className="mx-auto", style={"maxWidth": "560px"})


def empty_state(
    mensaje: str = "Esperando importacion de Excel...",
    subtitulo: str = "Soporta .xlsx con columnas 'Date' y 'FlowRate'",
    icono: str = "fa-file-alt"
) -> html.Div:
    """Estado vacio del area del grafico"""
    return html.Div([
        fa_icon(icono, className="fa-3x mb-3", style={"color": COLORS["text_muted"]}),
        html.P(mensaje, className="fw-bold text-uppercase mb-1",
               style={"letterSpacing": "1px", "color": COLORS["text_secondary"]}),
        html.Small(subtitulo, style={"color": COLORS["text_muted"]})
    ], className="text-center py-5 opacity-75")


def alert_message(mensaje: str, tipo: str = "danger") -> dbc.Alert:
    """
    Mensaje de alerta descartable

    Args:
        mensaje: Texto del mensaje
        tipo: Tipo de alerta (success, warning, danger, info)
    """
    iconos = {
        "success": "fa-check-circle",
        "warning": "fa-exclamation-triangle",
        "danger": "fa-exclamation-circle",
        "info": "fa-info-circle"
    }

    return dbc.Alert([
        fa_icon(iconos.get(tipo, 'fa-info-circle'), className="me-2"),
        mensaje
    ], color=tipo, dismissable=True, is_open=True,
       style={
           "borderRadius": "12px",
           "border": "none",
           "borderLeft": f"4px solid {COLORS.get(tipo, COLORS['primary'])}",
       })
