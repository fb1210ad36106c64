"""
Helpers para graficos Plotly
============================
Composicion de trazas del grafico de produccion y figuras auxiliares.

Orden fijo de trazas: historico, pronostico, seleccion. La traza
historica es siempre la numero 0 y es la unica que acepta clicks.
"""
from typing import List, Optional, Sequence

import plotly.graph_objects as go

from dca_pro.data.models import ProductionSeries
from dca_pro.services.forecast_service import ForecastResult
from dca_pro.services.selection import AnchorPoint
from dca_pro.utils.constants import UNIDAD_CAUDAL
from dca_pro.utils.theme import PLOTLY_TEMPLATE, COLORS

TRAZA_HISTORICO = "historico"
TRAZA_PRONOSTICO = "pronostico"
TRAZA_SELECCION = "seleccion"

# curveNumber de la traza historica en clickData
CURVA_HISTORICA = 0


def componer_trazas(
    series: Optional[ProductionSeries],
    anchors: Sequence[AnchorPoint] = (),
    result: Optional[ForecastResult] = None
) -> List[go.Scatter]:
    """
    Construye las trazas a dibujar a partir del estado de la sesion.

    Args:
        series: Serie historica (None si no hay datos)
        anchors: Puntos seleccionados, en orden de seleccion
        result: Resultado del pronostico (opcional)

    Returns:
        Lista de go.Scatter en orden historico, pronostico, seleccion
    """
    if series is None or len(series) == 0:
        return []

    trazas = [
        go.Scatter(
            x=list(series.dates),
            y=list(series.flow_rates),
            mode="markers",
            marker=dict(color=COLORS["historico"], size=5, opacity=0.6),
            name="Datos históricos",
            uid=TRAZA_HISTORICO,
            showlegend=True,
        )
    ]

    if result is not None and result.curve:
        trazas.append(go.Scatter(
            x=[p.date for p in result.curve],
            y=[p.rate for p in result.curve],
            mode="lines",
            line=dict(color=COLORS["pronostico"], width=3, dash="dash"),
            name="Pronóstico",
            uid=TRAZA_PRONOSTICO,
        ))

    # Anclas que ya no apuntan dentro de la serie se ignoran
    validos = [a for a in anchors if series.contiene_indice(a.index)]
    if validos:
        trazas.append(go.Scatter(
            x=[series.dates[a.index] for a in validos],
            y=[a.value for a in validos],
            mode="markers",
            marker=dict(color=COLORS["seleccion"], size=10, line=dict(width=2, color="white")),
            name="Puntos seleccionados",
            uid=TRAZA_SELECCION,
            hoverinfo="skip",
        ))

    return trazas


def crear_figura_produccion(
    series: Optional[ProductionSeries],
    anchors: Sequence[AnchorPoint] = (),
    result: Optional[ForecastResult] = None
) -> go.Figure:
    """Figura completa del grafico de produccion"""
    if series is None:
        return crear_figura_vacia("Esperando importacion de Excel...")

    fig = go.Figure(data=componer_trazas(series, anchors, result))
    fig.update_layout(
        **PLOTLY_TEMPLATE["layout"],
        height=500,
        xaxis_title="Fecha",
        yaxis_title=f"Caudal ({UNIDAD_CAUDAL})",
        clickmode="event",
        uirevision=series.start_date,
    )
    return fig


def crear_figura_vacia(mensaje: str = "Sin datos", color_texto: str = None) -> go.Figure:
    """
    Crea una figura Plotly vacia con un mensaje centrado.

    Args:
        mensaje: Texto a mostrar en el centro del grafico
        color_texto: Color del texto (default: text_muted del theme)

    Returns:
        go.Figure con el mensaje centrado
    """
    if color_texto is None:
        color_texto = COLORS.get('text_muted', '#94A3B8')

    # Filtrar claves que se sobreescriben para evitar duplicados
    layout_base = {k: v for k, v in PLOTLY_TEMPLATE["layout"].items()
                   if k not in ("margin", "xaxis", "yaxis")}

    fig = go.Figure()
    fig.update_layout(
        **layout_base,
        xaxis={"visible": False},
        yaxis={"visible": False},
        annotations=[{
            "text": mensaje,
            "showarrow": False,
            "font": {"size": 13, "color": color_texto},
            "xref": "paper",
            "yref": "paper",
            "x": 0.5,
            "y": 0.5
        }],
        margin=dict(l=20, r=20, t=20, b=20)
    )
    return fig
