"""
Tema visual y configuracion de colores para DCA Pro
Paleta: Slate / Blue
"""

# Colores del sistema
COLORS = {
    # Fondos
    "bg_primary": "#F8FAFC",
    "bg_dark": "#0F172A",

    # Colores primarios
    "primary": "#2563EB",
    "indigo": "#4F46E5",

    # Estados semanticos
    "success": "#10B981",
    "warning": "#F59E0B",
    "danger": "#EF4444",

    # Grises
    "text_primary": "#1F2933",
    "text_secondary": "#475569",
    "text_muted": "#94A3B8",
    "grid_color": "#F1F5F9",

    # Trazas del grafico de produccion
    "historico": "#2563EB",
    "pronostico": "#EF4444",
    "seleccion": "#10B981",
}


# Template de Plotly para el grafico de produccion
PLOTLY_TEMPLATE = {
    "layout": {
        "paper_bgcolor": "rgba(0, 0, 0, 0)",
        "plot_bgcolor": "rgba(0, 0, 0, 0)",
        "font": {
            "color": COLORS["text_secondary"],
            "family": "Inter, sans-serif",
            "size": 13
        },
        "xaxis": {
            "showgrid": False,
            "zeroline": False,
        },
        "yaxis": {
            "gridcolor": COLORS["grid_color"],
        },
        "legend": {
            "orientation": "h",
            "y": 1.1,
            "x": 0.5,
            "xanchor": "center",
            "font": {"size": 14, "color": COLORS["text_primary"], "family": "Inter, sans-serif"},
            "itemsizing": "constant",
        },
        "hovermode": "closest",
        "margin": {"l": 60, "r": 20, "t": 40, "b": 50}
    }
}
