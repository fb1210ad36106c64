"""
Callbacks Modulares del Flujo DCA
=================================

Estructura dividida para mejor mantenimiento:
- upload.py: Importación del Excel de producción
- selection.py: Clicks sobre el gráfico y limpieza de selección
- forecast.py: Llamada al servicio de cálculo
- render.py: Proyección del estado de la sesión en la vista
- export.py: Exportación Excel/CSV de la curva
"""

from .upload import procesar_excel
from .selection import seleccionar_punto, limpiar_seleccion, resolver_click
from .forecast import generar_pronostico
from .render import renderizar, construir_vista
from .export import exportar_curva_excel, exportar_curva_csv

__all__ = [
    'procesar_excel',
    'seleccionar_punto',
    'limpiar_seleccion',
    'resolver_click',
    'generar_pronostico',
    'renderizar',
    'construir_vista',
    'exportar_curva_excel',
    'exportar_curva_csv'
]
