"""
Constantes centralizadas del proyecto DCA Pro
=============================================
Evita duplicacion de valores en multiples archivos.
"""

# ============================================================================
# Modelos de declinacion disponibles
# ============================================================================

DECLINE_MODELS = {
    'exponential': {
        'nombre': 'Modelo Exponencial',
        'tooltip': 'Tasa de declinacion constante (b = 0). Conservador, tipico de pozos con flujo dominado por frontera.'
    },
    'hyperbolic': {
        'nombre': 'Modelo Hiperbolico',
        'tooltip': 'Tasa de declinacion que disminuye con el tiempo (0 < b < 1). Comun en pozos de baja permeabilidad.'
    },
    'harmonic': {
        'nombre': 'Modelo Armonico',
        'tooltip': 'Caso particular hiperbolico con b = 1. El pronostico mas optimista.'
    },
}

# Modelo por defecto
MODELO_DEFAULT = 'exponential'


def obtener_opciones_modelos() -> list:
    """
    Genera opciones para dropdown de modelos de declinacion con tooltips.

    Returns:
        Lista de dicts con label, value y title (tooltip) para dropdown
    """
    return [
        {
            "label": info['nombre'],
            "value": codigo,
            "title": info['tooltip']
        }
        for codigo, info in DECLINE_MODELS.items()
    ]


def obtener_nombre_modelo(codigo: str) -> str:
    """Obtiene el nombre legible de un modelo por su codigo"""
    modelo = DECLINE_MODELS.get(codigo)
    return modelo['nombre'] if modelo else codigo


# ============================================================================
# Formato del archivo de entrada
# ============================================================================

COLUMNA_FECHA = 'Date'
COLUMNA_CAUDAL = 'FlowRate'

# Solo formato OpenXML: pd.read_excel lo lee con openpyxl
EXTENSIONES_EXCEL = ('.xlsx',)

# Origen de los numeros de serie de fecha de Excel (sistema 1900)
EXCEL_EPOCH = '1899-12-30'

FORMATO_FECHA = '%Y-%m-%d'


# ============================================================================
# Seleccion de puntos y pronostico
# ============================================================================

MAX_PUNTOS_SELECCION = 2

ENDPOINT_CALCULO = '/calculate'

UNIDAD_CAUDAL = 'STB/d'
UNIDAD_VOLUMEN = 'MMbbl'

NOMBRE_REPORTE = 'DCA_Analysis_Report'

# Pasos del asistente, en orden
PASOS_WORKFLOW = ["Importar datos", "Seleccionar puntos", "Ver resultados"]
