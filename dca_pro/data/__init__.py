# Data module exports
from .models import ProductionSeries, IngestionSummary
from .excel_loader import (
    cargar_excel_produccion,
    ingerir_filas,
    parsear_fecha,
    coercionar_caudal,
    decodificar_archivo,
    leer_filas_excel
)
