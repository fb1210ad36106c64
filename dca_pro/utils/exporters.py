"""
Módulo de Exportación para DCA Pro

Exporta la curva de pronostico (y los volumenes resumen) a CSV o Excel
para descarga desde la aplicacion.
"""

from datetime import datetime
from io import BytesIO, StringIO
from typing import Optional

import pandas as pd
from loguru import logger
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from dca_pro.data.models import ProductionSeries
from dca_pro.services.forecast_service import ForecastResult
from dca_pro.utils.constants import NOMBRE_REPORTE, UNIDAD_VOLUMEN

HOJA_PRONOSTICO = 'Forecast'
HOJA_RESUMEN = 'Resumen'
HOJA_HISTORICO = 'Historico'


class ForecastExporter:
    """
    Exportador de resultados de pronostico.

    Ejemplo de uso:
        exporter = ForecastExporter()
        csv_string = exporter.exportar_csv(result)
        excel_bytes = exporter.exportar_excel(result, series)
    """

    def curva_dataframe(self, result: ForecastResult) -> pd.DataFrame:
        """Curva como DataFrame con columnas Date, q"""
        return pd.DataFrame(result.curve_records(), columns=['Date', 'q'])

    def exportar_csv(self, result: ForecastResult, incluir_resumen: bool = False) -> str:
        """
        Exporta la curva a CSV.

        Args:
            result: Resultado del pronostico
            incluir_resumen: Si incluir volumenes como comentario inicial

        Returns:
            String con contenido CSV
        """
        output = StringIO()

        if incluir_resumen:
            output.write(f"# DCA Pro - Exportación {datetime.now().strftime('%Y-%m-%d %H:%M')}\n")
            output.write(f"# Np observado ({UNIDAD_VOLUMEN}): {result.observed_volume:.4f}\n")
            output.write(f"# Np extrapolado ({UNIDAD_VOLUMEN}): {result.extrapolated_volume:.4f}\n")
            output.write(f"# EUR ({UNIDAD_VOLUMEN}): {result.total_volume:.4f}\n")
            output.write("#\n")

        self.curva_dataframe(result).to_csv(output, index=False)

        logger.info("CSV exportado exitosamente")
        return output.getvalue()

    def exportar_excel(
        self,
        result: ForecastResult,
        series: Optional[ProductionSeries] = None
    ) -> bytes:
        """
        Exporta a Excel con hojas Forecast, Resumen e (opcional) Historico.

        Returns:
            Bytes del archivo Excel
        """
        buffer = BytesIO()

        with pd.ExcelWriter(buffer, engine='openpyxl') as writer:
            self.curva_dataframe(result).to_excel(writer, sheet_name=HOJA_PRONOSTICO, index=False)

            df_resumen = pd.DataFrame([
                {'Métrica': 'Producción histórica', 'Valor': result.observed_volume, 'Unidad': UNIDAD_VOLUMEN},
                {'Métrica': 'Producción pronosticada', 'Valor': result.extrapolated_volume, 'Unidad': UNIDAD_VOLUMEN},
                {'Métrica': 'EUR total', 'Valor': result.total_volume, 'Unidad': UNIDAD_VOLUMEN},
                {'Métrica': 'Fecha generación', 'Valor': datetime.now().strftime('%Y-%m-%d %H:%M'), 'Unidad': ''},
            ])
            df_resumen.to_excel(writer, sheet_name=HOJA_RESUMEN, index=False)

            if series is not None:
                series.to_dataframe().to_excel(writer, sheet_name=HOJA_HISTORICO, index=False)

            self._aplicar_formato_excel(writer)

        buffer.seek(0)
        logger.info("Excel exportado exitosamente")
        return buffer.getvalue()

    def _aplicar_formato_excel(self, writer):
        """Aplica formato a hojas Excel"""
        workbook = writer.book

        header_fill = PatternFill(start_color='1e293b', end_color='1e293b', fill_type='solid')
        header_font = Font(color='FFFFFF', bold=True)
        thin_border = Border(
            left=Side(style='thin'),
            right=Side(style='thin'),
            top=Side(style='thin'),
            bottom=Side(style='thin')
        )

        for sheet_name in workbook.sheetnames:
            ws = workbook[sheet_name]

            for cell in ws[1]:
                cell.fill = header_fill
                cell.font = header_font
                cell.alignment = Alignment(horizontal='center')
                cell.border = thin_border

            # Ajustar ancho columnas
            for column in ws.columns:
                max_length = max(len(str(cell.value)) for cell in column if cell.value is not None)
                ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)


def nombre_archivo_reporte(extension: str = 'xlsx') -> str:
    """Nombre del archivo de descarga"""
    return f"{NOMBRE_REPORTE}.{extension}"
