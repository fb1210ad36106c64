"""
Excepciones Personalizadas para DCA Pro
Define excepciones especificas para mejorar el manejo de errores.
"""


class DCAError(Exception):
    """
    Excepcion base para la aplicacion DCA Pro.
    Todas las excepciones personalizadas heredan de esta.
    """

    def __init__(self, message: str, details: dict = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} | Detalles: {self.details}"
        return self.message


# ============================================================================
# Excepciones de Importacion de Datos
# ============================================================================

class ParseError(DCAError):
    """El archivo no pudo leerse como tabla o no tiene filas utilizables"""

    def __init__(self, message: str, filename: str = None):
        details = {}
        if filename:
            details['filename'] = filename
        super().__init__(message, details)


class FileValidationError(ParseError):
    """Error al validar un archivo (extension, formato)"""

    def __init__(self, message: str, filename: str = None, expected_format: str = None):
        super().__init__(message, filename)
        if expected_format:
            self.details['expected_format'] = expected_format


class EmptyDatasetError(ParseError):
    """Ninguna fila del archivo tiene los dos campos requeridos"""

    def __init__(self, date_field: str, flow_field: str, filename: str = None):
        super().__init__(
            f"No se encontraron datos validos. Columnas requeridas: '{date_field}', '{flow_field}'",
            filename
        )
        self.date_field = date_field
        self.flow_field = flow_field


# ============================================================================
# Excepciones de Seleccion
# ============================================================================

class SelectionError(DCAError):
    """Indice de punto fuera de los limites de la serie actual"""

    def __init__(self, message: str, index: int = None, series_length: int = None):
        details = {}
        if index is not None:
            details['index'] = index
        if series_length is not None:
            details['series_length'] = series_length
        super().__init__(message, details)


# ============================================================================
# Excepciones de Conexion Externa
# ============================================================================

class RequestError(DCAError):
    """Fallo de red, respuesta no exitosa o cuerpo mal formado del servicio de calculo"""

    def __init__(self, message: str, endpoint: str = None, status_code: int = None):
        details = {}
        if endpoint:
            details['endpoint'] = endpoint
        if status_code:
            details['status_code'] = status_code
        super().__init__(message, details)
        self.status_code = status_code


# ============================================================================
# Excepciones de Configuracion
# ============================================================================

class ConfigurationError(DCAError):
    """Error en la configuracion del sistema"""
    pass
