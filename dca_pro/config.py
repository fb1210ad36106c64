"""
Configuracion de DCA Pro
========================
Lee variables de entorno (y un archivo .env opcional).
"""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

from dca_pro.utils.exceptions import ConfigurationError

load_dotenv()


def _leer_float(nombre: str, default: float) -> float:
    valor = os.getenv(nombre)
    if valor is None or valor.strip() == "":
        return default
    try:
        return float(valor)
    except ValueError:
        raise ConfigurationError(f"Variable {nombre} debe ser numerica", {'valor': valor})


def _leer_int(nombre: str, default: int) -> int:
    valor = os.getenv(nombre)
    if valor is None or valor.strip() == "":
        return default
    try:
        return int(valor)
    except ValueError:
        raise ConfigurationError(f"Variable {nombre} debe ser entera", {'valor': valor})


@dataclass(frozen=True)
class Settings:
    """Parametros de ejecucion de la aplicacion"""
    api_base_url: str
    api_timeout: float
    default_cutoff: float
    port: int
    debug: bool


def cargar_settings() -> Settings:
    """
    Construye Settings desde el entorno.

    Raises:
        ConfigurationError: si algun valor numerico es invalido
    """
    timeout = _leer_float('DCA_API_TIMEOUT', 30.0)
    if timeout <= 0:
        raise ConfigurationError("DCA_API_TIMEOUT debe ser positivo", {'valor': timeout})

    return Settings(
        api_base_url=os.getenv('DCA_API_BASE_URL', 'http://localhost:8000').rstrip('/'),
        api_timeout=timeout,
        default_cutoff=_leer_float('DCA_DEFAULT_CUTOFF', 5.0),
        port=_leer_int('PORT', 8051),
        debug=os.getenv('FLASK_ENV', 'development') == 'development',
    )
