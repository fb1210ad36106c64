"""
Cliente HTTP del Servicio de Calculo de Declinacion
===================================================
POST {base_url}/calculate con el request serializado como JSON.
"""
from typing import Any, Dict, TYPE_CHECKING

import requests
from loguru import logger

from dca_pro.utils.constants import ENDPOINT_CALCULO
from dca_pro.utils.exceptions import RequestError

if TYPE_CHECKING:
    from dca_pro.services.forecast_service import ForecastRequest


class CalculationClient:
    """
    Cliente del servicio externo de ajuste de curvas.

    Ejemplo de uso:
        client = CalculationClient("http://localhost:8000", timeout=30)
        data = client.calculate(request)
    """

    def __init__(self, base_url: str, timeout: float = 30.0, session: requests.Session = None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self._http = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}{ENDPOINT_CALCULO}"

    def calculate(self, request: 'ForecastRequest') -> Dict[str, Any]:
        """
        Envia el request y devuelve el cuerpo JSON decodificado.

        Raises:
            RequestError: error de red, status no exitoso o cuerpo no JSON
        """
        try:
            response = self._http.post(
                self.endpoint,
                data=request.to_json(),
                headers={'Content-Type': 'application/json'},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error de conexion con {self.endpoint}: {e}")
            raise RequestError(f"Error de conexion: {e}", endpoint=self.endpoint) from e

        if not response.ok:
            logger.error(f"Servicio de calculo respondio {response.status_code}: {response.text[:200]}")
            raise RequestError(
                f"Respuesta no exitosa del servicio de calculo ({response.status_code})",
                endpoint=self.endpoint,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                "Respuesta del servicio de calculo no es JSON valido",
                endpoint=self.endpoint,
                status_code=response.status_code,
            ) from e
