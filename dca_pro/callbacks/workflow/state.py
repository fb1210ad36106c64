"""
Estado compartido de los callbacks del flujo DCA
================================================
Registro de sesiones y orquestador (instancias unicas por proceso).
"""
import uuid
from typing import Optional

from dca_pro.config import cargar_settings
from dca_pro.services.calculation_client import CalculationClient
from dca_pro.services.forecast_service import ForecastOrchestrator
from dca_pro.services.session import SessionRegistry, WorkflowSession

_registry: Optional[SessionRegistry] = None
_orchestrator: Optional[ForecastOrchestrator] = None


def get_registry() -> SessionRegistry:
    """Obtiene instancia singleton del registro de sesiones."""
    global _registry
    if _registry is None:
        _registry = SessionRegistry()
    return _registry


def get_orchestrator() -> ForecastOrchestrator:
    """Obtiene instancia singleton del orquestador de pronosticos."""
    global _orchestrator
    if _orchestrator is None:
        settings = cargar_settings()
        _orchestrator = ForecastOrchestrator(
            CalculationClient(settings.api_base_url, timeout=settings.api_timeout)
        )
    return _orchestrator


def set_orchestrator(orchestrator: Optional[ForecastOrchestrator]):
    """Reemplaza el orquestador (None vuelve a construirlo desde la configuracion)."""
    global _orchestrator
    _orchestrator = orchestrator


def obtener_sesion(session_id: str) -> WorkflowSession:
    return get_registry().obtener(session_id)


def nueva_revision() -> str:
    """Token unico para store-revision (dispara el render)"""
    return uuid.uuid4().hex
