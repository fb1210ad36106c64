"""
Capa de Servicios para DCA Pro

Orquesta el flujo de pronostico (seleccion de puntos, llamada al
servicio de calculo) separando la lógica de negocio de los callbacks de Dash.
"""

from .selection import AnchorPoint, SelectionSet
from .forecast_service import (
    ForecastOrchestrator,
    ForecastOutcome,
    ForecastRequest,
    ForecastResult,
    CurvePoint,
    construir_request
)
from .calculation_client import CalculationClient
from .session import WorkflowSession, WorkflowStage, WorkflowSnapshot, SessionRegistry

__all__ = [
    'AnchorPoint', 'SelectionSet',
    'ForecastOrchestrator', 'ForecastOutcome', 'ForecastRequest', 'ForecastResult',
    'CurvePoint', 'construir_request',
    'CalculationClient',
    'WorkflowSession', 'WorkflowStage', 'WorkflowSnapshot', 'SessionRegistry'
]
