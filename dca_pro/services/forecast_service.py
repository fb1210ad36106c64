"""
Servicio de Pronostico por Declinacion para DCA Pro

Orquesta la llamada al servicio externo de calculo:
1. Construccion del request a partir de serie + anclas + modelo + qf
2. Control de una sola solicitud en curso por sesion
3. Validacion de la respuesta
4. Descarte de respuestas obsoletas (la serie o la seleccion cambiaron)

El ajuste matematico (exponencial/hiperbolico/armonico) lo hace el
servicio externo; aqui solo se define el contrato.
"""

import json
import math
import uuid
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple, TYPE_CHECKING

from loguru import logger

from dca_pro.data.excel_loader import parsear_fecha
from dca_pro.data.models import ProductionSeries
from dca_pro.services.selection import AnchorPoint
from dca_pro.utils.constants import DECLINE_MODELS, MAX_PUNTOS_SELECCION, obtener_nombre_modelo
from dca_pro.utils.exceptions import RequestError

if TYPE_CHECKING:
    from dca_pro.services.session import WorkflowSession

MENSAJE_FALLO_CALCULO = "Fallo el calculo. Revise los parametros o el estado del servidor."
MENSAJE_CALCULO_EN_CURSO = "Hay un calculo en curso. Espere a que termine para volver a calcular."


@dataclass(frozen=True)
class ForecastRequest:
    """Cuerpo JSON de POST /calculate"""
    t1: int
    q1: float
    t2: int
    q2: float
    original_q: Tuple[float, ...]
    decline_type: str
    start_date: str
    qf: Any

    def to_payload(self) -> Dict[str, Any]:
        return {
            't1': self.t1,
            'q1': self.q1,
            't2': self.t2,
            'q2': self.q2,
            'original_q': list(self.original_q),
            'decline_type': self.decline_type,
            'start_date': self.start_date,
            'qf': self.qf,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_payload(), separators=(',', ':'))


@dataclass(frozen=True)
class CurvePoint:
    date: str
    rate: float

    def to_dict(self) -> Dict[str, Any]:
        return {'Date': self.date, 'q': self.rate}


def _numero(data: Dict[str, Any], clave: str) -> float:
    valor = data.get(clave)
    if isinstance(valor, bool) or not isinstance(valor, (int, float)) or not math.isfinite(valor):
        raise RequestError(f"Respuesta mal formada: '{clave}' debe ser numerico")
    return float(valor)


@dataclass(frozen=True)
class ForecastResult:
    """Volumenes resumen y curva pronosticada devueltos por el servicio"""
    observed_volume: float
    extrapolated_volume: float
    total_volume: float
    curve: Tuple[CurvePoint, ...]

    @classmethod
    def from_payload(cls, data: Any) -> 'ForecastResult':
        """
        Valida el cuerpo de respuesta del servicio de calculo.

        Raises:
            RequestError: si el esquema no coincide con el contrato
        """
        if not isinstance(data, dict):
            raise RequestError("Respuesta mal formada: se esperaba un objeto JSON")

        curva_raw = data.get('curve')
        if not isinstance(curva_raw, list):
            raise RequestError("Respuesta mal formada: 'curve' debe ser una lista")

        curva = []
        for i, punto in enumerate(curva_raw):
            if not isinstance(punto, dict):
                raise RequestError(f"Respuesta mal formada: punto {i} de la curva no es un objeto")
            fecha = punto.get('Date')
            fecha_norm = parsear_fecha(fecha) if isinstance(fecha, str) else None
            if fecha_norm is None:
                raise RequestError(f"Respuesta mal formada: fecha invalida en punto {i} de la curva")
            curva.append(CurvePoint(date=fecha_norm, rate=_numero(punto, 'q')))

        return cls(
            observed_volume=_numero(data, 'Np_observed'),
            extrapolated_volume=_numero(data, 'Np_extrapolated'),
            total_volume=_numero(data, 'Np_total'),
            curve=tuple(curva),
        )

    def curve_records(self) -> List[Dict[str, Any]]:
        return [p.to_dict() for p in self.curve]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'Np_observed': self.observed_volume,
            'Np_extrapolated': self.extrapolated_volume,
            'Np_total': self.total_volume,
            'curve': self.curve_records(),
        }


class ForecastOutcome(Enum):
    """Resultado de un intento de pronostico"""
    APPLIED = "applied"
    FAILED = "failed"
    STALE = "stale"
    REJECTED_IN_FLIGHT = "rejected_in_flight"
    INCOMPLETE_SELECTION = "incomplete_selection"


@dataclass(frozen=True)
class RequestTicket:
    """Identidad (serie, seleccion) con la que se construyo un request"""
    request_id: str
    series_version: int
    selection_version: int
    request: ForecastRequest

    @property
    def identidad(self) -> Tuple[int, int]:
        return (self.series_version, self.selection_version)


def coercionar_cutoff(valor: Any) -> Any:
    """
    Convierte qf a float cuando es posible; si no, lo deja tal cual
    para que el servicio externo lo rechace.
    """
    if valor is None or isinstance(valor, bool):
        return valor
    if isinstance(valor, (int, float)):
        return float(valor)
    if isinstance(valor, str):
        try:
            return float(valor.strip())
        except ValueError:
            return valor
    return valor


def construir_request(
    series: ProductionSeries,
    anclas: Sequence[AnchorPoint],
    decline_type: str,
    qf: Any
) -> ForecastRequest:
    """
    Construye el request de forma determinista.

    t1/q1 es la primera ancla seleccionada y t2/q2 la segunda, sin
    reordenar por fecha. Los valores de las anclas se envian tal como
    se capturaron.

    Raises:
        ValueError: si no hay exactamente dos anclas
        RequestError: si el modelo de declinacion no existe
    """
    if len(anclas) != MAX_PUNTOS_SELECCION:
        raise ValueError(f"Se requieren {MAX_PUNTOS_SELECCION} puntos ancla, hay {len(anclas)}")
    if decline_type not in DECLINE_MODELS:
        raise RequestError(f"Modelo de declinacion desconocido: {decline_type}")

    primero, segundo = anclas
    return ForecastRequest(
        t1=primero.index,
        q1=primero.value,
        t2=segundo.index,
        q2=segundo.value,
        original_q=tuple(series.flow_rates),
        decline_type=decline_type,
        start_date=series.start_date,
        qf=coercionar_cutoff(qf),
    )


class ForecastOrchestrator:
    """
    Ejecuta pronosticos contra el servicio de calculo.

    Garantiza a lo sumo una solicitud en curso por sesion y descarta
    respuestas cuya identidad (serie, seleccion) ya no es la actual.

    Ejemplo de uso:
        orquestador = ForecastOrchestrator(CalculationClient(settings.api_base_url))
        outcome = orquestador.ejecutar(sesion, "hyperbolic", 5)

        if outcome is ForecastOutcome.APPLIED:
            print(sesion.result.total_volume)
    """

    def __init__(self, client):
        """
        Args:
            client: Objeto con metodo calculate(ForecastRequest) -> dict
        """
        self.client = client

    def preparar(self, session: 'WorkflowSession', decline_type: str, qf: Any):
        """
        Reserva el slot de calculo de la sesion y construye el request.

        Returns:
            Tuple (RequestTicket o None, ForecastOutcome o None). Si no se
            puede iniciar, el ticket es None y el outcome explica por que.
        """
        with session.lock:
            if len(session.selection) != MAX_PUNTOS_SELECCION:
                return None, ForecastOutcome.INCOMPLETE_SELECTION
            if session.in_flight:
                logger.warning(f"Sesion {session.session_id}: calculo ya en curso, solicitud ignorada")
                session.registrar_error(MENSAJE_CALCULO_EN_CURSO)
                return None, ForecastOutcome.REJECTED_IN_FLIGHT

            try:
                request = construir_request(session.series, session.selection.puntos, decline_type, qf)
            except RequestError as e:
                logger.error(f"Request invalido: {e}")
                session.registrar_error(e.message)
                return None, ForecastOutcome.FAILED

            series_version, selection_version = session.identidad
            ticket = RequestTicket(
                request_id=uuid.uuid4().hex,
                series_version=series_version,
                selection_version=selection_version,
                request=request,
            )
            session.marcar_en_curso(ticket)
            return ticket, None

    def completar(
        self,
        session: 'WorkflowSession',
        ticket: RequestTicket,
        result: Optional[ForecastResult] = None,
        error: Optional[Exception] = None
    ) -> ForecastOutcome:
        """Aplica (o descarta) la respuesta asociada a un ticket"""
        with session.lock:
            session.liberar(ticket)
            # El aviso de calculo en curso deja de aplicar al liberar el slot
            if session.error == MENSAJE_CALCULO_EN_CURSO:
                session.registrar_error(None)

            if session.identidad != ticket.identidad:
                logger.debug(f"Respuesta obsoleta descartada (request {ticket.request_id})")
                return ForecastOutcome.STALE

            if error is not None or result is None:
                logger.error(f"Calculo fallido (request {ticket.request_id}): {error}")
                session.registrar_error(MENSAJE_FALLO_CALCULO)
                return ForecastOutcome.FAILED

            session.aplicar_resultado(result)
            logger.info(
                f"Pronostico aplicado: {obtener_nombre_modelo(ticket.request.decline_type)}, "
                f"Np total={result.total_volume:.2f}, {len(result.curve)} puntos"
            )
            return ForecastOutcome.APPLIED

    def ejecutar(self, session: 'WorkflowSession', decline_type: str, qf: Any) -> ForecastOutcome:
        """
        Pipeline completo: preparar, llamar al servicio, completar.

        La llamada de red se hace fuera del lock de la sesion, de modo que
        importaciones o cambios de seleccion concurrentes no se bloquean
        (y vuelven obsoleta la respuesta).
        """
        ticket, outcome = self.preparar(session, decline_type, qf)
        if ticket is None:
            return outcome

        logger.info(
            f"Solicitando pronostico {decline_type} (t1={ticket.request.t1}, "
            f"t2={ticket.request.t2}, qf={ticket.request.qf})"
        )
        try:
            payload = self.client.calculate(ticket.request)
            result = ForecastResult.from_payload(payload)
        except RequestError as e:
            return self.completar(session, ticket, error=e)
        except Exception as e:
            logger.exception(f"Error inesperado en calculo: {e}")
            return self.completar(session, ticket, error=e)

        return self.completar(session, ticket, result=result)
