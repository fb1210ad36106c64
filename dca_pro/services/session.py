"""
Sesion de Trabajo DCA
=====================

Estado mutable unico de un flujo de pronostico: serie, seleccion,
resultado, error y solicitud en curso. La etapa del flujo es una
proyeccion calculada de ese estado, nunca un campo guardado.
"""
import threading
import uuid
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, TYPE_CHECKING

from dca_pro.data.models import IngestionSummary, ProductionSeries
from dca_pro.services.selection import AnchorPoint, SelectionSet
from dca_pro.utils.exceptions import SelectionError
from dca_pro.utils.logger import LoggerMixin, get_logger

if TYPE_CHECKING:
    from dca_pro.services.forecast_service import ForecastResult, RequestTicket

logger = get_logger(__name__)


class WorkflowStage(Enum):
    NO_DATA = "NoData"
    AWAITING_SELECTION = "AwaitingSelection"
    READY_OR_COMPLETE = "ReadyOrComplete"


@dataclass(frozen=True)
class WorkflowSnapshot:
    """Vista inmutable de la sesion para renderizar"""
    series: Optional[ProductionSeries]
    summary: Optional[IngestionSummary]
    anchors: Tuple[AnchorPoint, ...]
    result: Optional['ForecastResult']
    error: Optional[str]
    in_flight: bool
    stage: WorkflowStage
    step_number: int


class WorkflowSession:
    """
    Estado de un flujo de trabajo (una pestana del navegador).

    Cada componente muta solo su parte a traves de estos metodos; todas
    las transiciones se hacen bajo `lock` para que no se intercalen.
    """

    def __init__(self, session_id: str = None):
        self.session_id = session_id or uuid.uuid4().hex
        self.lock = threading.RLock()
        self.selection = SelectionSet()
        self._series: Optional[ProductionSeries] = None
        self._summary: Optional[IngestionSummary] = None
        self._result: Optional['ForecastResult'] = None
        self._error: Optional[str] = None
        self._in_flight: Optional['RequestTicket'] = None
        self._series_version = 0
        self._selection_version = 0

    # ------------------------------------------------------------------
    # Lectura
    # ------------------------------------------------------------------

    @property
    def series(self) -> Optional[ProductionSeries]:
        return self._series

    @property
    def summary(self) -> Optional[IngestionSummary]:
        return self._summary

    @property
    def result(self) -> Optional['ForecastResult']:
        return self._result

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def in_flight(self) -> bool:
        return self._in_flight is not None

    @property
    def identidad(self) -> Tuple[int, int]:
        """(version de serie, version de seleccion) vigentes"""
        return (self._series_version, self._selection_version)

    @property
    def stage(self) -> WorkflowStage:
        if self._series is None or len(self._series) == 0:
            return WorkflowStage.NO_DATA
        if len(self.selection) < self.selection.capacidad:
            return WorkflowStage.AWAITING_SELECTION
        return WorkflowStage.READY_OR_COMPLETE

    @property
    def step_number(self) -> int:
        """Paso del asistente: 1 importar, 2 seleccionar/calcular, 3 resultados"""
        stage = self.stage
        if stage is WorkflowStage.NO_DATA:
            return 1
        if stage is WorkflowStage.READY_OR_COMPLETE and self._result is not None:
            return 3
        return 2

    def snapshot(self) -> WorkflowSnapshot:
        with self.lock:
            return WorkflowSnapshot(
                series=self._series,
                summary=self._summary,
                anchors=self.selection.puntos,
                result=self._result,
                error=self._error,
                in_flight=self.in_flight,
                stage=self.stage,
                step_number=self.step_number,
            )

    # ------------------------------------------------------------------
    # Importacion
    # ------------------------------------------------------------------

    def install_series(self, series: ProductionSeries, summary: IngestionSummary = None):
        """
        Reemplaza la serie completa. Descarta seleccion, resultado y error,
        y vuelve obsoleta cualquier respuesta en curso.
        """
        with self.lock:
            self._series = series
            self._summary = summary
            self.selection.limpiar()
            self._result = None
            self._error = None
            self._series_version += 1
            self._selection_version += 1
            logger.info(f"Sesion {self.session_id}: serie instalada con {len(series)} puntos")

    # ------------------------------------------------------------------
    # Seleccion
    # ------------------------------------------------------------------

    def select_point(self, index: int, value: float = None) -> bool:
        """
        Registra un click sobre el punto historico `index`.

        Si `value` es None se toma el caudal de la serie en ese indice.

        Returns:
            True si la seleccion cambio

        Raises:
            SelectionError: sin serie cargada o indice fuera de rango
        """
        with self.lock:
            if self._series is None:
                raise SelectionError("No hay serie cargada para seleccionar puntos", index=index)
            if value is None and self._series.contiene_indice(index):
                value = self._series.flow_rates[index]

            cambio = self.selection.seleccionar(index, value, len(self._series))
            if cambio:
                self._invalidar_por_seleccion()
                logger.debug(f"Sesion {self.session_id}: seleccion = {self.selection.to_list()}")
            return cambio

    def clear_selection(self) -> bool:
        with self.lock:
            cambio = self.selection.limpiar()
            if cambio:
                self._invalidar_por_seleccion()
            return cambio

    def _invalidar_por_seleccion(self):
        self._selection_version += 1
        self._result = None
        self._error = None

    # ------------------------------------------------------------------
    # Pronostico (usado por ForecastOrchestrator)
    # ------------------------------------------------------------------

    def marcar_en_curso(self, ticket: 'RequestTicket'):
        with self.lock:
            if self._in_flight is not None:
                raise RuntimeError("Ya hay un calculo en curso en esta sesion")
            self._in_flight = ticket

    def liberar(self, ticket: 'RequestTicket'):
        with self.lock:
            if self._in_flight is ticket:
                self._in_flight = None

    def aplicar_resultado(self, result: 'ForecastResult'):
        with self.lock:
            self._result = result
            self._error = None

    # ------------------------------------------------------------------
    # Errores visibles
    # ------------------------------------------------------------------

    def registrar_error(self, mensaje: Optional[str]):
        with self.lock:
            self._error = mensaje


class SessionRegistry(LoggerMixin):
    """
    Sesiones activas indexadas por id, con desalojo de la mas antigua
    cuando se supera `max_sesiones`.
    """

    def __init__(self, max_sesiones: int = 200):
        self.max_sesiones = max_sesiones
        self._sesiones: 'OrderedDict[str, WorkflowSession]' = OrderedDict()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._sesiones)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sesiones

    def obtener(self, session_id: str) -> WorkflowSession:
        """Devuelve la sesion con ese id, creandola si no existe"""
        with self._lock:
            sesion = self._sesiones.get(session_id)
            if sesion is not None:
                self._sesiones.move_to_end(session_id)
                return sesion

            sesion = WorkflowSession(session_id)
            self._sesiones[session_id] = sesion
            if len(self._sesiones) > self.max_sesiones:
                viejo_id, _ = self._sesiones.popitem(last=False)
                self.logger.info(f"Sesion {viejo_id} desalojada del registro")
            return sesion

    def descartar(self, session_id: str):
        with self._lock:
            self._sesiones.pop(session_id, None)
