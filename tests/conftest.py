import os
import tempfile

# Los logs de archivo de los tests van a un directorio temporal
os.environ.setdefault("DCA_LOG_DIR", tempfile.mkdtemp(prefix="dca_pro_logs_"))

import base64
import io

import pandas as pd
import pytest

from dca_pro.data.models import IngestionSummary, ProductionSeries
from dca_pro.services.session import WorkflowSession

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

FILAS_EJEMPLO = [
    {"Date": "2023-01-01", "FlowRate": 100},
    {"Date": "2023-02-01", "FlowRate": 90},
    {"Date": "2023-03-01", "FlowRate": 81},
]

RESPUESTA_OK = {
    "Np_observed": 1.25,
    "Np_extrapolated": 3.5,
    "Np_total": 4.75,
    "curve": [
        {"Date": "2023-01-01", "q": 100.0},
        {"Date": "2023-02-01", "q": 90.5},
        {"Date": "2023-03-01", "q": 81.9},
    ],
}


def excel_data_uri(df: pd.DataFrame) -> str:
    """Libro .xlsx en memoria con el formato data URI de dcc.Upload"""
    buffer = io.BytesIO()
    df.to_excel(buffer, index=False, engine="openpyxl")
    return f"data:{XLSX_MIME};base64," + base64.b64encode(buffer.getvalue()).decode()


class StubClient:
    """Cliente de calculo falso: devuelve `respuesta` o lanza `error`"""

    def __init__(self, respuesta=None, error=None, al_llamar=None):
        self.respuesta = respuesta if respuesta is not None else RESPUESTA_OK
        self.error = error
        self.al_llamar = al_llamar
        self.requests = []

    def calculate(self, request):
        self.requests.append(request)
        if self.al_llamar is not None:
            self.al_llamar()
        if self.error is not None:
            raise self.error
        return self.respuesta


@pytest.fixture
def serie() -> ProductionSeries:
    return ProductionSeries(
        dates=("2023-01-01", "2023-02-01", "2023-03-01"),
        flow_rates=(100.0, 90.0, 81.0),
    )


@pytest.fixture
def serie_5() -> ProductionSeries:
    return ProductionSeries(
        dates=("2023-01-01", "2023-02-01", "2023-03-01", "2023-04-01", "2023-05-01"),
        flow_rates=(100.0, 92.0, 85.0, 79.0, 74.0),
    )


@pytest.fixture
def sesion(serie) -> WorkflowSession:
    s = WorkflowSession("test")
    s.install_series(serie, IngestionSummary(3, 0, "2023-01-01", "2023-03-01"))
    return s


@pytest.fixture
def sesion_lista(sesion) -> WorkflowSession:
    sesion.select_point(0)
    sesion.select_point(2)
    return sesion


@pytest.fixture
def respuesta_ok() -> dict:
    return {**RESPUESTA_OK, "curve": [dict(p) for p in RESPUESTA_OK["curve"]]}


@pytest.fixture
def stub_client():
    """Fabrica de StubClient"""
    return StubClient


@pytest.fixture
def excel_uri():
    """Fabrica de data URIs .xlsx a partir de filas"""
    def _crear(filas) -> str:
        return excel_data_uri(pd.DataFrame(filas))
    return _crear


@pytest.fixture
def filas_ejemplo() -> list:
    return [dict(f) for f in FILAS_EJEMPLO]
