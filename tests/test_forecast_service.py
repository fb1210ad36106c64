import json

import pytest

from dca_pro.data.models import ProductionSeries
from dca_pro.services.forecast_service import (
    MENSAJE_CALCULO_EN_CURSO,
    MENSAJE_FALLO_CALCULO,
    ForecastOrchestrator,
    ForecastOutcome,
    ForecastResult,
    construir_request,
    coercionar_cutoff,
)
from dca_pro.services.selection import AnchorPoint
from dca_pro.utils.exceptions import RequestError


def test_concrete_request_payload(sesion_lista):
    request = construir_request(sesion_lista.series, sesion_lista.selection.puntos, "hyperbolic", 5)
    assert request.to_payload() == {
        "t1": 0,
        "q1": 100.0,
        "t2": 2,
        "q2": 81.0,
        "original_q": [100.0, 90.0, 81.0],
        "decline_type": "hyperbolic",
        "start_date": "2023-01-01",
        "qf": 5.0,
    }


def test_request_is_byte_identical_across_builds(serie):
    anclas = (AnchorPoint(2, 81.0), AnchorPoint(0, 100.0))
    a = construir_request(serie, anclas, "exponential", "7.5")
    b = construir_request(serie, anclas, "exponential", "7.5")
    assert a == b
    assert a.to_json() == b.to_json()
    assert json.loads(a.to_json())["t1"] == 2


def test_request_requires_two_anchors(serie):
    with pytest.raises(ValueError):
        construir_request(serie, (AnchorPoint(0, 100.0),), "exponential", 5)


def test_request_rejects_unknown_model(serie):
    with pytest.raises(RequestError):
        construir_request(serie, (AnchorPoint(0, 100.0), AnchorPoint(1, 90.0)), "logistic", 5)


@pytest.mark.parametrize("valor, esperado", [
    (5, 5.0),
    ("2.5", 2.5),
    (" 3 ", 3.0),
    ("abc", "abc"),
    (None, None),
])
def test_coercionar_cutoff(valor, esperado):
    assert coercionar_cutoff(valor) == esperado


def test_from_payload_parses_contract(respuesta_ok):
    resultado = ForecastResult.from_payload(respuesta_ok)
    assert resultado.observed_volume == 1.25
    assert resultado.extrapolated_volume == 3.5
    assert resultado.total_volume == 4.75
    assert resultado.curve_records()[1] == {"Date": "2023-02-01", "q": 90.5}
    assert resultado.to_dict()["Np_total"] == 4.75


def test_from_payload_normalizes_curve_dates(respuesta_ok):
    respuesta_ok["curve"][0]["Date"] = "2023-01-01T00:00:00"
    assert ForecastResult.from_payload(respuesta_ok).curve[0].date == "2023-01-01"


@pytest.mark.parametrize("mutar", [
    lambda d: d.pop("Np_total"),
    lambda d: d.update(Np_observed="1.0"),
    lambda d: d.update(Np_extrapolated=True),
    lambda d: d.update(Np_total=float("nan")),
    lambda d: d.update(curve="no-lista"),
    lambda d: d["curve"].append(["2023-04-01", 1.0]),
    lambda d: d["curve"].append({"Date": "mal", "q": 1.0}),
    lambda d: d["curve"].append({"Date": "2023-04-01"}),
])
def test_from_payload_rejects_schema_mismatch(respuesta_ok, mutar):
    mutar(respuesta_ok)
    with pytest.raises(RequestError):
        ForecastResult.from_payload(respuesta_ok)


def test_from_payload_rejects_non_object():
    with pytest.raises(RequestError):
        ForecastResult.from_payload([1, 2, 3])


def test_ejecutar_applies_result(sesion_lista, stub_client):
    client = stub_client()
    sesion_lista.registrar_error("error previo")

    outcome = ForecastOrchestrator(client).ejecutar(sesion_lista, "harmonic", 5)

    assert outcome is ForecastOutcome.APPLIED
    assert sesion_lista.result.total_volume == 4.75
    assert sesion_lista.error is None
    assert sesion_lista.in_flight is False
    assert sesion_lista.step_number == 3
    assert client.requests[0].decline_type == "harmonic"


def test_ejecutar_requires_two_anchors(sesion, stub_client):
    client = stub_client()
    sesion.select_point(0)
    assert ForecastOrchestrator(client).ejecutar(sesion, "exponential", 5) is ForecastOutcome.INCOMPLETE_SELECTION
    assert client.requests == []


def test_failure_keeps_previous_result_and_allows_retry(sesion_lista, stub_client, respuesta_ok):
    orquestador = ForecastOrchestrator(stub_client())
    orquestador.ejecutar(sesion_lista, "exponential", 5)
    anterior = sesion_lista.result

    orquestador.client = stub_client(error=RequestError("timeout"))
    outcome = orquestador.ejecutar(sesion_lista, "exponential", 5)

    assert outcome is ForecastOutcome.FAILED
    assert sesion_lista.result is anterior
    assert sesion_lista.error == MENSAJE_FALLO_CALCULO
    assert sesion_lista.in_flight is False

    orquestador.client = stub_client()
    assert orquestador.ejecutar(sesion_lista, "exponential", 5) is ForecastOutcome.APPLIED
    assert sesion_lista.error is None


def test_malformed_response_is_failure(sesion_lista, stub_client):
    client = stub_client(respuesta={"curve": []})
    assert ForecastOrchestrator(client).ejecutar(sesion_lista, "exponential", 5) is ForecastOutcome.FAILED
    assert sesion_lista.result is None


def test_unexpected_client_exception_is_failure(sesion_lista, stub_client):
    client = stub_client(error=KeyError("boom"))
    assert ForecastOrchestrator(client).ejecutar(sesion_lista, "exponential", 5) is ForecastOutcome.FAILED
    assert sesion_lista.in_flight is False


def test_unknown_model_fails_before_network(sesion_lista, stub_client):
    client = stub_client()
    outcome = ForecastOrchestrator(client).ejecutar(sesion_lista, "logistic", 5)
    assert outcome is ForecastOutcome.FAILED
    assert client.requests == []
    assert sesion_lista.error is not None
    assert sesion_lista.in_flight is False


def test_second_request_rejected_while_in_flight(sesion_lista, stub_client):
    orquestador = ForecastOrchestrator(stub_client())
    ticket, outcome = orquestador.preparar(sesion_lista, "exponential", 5)
    assert outcome is None
    assert sesion_lista.in_flight

    segundo, outcome = orquestador.preparar(sesion_lista, "exponential", 5)
    assert segundo is None
    assert outcome is ForecastOutcome.REJECTED_IN_FLIGHT
    assert orquestador.ejecutar(sesion_lista, "exponential", 5) is ForecastOutcome.REJECTED_IN_FLIGHT
    assert orquestador.client.requests == []

    orquestador.completar(sesion_lista, ticket, error=RequestError("x"))
    assert not sesion_lista.in_flight


def test_response_after_new_ingestion_is_discarded(sesion_lista, stub_client):
    nueva = ProductionSeries(dates=("2024-01-01", "2024-02-01"), flow_rates=(10.0, 9.0))
    client = stub_client(al_llamar=lambda: sesion_lista.install_series(nueva))

    outcome = ForecastOrchestrator(client).ejecutar(sesion_lista, "exponential", 5)

    assert outcome is ForecastOutcome.STALE
    assert sesion_lista.result is None
    assert sesion_lista.error is None
    assert sesion_lista.series is nueva
    assert sesion_lista.in_flight is False


def test_response_after_selection_change_is_discarded(sesion_lista, stub_client):
    client = stub_client(al_llamar=lambda: sesion_lista.select_point(1))
    outcome = ForecastOrchestrator(client).ejecutar(sesion_lista, "exponential", 5)
    assert outcome is ForecastOutcome.STALE
    assert sesion_lista.result is None


def test_failed_stale_response_is_not_surfaced(sesion_lista, stub_client):
    client = stub_client(
        error=RequestError("500"),
        al_llamar=lambda: sesion_lista.clear_selection(),
    )
    outcome = ForecastOrchestrator(client).ejecutar(sesion_lista, "exponential", 5)
    assert outcome is ForecastOutcome.STALE
    assert sesion_lista.error is None


def test_in_flight_notice_clears_when_slot_released(sesion_lista, stub_client):
    orquestador = ForecastOrchestrator(stub_client())
    ticket, _ = orquestador.preparar(sesion_lista, "exponential", 5)

    _, outcome = orquestador.preparar(sesion_lista, "exponential", 5)
    assert outcome is ForecastOutcome.REJECTED_IN_FLIGHT
    assert sesion_lista.error == MENSAJE_CALCULO_EN_CURSO

    sesion_lista.select_point(1)
    sesion_lista.registrar_error(MENSAJE_CALCULO_EN_CURSO)
    assert orquestador.completar(sesion_lista, ticket, error=RequestError("x")) is ForecastOutcome.STALE
    assert sesion_lista.error is None
    assert not sesion_lista.in_flight
