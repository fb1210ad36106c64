import base64
import math
from datetime import datetime

import numpy as np
import pandas as pd
import pytest

from dca_pro.data.excel_loader import (
    cargar_excel_produccion,
    coercionar_caudal,
    decodificar_archivo,
    ingerir_filas,
    normalizar_columnas,
    parsear_fecha,
)
from dca_pro.utils.exceptions import EmptyDatasetError, FileValidationError, ParseError


def test_concrete_rows_build_three_point_series(filas_ejemplo):
    serie, resumen = ingerir_filas(filas_ejemplo, "pozo.xlsx")
    assert serie.dates == ("2023-01-01", "2023-02-01", "2023-03-01")
    assert serie.flow_rates == (100.0, 90.0, 81.0)
    assert serie.start_date == "2023-01-01"
    assert resumen.filas_aceptadas == 3
    assert resumen.filas_descartadas == 0
    assert resumen.fecha_fin == "2023-03-01"
    assert resumen.filename == "pozo.xlsx"


def test_series_length_equals_rows_with_both_fields():
    filas = [
        {"Date": "2023-01-01", "FlowRate": 100},
        {"Date": None, "FlowRate": 95},
        {"Date": "2023-03-01"},
        {"Date": "no es fecha", "FlowRate": 80},
        {"Date": "2023-05-01", "FlowRate": "abc"},
        {"Date": "2023-06-01", "FlowRate": float("nan")},
        {"Date": "2023-07-01", "FlowRate": "70.5"},
    ]
    serie, resumen = ingerir_filas(filas)
    assert len(serie.dates) == len(serie.flow_rates) == 2
    assert serie.flow_rates == (100.0, 70.5)
    assert resumen.filas_descartadas == 5


def test_row_order_is_preserved_without_sorting():
    filas = [
        {"Date": "2023-03-01", "FlowRate": 81},
        {"Date": "2023-01-01", "FlowRate": 100},
    ]
    serie, _ = ingerir_filas(filas)
    assert serie.dates == ("2023-03-01", "2023-01-01")


def test_zero_and_negative_rates_pass_through():
    serie, _ = ingerir_filas([
        {"Date": "2023-01-01", "FlowRate": 0},
        {"Date": "2023-02-01", "FlowRate": -5},
    ])
    assert serie.flow_rates == (0.0, -5.0)


def test_empty_dataset_names_required_fields():
    with pytest.raises(EmptyDatasetError) as exc:
        ingerir_filas([{"Date": "x", "FlowRate": 1}, {"Otra": 3}], "vacio.xlsx")

    assert isinstance(exc.value, ParseError)
    assert "'Date'" in exc.value.message
    assert "'FlowRate'" in exc.value.message
    assert exc.value.details["filename"] == "vacio.xlsx"


@pytest.mark.parametrize("valor, esperado", [
    ("2023-02-01", "2023-02-01"),
    ("2023/02/01", "2023-02-01"),
    (" 2023-02-01 10:30:00 ", "2023-02-01"),
    (datetime(2023, 1, 1, 15, 30), "2023-01-01"),
    (pd.Timestamp("2023-04-05 23:59"), "2023-04-05"),
    (44927, "2023-01-01"),
    (44927.75, "2023-01-01"),
    (np.int64(45000), "2023-03-15"),
    ("2023-01-01T23:00:00-05:00", "2023-01-01"),
    (pd.Timestamp("2023-06-30 22:00", tz="UTC"), "2023-06-30"),
])
def test_parsear_fecha_accepts_serials_and_text(valor, esperado):
    assert parsear_fecha(valor) == esperado


@pytest.mark.parametrize("valor", [None, "", "   ", "no es fecha", True, 0, -3, float("nan"), pd.NaT, [2023]])
def test_parsear_fecha_rejects_invalid_values(valor):
    assert parsear_fecha(valor) is None


def test_coercionar_caudal():
    assert coercionar_caudal("12.5") == 12.5
    assert coercionar_caudal(np.float64(3.0)) == 3.0
    assert coercionar_caudal(7) == 7.0
    assert coercionar_caudal("abc") is None
    assert coercionar_caudal(float("inf")) is None
    assert coercionar_caudal(False) is None
    assert coercionar_caudal(None) is None


def test_normalizar_columnas_matches_case_and_spaces():
    df = pd.DataFrame({" date ": ["2023-01-01"], "FLOWRATE": [10], "Pozo": ["A-1"]})
    assert list(normalizar_columnas(df).columns) == ["Date", "FlowRate", "Pozo"]


def test_decodificar_archivo_rejects_bad_base64():
    with pytest.raises(ParseError):
        decodificar_archivo("data:application/octet-stream;base64,@@no-base64@@", "x.xlsx")
    with pytest.raises(ParseError):
        decodificar_archivo("sin separador", "x.xlsx")


def test_cargar_excel_produccion_reads_workbook(excel_uri, filas_ejemplo):
    serie, resumen = cargar_excel_produccion(excel_uri(filas_ejemplo), "pozo.xlsx")
    assert serie.dates == ("2023-01-01", "2023-02-01", "2023-03-01")
    assert serie.flow_rates == (100.0, 90.0, 81.0)
    assert resumen.filas_aceptadas == 3


def test_cargar_excel_produccion_reads_native_excel_dates(excel_uri):
    filas = [
        {"Date": pd.Timestamp("2022-12-01"), "FlowRate": 120.0, "Comentario": "inicio"},
        {"Date": pd.Timestamp("2023-01-01"), "FlowRate": 110.0, "Comentario": None},
    ]
    serie, _ = cargar_excel_produccion(excel_uri(filas), "historia.XLSX")
    assert serie.dates == ("2022-12-01", "2023-01-01")
    assert serie.flow_rates == (120.0, 110.0)


def test_cargar_excel_produccion_workbook_without_usable_rows(excel_uri):
    with pytest.raises(EmptyDatasetError):
        cargar_excel_produccion(excel_uri([{"Fecha": "2023-01-01", "Valor": 1.0}]), "otro.xlsx")


@pytest.mark.parametrize("filename", ["pozo.csv", "pozo.xls", None])
def test_cargar_excel_produccion_rejects_extension(excel_uri, filas_ejemplo, filename):
    with pytest.raises(FileValidationError) as exc:
        cargar_excel_produccion(excel_uri(filas_ejemplo), filename)
    assert "expected_format" in exc.value.details


def test_cargar_excel_produccion_rejects_non_excel_bytes():
    contents = "data:application/octet-stream;base64," + base64.b64encode(b"hola mundo").decode()
    with pytest.raises(ParseError) as exc:
        cargar_excel_produccion(contents, "roto.xlsx")
    assert not isinstance(exc.value, EmptyDatasetError)


def test_nan_rates_never_reach_series():
    serie, _ = ingerir_filas([
        {"Date": "2023-01-01", "FlowRate": "1e999"},
        {"Date": "2023-02-01", "FlowRate": 5},
    ])
    assert all(math.isfinite(q) for q in serie.flow_rates)
    assert len(serie) == 1
