import pytest

from dca_pro.services.selection import AnchorPoint, SelectionSet
from dca_pro.utils.exceptions import SelectionError


def test_two_clicks_fill_selection_in_click_order():
    seleccion = SelectionSet()
    assert seleccion.seleccionar(2, 81.0, series_length=3)
    assert seleccion.seleccionar(0, 100.0, series_length=3)
    assert seleccion.esta_completa
    assert seleccion.puntos == (AnchorPoint(2, 81.0), AnchorPoint(0, 100.0))


def test_third_click_resets_to_singleton():
    seleccion = SelectionSet()
    seleccion.seleccionar(0, 100.0, 5)
    seleccion.seleccionar(2, 81.0, 5)
    assert seleccion.seleccionar(4, 74.0, 5)
    assert seleccion.to_list() == [{"index": 4, "value": 74.0}]


def test_capacity_holds_for_any_click_sequence():
    seleccion = SelectionSet()
    for index in [0, 1, 1, 3, 2, 4, 0, 0, 1, 3]:
        seleccion.seleccionar(index, float(index), 5)
        assert len(seleccion) <= 2


def test_reclick_is_noop():
    seleccion = SelectionSet()
    seleccion.seleccionar(0, 100.0, 3)
    seleccion.seleccionar(2, 81.0, 3)
    antes = seleccion.puntos

    assert seleccion.seleccionar(2, 999.0, 3) is False
    assert seleccion.seleccionar(0, 1.0, 3) is False
    assert seleccion.puntos == antes


@pytest.mark.parametrize("index", [-1, 3, 10, True, 1.0, "1", None])
def test_out_of_range_index_rejected(index):
    seleccion = SelectionSet()
    with pytest.raises(SelectionError):
        seleccion.seleccionar(index, 1.0, 3)
    assert len(seleccion) == 0


def test_limpiar_reports_whether_anything_was_removed():
    seleccion = SelectionSet()
    assert seleccion.limpiar() is False
    seleccion.seleccionar(1, 90.0, 3)
    assert seleccion.limpiar() is True
    assert len(seleccion) == 0


def test_anchor_value_is_stored_as_captured():
    seleccion = SelectionSet()
    seleccion.seleccionar(1, 88, 3)
    (punto,) = seleccion
    assert punto.value == 88.0
    assert isinstance(punto.value, float)
