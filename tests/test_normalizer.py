import pytest
from common.models import FlowState
from common.units import UnrecognizedUnit
from flow.normalizer import normalize, normalize_units, apply_same_medium, apply_neglect_height


def test_normalize_converts_to_si_and_tags_units(stub_converter):
    st = FlowState.from_options({
        "p1": (200, "kPa"),
        "rho1": (1.0, "g/cm^3"),
        "v1": (36, "km/h"),
        "Q1": (5, "L/s"),
        "A2": (50, "cm^2"),
        "h2": (150, "cm"),
    })
    normalize_units(st, stub_converter)
    assert st.inlet.p.value == pytest.approx(2e5) and st.inlet.p.unit == "Pa"
    assert st.inlet.rho.value == pytest.approx(1000) and st.inlet.rho.unit == "kg/m^3"
    assert st.inlet.v.value == pytest.approx(10) and st.inlet.v.unit == "m/s"
    assert st.inlet.Q.value == pytest.approx(5e-3) and st.inlet.Q.unit == "m^3/s"
    assert st.outlet.A.value == pytest.approx(5e-3) and st.outlet.A.unit == "m^2"
    assert st.outlet.h.value == pytest.approx(1.5) and st.outlet.h.unit == "m"
    assert st.inlet.p.source_unit == "kPa"


def test_si_and_unknown_values_skip_the_converter(stub_converter):
    st = FlowState.from_options({"p1": (101325, "Pa"), "p2": {"value": None, "unit": "bar"}, "v1": 3.0})
    normalize_units(st, stub_converter)
    assert stub_converter.calls == []
    assert st.outlet.p.value is None and st.outlet.p.unit == "bar"
    assert st.inlet.v.value == 3.0


def test_unrecognized_unit_leaves_state_untouched(stub_converter):
    st = FlowState.from_options({"p1": (2, "bar"), "v2": (1, "furlong/fortnight")})
    with pytest.raises(UnrecognizedUnit):
        normalize_units(st, stub_converter)
    assert st.inlet.p.value == 2 and st.inlet.p.unit == "bar"


def test_same_medium_copies_single_known_density():
    st = FlowState.from_options({"rho2": (998.0, "kg/m^3")})
    assert apply_same_medium(st)
    assert st.inlet.rho.value == 998.0


def test_same_medium_leaves_two_densities_alone():
    st = FlowState.from_options({"rho1": (998.0, "kg/m^3"), "rho2": (1000.0, "kg/m^3")})
    assert not apply_same_medium(st)
    assert st.inlet.rho.value == 998.0 and st.outlet.rho.value == 1000.0


def test_same_medium_off():
    st = FlowState.from_options({"sameMedium": False, "rho1": (998.0, "kg/m^3")})
    assert not apply_same_medium(st)
    assert not st.outlet.rho.known


def test_neglect_height_zeroes_both_when_missing():
    st = FlowState.from_options({})
    assert apply_neglect_height(st)
    assert st.inlet.h.value == 0.0 and st.outlet.h.value == 0.0
    assert st.inlet.h.unit == "m"


def test_neglect_height_copies_single_known():
    st = FlowState.from_options({"h1": (4.0, "m")})
    apply_neglect_height(st)
    assert st.outlet.h.value == 4.0


def test_neglect_height_off_keeps_unknowns():
    st = FlowState.from_options({"neglectHeight": False})
    assert not apply_neglect_height(st)
    assert not st.inlet.h.known and not st.outlet.h.known


def test_normalize_runs_synthesis_after_conversion(stub_converter):
    st = FlowState.from_options({"rho1": (1.0, "g/cm^3"), "h1": (250, "cm")})
    normalize(st, stub_converter)
    assert st.outlet.rho.value == pytest.approx(1000.0)
    assert st.outlet.h.value == pytest.approx(2.5)
