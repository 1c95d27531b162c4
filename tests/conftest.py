import pytest
from common.models import FlowState
from common.units import UnrecognizedUnit

# unit -> factor to SI, enough for the solver tests without pint
_FACTORS = {
    "Pa": 1.0, "kPa": 1e3, "bar": 1e5,
    "kg/m^3": 1.0, "g/cm^3": 1e3,
    "m/s": 1.0, "km/h": 1 / 3.6,
    "m^3/s": 1.0, "L/s": 1e-3,
    "m^2": 1.0, "cm^2": 1e-4,
    "m": 1.0, "cm": 1e-2,
    "m/s^2": 1.0,
}
_DIMS = {
    "Pa": "pressure", "kPa": "pressure", "bar": "pressure",
    "kg/m^3": "density", "g/cm^3": "density",
    "m/s": "velocity", "km/h": "velocity",
    "m^3/s": "flow_rate", "L/s": "flow_rate",
    "m^2": "area", "cm^2": "area",
    "m": "length", "cm": "length",
    "m/s^2": "acceleration",
}


class StubConverter:
    # table-driven stand-in for UnitConverter; records every call
    def __init__(self):
        self.calls = []

    def convert(self, value, from_unit, dimension):
        self.calls.append((value, from_unit, dimension))
        if _DIMS.get(from_unit) != dimension:
            raise UnrecognizedUnit(from_unit, dimension)
        return value * _FACTORS[from_unit]


@pytest.fixture
def stub_converter():
    return StubConverter()


@pytest.fixture
def demo_options():
    return {
        "rho1": {"value": 1000, "unit": "kg/m^3"},
        "v1": {"value": 1.96, "unit": "m/s"},
        "h1": {"value": 0, "unit": "m"},
        "p2": {"value": 101000, "unit": "Pa"},
        "v2": {"value": 25.5, "unit": "m/s"},
        "h2": {"value": 0, "unit": "m"},
    }


@pytest.fixture
def demo_state(demo_options):
    return FlowState.from_options(demo_options)
