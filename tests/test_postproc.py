import math
import pytest
from common.models import FlowState
from flow.solver import solve
from flow.postproc import state_to_dataframe, head_breakdown, summary
from flow.plots import plot_heads


def test_dataframe_rows_and_units(demo_state):
    st = solve(demo_state)
    df = state_to_dataframe(st)
    assert len(df) == 16
    assert set(df.columns) == {"station", "field", "value", "unit", "known"}
    p1 = df[(df["station"] == "1") & (df["field"] == "p")].iloc[0]
    assert p1["unit"] == "Pa" and p1["known"]
    assert p1["value"] == pytest.approx(st.inlet.p.value)
    q1 = df[(df["station"] == "1") & (df["field"] == "Q")].iloc[0]
    assert not q1["known"] and math.isnan(q1["value"])


def test_dataframe_reports_supplied_units_when_not_si():
    st = solve({"returnSIUnits": False, "p1": (2, "bar"), "p2": {"value": None, "unit": "bar"},
                "rho1": (1000, "kg/m^3"), "v1": (1, "m/s"), "v2": (1, "m/s")})
    assert st.outlet.p.value == pytest.approx(2e5)
    df = state_to_dataframe(st)
    p2 = df[(df["station"] == "2") & (df["field"] == "p")].iloc[0]
    assert p2["unit"] == "bar" and p2["value"] == pytest.approx(2.0)


def test_head_breakdown(demo_state):
    st = solve(demo_state)
    df = head_breakdown(st)
    out = df[df["station"] == "2"].iloc[0]
    assert out["pressure_head[m]"] == pytest.approx(101000 / (1000 * 9.81))
    assert out["velocity_head[m]"] == pytest.approx(25.5 ** 2 / (2 * 9.81))
    # same total head at both stations
    assert df["total_head[m]"].iloc[0] == pytest.approx(df["total_head[m]"].iloc[1])


def test_head_breakdown_unknowns_are_nan():
    st = FlowState.from_options({"v1": (2, "m/s")})
    df = head_breakdown(st)
    assert math.isnan(df["pressure_head[m]"].iloc[0])
    assert math.isnan(df["total_head[m]"].iloc[0])


def test_summary(demo_state):
    info = summary(solve(demo_state))
    assert info["underdetermined"] is True
    assert "p1" in info["known"]
    assert info["unknown"] == ["A1", "A2", "Q1", "Q2"]


def test_plot_heads_writes_file(tmp_path, demo_state):
    out = plot_heads(solve(demo_state), str(tmp_path / "fig" / "heads.png"))
    assert (tmp_path / "fig" / "heads.png").stat().st_size > 0
    assert out.endswith("heads.png")
