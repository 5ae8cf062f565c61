from __future__ import annotations

import pytest

from rtl_muxtrace.config import Config
from rtl_muxtrace.errors import NetlistFormatError
from rtl_muxtrace.frontend import NetlistFrontend, build_design, parse_sig
from rtl_muxtrace.netlist import Design


def _module():
    d = Design()
    m = d.add_module("m")
    m.add_wire("bus", width=8)
    m.add_wire("flag")
    return m


def test_load_scenarios_file(data_dir):
    design = NetlistFrontend(Config(netlist=str(data_dir / "scenarios.yaml"))).load()
    assert set(design.modules) == {"\\top", "\\half", "\\leaf"}
    assert design.top_module() is design.module("\\top")

    top = design.module("\\top")
    assert top.wire("\\a").width == 4
    assert top.wire("\\go").port_input
    assert top.wire("\\y").port_output
    assert "$0\\sel_top" in top.wires
    assert {w.name for w in top.ports()} == {"\\clk", "\\rstz", "\\go", "\\a", "\\b", "\\y"}

    u_left = top.cells["\\u_left"]
    assert u_left.type == "\\half"
    assert set(u_left.connections) == {"\\i", "\\o"}
    assert u_left.input("\\i") and u_left.output("\\o")

    reset_mux = top.cells["\\reset_mux"]
    assert reset_mux.type == "$mux"
    assert reset_mux.get_port("B").is_fully_const()

    half = design.module("\\half")
    assert half.wire("\\data").attributes == {"keep": 1}
    (lhs, rhs), = half.connections
    assert lhs.as_wire().name == "\\data" and rhs.as_wire().name == "\\i"


def test_parse_wire_and_slices():
    m = _module()
    assert parse_sig(m, "bus").is_wire()
    bit = parse_sig(m, "bus[3]").as_chunk()
    assert (bit.offset, bit.width) == (3, 1)
    rng = parse_sig(m, "bus[7:4]").as_chunk()
    assert (rng.offset, rng.width) == (4, 4)
    assert parse_sig(m, "\\flag").as_wire() is m.wire("\\flag")


def test_parse_constants():
    m = _module()
    assert parse_sig(m, "4'b10x1").chunks[0].data == "1x01"
    assert parse_sig(m, "8'hA5").chunks[0].data == "10100101"
    assert parse_sig(m, "3'd2").chunks[0].data == "010"
    assert parse_sig(m, "2'b111").chunks[0].data == "11"
    assert parse_sig(m, 1).size == 32


def test_parse_concatenation_msb_first():
    m = _module()
    sig = parse_sig(m, ["flag", "bus[1:0]"])
    assert sig.size == 3
    assert sig.chunks[0].wire.name == "\\bus"
    assert sig.chunks[1].wire.name == "\\flag"


@pytest.mark.parametrize("text", ["nope", "bus[8]", "bus[2:5]", "3'd1x", "bus[", 3.5])
def test_parse_errors(text):
    with pytest.raises(NetlistFormatError):
        parse_sig(_module(), text)


def test_connection_width_mismatch():
    with pytest.raises(NetlistFormatError, match="width mismatch"):
        build_design({"modules": {"m": {
            "wires": {"a": {"width": 2}, "b": {}},
            "connections": [["a", "b"]],
        }}})


def test_bad_wire_direction():
    with pytest.raises(NetlistFormatError, match="bad direction"):
        build_design({"modules": {"m": {"wires": {"a": {"direction": "sideways"}}}}})


def test_cell_without_type():
    with pytest.raises(NetlistFormatError, match="has no type"):
        build_design({"modules": {"m": {"cells": {"c0": {"connections": {}}}}}})


def test_missing_modules_mapping():
    with pytest.raises(NetlistFormatError):
        build_design({"top": "x"})


def test_undefined_top():
    with pytest.raises(NetlistFormatError, match="top module"):
        build_design({"top": "missing", "modules": {"m": {}}})


def test_processes_are_recorded():
    design = build_design({"modules": {"m": {"processes": ["$proc$m.v:3$1"]}}})
    assert design.module("\\m").processes == ["$proc$m.v:3$1"]
