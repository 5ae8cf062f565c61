from __future__ import annotations

import pytest

from rtl_muxtrace.config import Config
from rtl_muxtrace.errors import (
    AmbiguousWireError,
    EmptySelectionError,
    UnknownModuleError,
    UnknownWireError,
    UnresolvedProcessError,
)
from rtl_muxtrace.finder import MuxFinder
from rtl_muxtrace.frontend import build_design
from rtl_muxtrace.netlist import Selection
from rtl_muxtrace.trace import MuxResult


@pytest.fixture
def finder(data_dir):
    return MuxFinder.from_config(Config(netlist=str(data_dir / "scenarios.yaml")))


def test_hierarchy_round_trip_to_top_mux(finder):
    # go -> half.i -> half.data -> leaf.x -> leaf.z -> half.o -> top.l_out -> mux_top.S
    assert finder.find_next_mux("go") == MuxResult("\\l_out", "\\top")


def test_start_inside_submodule(finder):
    assert finder.find_next_mux("data") == MuxResult("\\l_out", "\\top")


def test_reset_mux_only_gives_not_found(finder):
    assert finder.find_next_mux("rstz") == MuxResult.not_found()


def test_unknown_wire(finder):
    with pytest.raises(UnknownWireError, match="does not exist in any of the selected modules"):
        finder.find_next_mux("no_such_wire")


def test_ambiguous_wire(finder):
    with pytest.raises(AmbiguousWireError) as exc:
        finder.find_next_mux("dbg")
    assert exc.value.modules == ["\\leaf", "\\half"]


def test_module_filter_disambiguates(finder):
    module, wire = finder.locate_start("dbg", "leaf")
    assert module.name == "\\leaf"
    assert wire.name == "\\dbg"
    assert finder.find_next_mux("dbg", "half") == MuxResult.not_found()


def test_module_filter_matching_nothing(finder):
    with pytest.raises(UnknownModuleError, match="does not exist"):
        finder.find_next_mux("go", "nowhere")


def test_module_filter_without_the_wire(finder):
    with pytest.raises(UnknownWireError):
        finder.find_next_mux("go", "leaf")


def test_escaped_start_name(finder):
    assert finder.find_next_mux("\\go") == finder.find_next_mux("go")


def test_empty_selection(finder):
    finder.design.selection = Selection(full=False)
    with pytest.raises(EmptySelectionError):
        finder.find_next_mux("go")


def test_selection_limits_traversed_cells(data_dir):
    cfg = Config(netlist=str(data_dir / "scenarios.yaml"),
                 select=["top/u_left", "top/reset_mux", "half", "leaf"])
    finder = MuxFinder.from_config(cfg)
    # mux_top 不在选择范围内
    assert finder.find_next_mux("go") == MuxResult.not_found()


def test_two_parents_same_wire_name_is_ambiguous():
    design = build_design({
        "top": "top",
        "modules": {
            "top": {
                "wires": {"x": {}},
                "cells": {
                    "u_left": {"type": "left", "connections": {"in": "x"}},
                    "u_right": {"type": "right", "connections": {"in": "x"}},
                },
            },
            "left": {
                "wires": {"in": {"direction": "input"}, "start": {}},
                "cells": {"u0": {"type": "shared", "connections": {"d": "start"}}},
            },
            "right": {
                "wires": {"in": {"direction": "input"}, "start": {}},
                "cells": {"u0": {"type": "shared", "connections": {"d": "start"}}},
            },
            "shared": {"wires": {"d": {"direction": "input"}}},
        },
    })
    finder = MuxFinder(design)
    with pytest.raises(AmbiguousWireError, match="more than one module"):
        finder.find_next_mux("start")
    module, _ = finder.locate_start("start", "right")
    assert module.name == "\\right"


def test_process_in_explored_submodule_is_fatal():
    design = build_design({
        "top": "top",
        "modules": {
            "top": {
                "wires": {"go": {}},
                "cells": {"u_sub": {"type": "sub", "connections": {"i": "go"}}},
            },
            "sub": {
                "wires": {"i": {"direction": "input"}},
                "processes": ["$proc$sub.v:4$2"],
            },
        },
    })
    with pytest.raises(UnresolvedProcessError, match="sub"):
        MuxFinder(design).find_next_mux("go")


def test_custom_reset_token_from_config():
    design = build_design({
        "top": "top",
        "modules": {"top": {
            "wires": {"rst_ni": {}, "a": {}, "b": {}, "y": {}},
            "cells": {"m0": {"type": "$mux",
                             "connections": {"A": "a", "B": "b", "S": "rst_ni", "Y": "y"}}},
        }},
    })
    assert MuxFinder(design).find_next_mux("rst_ni") == MuxResult("\\rst_ni", "\\top")
    finder = MuxFinder(design, Config(reset_token="rst_n"))
    assert finder.find_next_mux("rst_ni") == MuxResult.not_found()
