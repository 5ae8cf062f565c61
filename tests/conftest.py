from __future__ import annotations

from pathlib import Path

import pytest

from rtl_muxtrace.frontend import build_design
from rtl_muxtrace.netlist import SigSpec, escape_id
from rtl_muxtrace.trace import FrontierSearch, HierarchyIndex, MuxClassifier

DATA_DIR = Path(__file__).resolve().parent / "data"


@pytest.fixture
def data_dir() -> Path:
    return DATA_DIR


@pytest.fixture
def trace():
    """从 module.wire 出发跑一次前沿搜索。"""

    def _trace(design, module: str, wire: str, **classifier_kwargs):
        index = HierarchyIndex.build(design)
        mod = design.module(escape_id(module))
        search = FrontierSearch(design, index, MuxClassifier(**classifier_kwargs))
        return search.run(mod, SigSpec.from_wire(mod.wire(escape_id(wire))))

    return _trace


@pytest.fixture
def upward_design():
    """leaf 的输出端口在 top 里直接接到 mux 的 select。"""
    return build_design({
        "top": "top",
        "modules": {
            "top": {
                "wires": {
                    "a": {"width": 4, "direction": "input"},
                    "b": {"width": 4, "direction": "input"},
                    "x": {"direction": "input"},
                    "y": {"width": 4, "direction": "output"},
                    "sel_top": {},
                },
                "cells": {
                    "u_leaf": {"type": "leaf", "connections": {"i": "x", "o": "sel_top"}},
                    "mux_top": {
                        "type": "$mux",
                        "connections": {"A": "a", "B": "b", "S": "sel_top", "Y": "y"},
                    },
                },
            },
            "leaf": {
                "wires": {
                    "i": {"direction": "input"},
                    "o": {"direction": "output"},
                },
                "cells": {
                    "inv": {"type": "$not", "connections": {"A": "i", "Y": "o"}},
                },
            },
        },
    })
