# rtl_muxtrace/trace/classifier.py

from __future__ import annotations
from enum import Enum
from typing import Iterable, Optional

from ..config import DEFAULT_MUX_TYPES, DEFAULT_RESET_TOKEN
from ..netlist import Cell, Wire

SELECT_PORT = "S"
DATA_PORTS = ("A", "B")
OUTPUT_PORT = "Y"


class MuxSelect(Enum):
    GENUINE = "genuine"
    RESET = "reset"


class MuxClassifier:
    """
    识别 mux 原语，并判断 select 信号是真正的数据相关选择还是复位：
      - 名字里含 reset_token（大小写敏感的子串匹配）即视为复位
      - 纯字符串规则，不做任何值 / 时序分析
    """

    def __init__(self, mux_types: Optional[Iterable[str]] = None,
                 reset_token: str = DEFAULT_RESET_TOKEN):
        self.mux_types = frozenset(mux_types if mux_types is not None else DEFAULT_MUX_TYPES)
        self.reset_token = reset_token

    def is_mux(self, cell: Cell) -> bool:
        if cell.type not in self.mux_types:
            return False
        if not cell.get_port(SELECT_PORT) or not cell.get_port(OUTPUT_PORT):
            return False
        return any(cell.get_port(p) for p in DATA_PORTS)

    @staticmethod
    def select_wire(cell: Cell) -> Optional[Wire]:
        s = cell.get_port(SELECT_PORT)
        if s.is_wire():
            return s.as_wire()
        for chunk in s.wire_chunks():
            return chunk.wire
        return None

    def is_reset(self, wire_name: str) -> bool:
        return self.reset_token in wire_name

    def classify(self, cell: Cell) -> MuxSelect:
        wire = self.select_wire(cell)
        if wire is not None and self.is_reset(wire.name):
            return MuxSelect.RESET
        return MuxSelect.GENUINE
