# rtl_muxtrace/frontend/netlist_frontend.py
from __future__ import annotations
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .base import FrontendBase
from ..config import Config
from ..errors import NetlistFormatError
from ..netlist import Design, Module, SigChunk, SigSpec, escape_id

logger = logging.getLogger(__name__)

_CONST_RE = re.compile(r"^(\d+)'([bBhHdD])([0-9a-fA-FxXzZ_]+)$")
_WIRE_RE = re.compile(r"^(?P<name>[^\[\s]+)\s*(\[\s*(?P<hi>\d+)\s*(:\s*(?P<lo>\d+)\s*)?\])?$")


class NetlistFrontend(FrontendBase):
    """
    读取宿主导出的网表描述文件（YAML，JSON 也可以直接读）：

      top: top
      modules:
        top:
          wires:
            clk:  {direction: input}
            sel:  {width: 1}
            out:  {width: 8, direction: output}
          cells:
            mux0:
              type: $mux
              connections: {A: "a", B: "b", S: "sel", Y: "out"}
            u_leaf:
              type: leaf
              connections: {data: "sel"}
          connections:
            - ["out2", "out"]        # lhs 由 rhs 驱动
          processes: []

    信号语法见 parse_sig()。
    """

    def __init__(self, cfg: Config, path: Optional[str] = None):
        super().__init__(cfg)
        self.path = path or cfg.netlist

    def load(self) -> Design:
        if not self.path:
            raise NetlistFormatError("No netlist file configured")
        path = Path(self.path)
        logger.info("Loading netlist %s", path)
        with open(path) as f:
            try:
                raw = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise NetlistFormatError(f"{path}: {e}") from e
        design = build_design(raw, top=self.cfg.top_module)
        logger.info(design.summary())
        return design


def build_design(raw: Any, top: Optional[str] = None) -> Design:
    if not isinstance(raw, dict) or not isinstance(raw.get("modules"), dict):
        raise NetlistFormatError("netlist must be a mapping with a 'modules' mapping")

    design = Design(top=top or raw.get("top"))

    # 1) 先建所有模块和 wire，后面 cell 类型 / 信号解析要用
    for mod_name, mod_raw in raw["modules"].items():
        mod_raw = mod_raw or {}
        module = design.add_module(str(mod_name))
        for wire_name, wire_raw in (mod_raw.get("wires") or {}).items():
            _add_wire(module, str(wire_name), wire_raw or {})

    # 2) cell / 连接 / process
    for mod_name, mod_raw in raw["modules"].items():
        mod_raw = mod_raw or {}
        module = design.module(escape_id(str(mod_name)))
        for cell_name, cell_raw in (mod_raw.get("cells") or {}).items():
            _add_cell(design, module, str(cell_name), cell_raw or {})
        for idx, conn in enumerate(mod_raw.get("connections") or []):
            if not isinstance(conn, (list, tuple)) or len(conn) != 2:
                raise NetlistFormatError(
                    f"module {module.name}: connection #{idx} must be [lhs, rhs]")
            lhs = parse_sig(module, conn[0])
            rhs = parse_sig(module, conn[1])
            if lhs.size != rhs.size:
                raise NetlistFormatError(
                    f"module {module.name}: connection #{idx} width mismatch "
                    f"({lhs.size} vs {rhs.size})")
            module.connect(lhs, rhs)
        module.processes.extend(str(p) for p in (mod_raw.get("processes") or []))

    if design.top is not None and design.module(design.top) is None:
        raise NetlistFormatError(f"top module {design.top} is not defined")
    return design


def _add_wire(module: Module, name: str, wire_raw: Dict[str, Any]) -> None:
    if not isinstance(wire_raw, dict):
        raise NetlistFormatError(f"module {module.name}: wire {name} must be a mapping")
    direction = wire_raw.get("direction")
    if direction not in (None, "input", "output"):
        raise NetlistFormatError(
            f"module {module.name}: wire {name} has bad direction {direction!r}")
    try:
        module.add_wire(
            name,
            width=int(wire_raw.get("width", 1)),
            port_input=direction == "input",
            port_output=direction == "output",
            **dict(wire_raw.get("attributes") or {}),
        )
    except ValueError as e:
        raise NetlistFormatError(f"module {module.name}: {e}") from e


def _add_cell(design: Design, module: Module, name: str, cell_raw: Dict[str, Any]) -> None:
    if not isinstance(cell_raw, dict):
        raise NetlistFormatError(f"module {module.name}: cell {name} must be a mapping")
    cell_type = cell_raw.get("type")
    if not cell_type:
        raise NetlistFormatError(f"module {module.name}: cell {name} has no type")
    cell_type = escape_id(str(cell_type))
    is_module_cell = design.module(cell_type) is not None

    connections: Dict[str, SigSpec] = {}
    for port, sig in (cell_raw.get("connections") or {}).items():
        # 子模块端口名就是子模块里的 wire 名，需要同样转义
        port = escape_id(str(port)) if is_module_cell else str(port)
        connections[port] = parse_sig(module, sig)

    directions = {str(p): str(d) for p, d in (cell_raw.get("directions") or {}).items()}
    for port, d in directions.items():
        if d not in ("input", "output", "inout"):
            raise NetlistFormatError(
                f"module {module.name}: cell {name} port {port} has bad direction {d!r}")
    try:
        module.add_cell(name, cell_type, connections, directions)
    except ValueError as e:
        raise NetlistFormatError(f"module {module.name}: {e}") from e


def parse_sig(module: Module, text: Any) -> SigSpec:
    """
    信号语法：
      - "name"         整个 wire
      - "name[3]"      单 bit
      - "name[7:4]"    位段
      - "4'b10x0" / "8'hff" / "3'd5"   带宽度常量
      - 整数            32 位常量
      - [a, b, ...]    拼接，按 Verilog {a, b} 的顺序高位在前
    """
    if isinstance(text, list):
        chunks: List[SigChunk] = []
        for part in reversed(text):
            chunks.extend(parse_sig(module, part).chunks)
        return SigSpec(chunks)
    if isinstance(text, bool):
        return SigSpec.const(int(text), 1)
    if isinstance(text, int):
        return SigSpec.const(text, 32)
    if not isinstance(text, str):
        raise NetlistFormatError(f"module {module.name}: bad signal {text!r}")

    text = text.strip()
    m = _CONST_RE.match(text)
    if m:
        return SigSpec([SigChunk.const(_const_bits(module, text, m))])

    m = _WIRE_RE.match(text)
    if not m:
        raise NetlistFormatError(f"module {module.name}: bad signal {text!r}")
    wire = module.wire(escape_id(m.group("name")))
    if wire is None:
        raise NetlistFormatError(
            f"module {module.name}: signal {text!r} refers to unknown wire")
    if m.group("hi") is None:
        return SigSpec.from_wire(wire)
    hi = int(m.group("hi"))
    lo = int(m.group("lo")) if m.group("lo") is not None else hi
    if lo > hi or hi >= wire.width:
        raise NetlistFormatError(
            f"module {module.name}: range [{hi}:{lo}] out of bounds for "
            f"{wire.name} (width {wire.width})")
    return SigSpec([SigChunk(wire, lo, hi - lo + 1)])


def _const_bits(module: Module, text: str, m) -> str:
    """返回 LSB 在前的 bit 串。"""
    width = int(m.group(1))
    base = m.group(2).lower()
    digits = m.group(3).replace("_", "").lower()
    if base == "b":
        msb_first = digits
    elif base == "h":
        msb_first = ""
        for d in digits:
            msb_first += d * 4 if d in "xz" else format(int(d, 16), "04b")
    else:
        if any(d in "xz" for d in digits) or not digits.isdigit():
            raise NetlistFormatError(f"module {module.name}: bad decimal constant {text!r}")
        msb_first = format(int(digits), "b")
    if any(d not in "01xz" for d in msb_first):
        raise NetlistFormatError(f"module {module.name}: bad constant {text!r}")
    # 截断 / 零扩展到声明宽度
    msb_first = msb_first[-width:] if width else ""
    msb_first = msb_first.rjust(width, "0")
    return msb_first[::-1]
