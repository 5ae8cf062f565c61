# rtl_muxtrace/netlist/model.py

from __future__ import annotations
import fnmatch
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple

from . import celltypes
from .sigspec import SigSpec


def escape_id(name: str) -> str:
    """用户名字统一加 '\\' 前缀；已经带 '\\' / '$' 前缀的保持不变。"""
    if name.startswith("\\") or name.startswith("$"):
        return name
    return "\\" + name


def unescape_id(name: str) -> str:
    return name[1:] if name.startswith("\\") else name


def is_public_id(name: str) -> bool:
    """'\\' 开头为用户可见名字，'$' 开头为综合生成的内部名字。"""
    return name.startswith("\\")


@dataclass(eq=False)
class Wire:
    name: str
    width: int = 1
    port_input: bool = False
    port_output: bool = False
    attributes: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.width < 0:
            raise ValueError(f"wire {self.name}: negative width {self.width}")
        if self.port_input and self.port_output:
            raise ValueError(f"wire {self.name}: cannot be both input and output port")

    @property
    def is_port(self) -> bool:
        return self.port_input or self.port_output

    def __repr__(self) -> str:
        return f"Wire({self.name}, w={self.width})"


@dataclass(eq=False)
class Cell:
    name: str
    type: str
    connections: Dict[str, SigSpec] = field(default_factory=dict)
    # 未知 cell 类型可以显式给出端口方向: port -> "input" / "output"
    directions: Dict[str, str] = field(default_factory=dict)
    module: Optional["Module"] = field(default=None, repr=False)

    def get_port(self, port: str) -> SigSpec:
        return self.connections.get(port, SigSpec())

    def _port_direction(self, port: str) -> Optional[str]:
        design = self.module.design if self.module is not None else None
        if design is not None:
            sub = design.module(self.type)
            if sub is not None:
                # 子模块端口名就是子模块里的 wire 名
                w = sub.wire(escape_id(port))
                if w is None:
                    return None
                if w.port_input:
                    return "input"
                if w.port_output:
                    return "output"
                return None
        direction = celltypes.port_direction(self.type, port)
        if direction is not None:
            return direction
        if port in self.directions:
            return self.directions[port]
        if celltypes.get_signature(self.type) is None:
            return "output" if port in celltypes.DEFAULT_OUTPUT_PORTS else "input"
        return None

    def input(self, port: str) -> bool:
        return self._port_direction(port) in ("input", "inout")

    def output(self, port: str) -> bool:
        return self._port_direction(port) in ("output", "inout")

    def output_ports(self) -> List[Tuple[str, SigSpec]]:
        return [(p, s) for p, s in self.connections.items() if self.output(p)]


class Module:
    def __init__(self, name: str):
        self.name = name
        self.wires: Dict[str, Wire] = {}
        self.cells: Dict[str, Cell] = {}
        # (lhs, rhs)：lhs 由 rhs 驱动
        self.connections: List[Tuple[SigSpec, SigSpec]] = []
        # 尚未被 proc 展开的行为级结构（必须为空）
        self.processes: List[str] = []
        self.design: Optional["Design"] = None

    # ---------- 构建辅助 ----------

    def add_wire(self, name: str, width: int = 1, port_input: bool = False,
                 port_output: bool = False, **attributes) -> Wire:
        name = escape_id(name)
        if name in self.wires:
            raise ValueError(f"module {self.name}: duplicate wire {name}")
        w = Wire(name, width, port_input, port_output, dict(attributes))
        self.wires[name] = w
        return w

    def add_cell(self, name: str, cell_type: str,
                 connections: Optional[Dict[str, SigSpec]] = None,
                 directions: Optional[Dict[str, str]] = None) -> Cell:
        name = escape_id(name)
        cell_type = escape_id(cell_type)
        if name in self.cells:
            raise ValueError(f"module {self.name}: duplicate cell {name}")
        c = Cell(name, cell_type, dict(connections or {}), dict(directions or {}), self)
        self.cells[name] = c
        return c

    def connect(self, lhs: SigSpec, rhs: SigSpec) -> None:
        self.connections.append((lhs, rhs))

    # ---------- 查询 ----------

    def wire(self, name: str) -> Optional[Wire]:
        return self.wires.get(name)

    def ports(self) -> List[Wire]:
        return [w for w in self.wires.values() if w.is_port]

    def selected_cells(self) -> List[Cell]:
        if self.design is None:
            return list(self.cells.values())
        return [c for c in self.cells.values() if self.design.selected(self, c)]

    def __repr__(self) -> str:
        return (f"Module({self.name}, wires={len(self.wires)}, "
                f"cells={len(self.cells)}, conns={len(self.connections)})")


@dataclass
class Selection:
    """
    full=True 表示整个设计都被选中。
    否则 modules 为整体选中的模块；members 为部分选中的模块及其成员名。
    """
    full: bool = True
    modules: Set[str] = field(default_factory=set)
    members: Dict[str, Set[str]] = field(default_factory=dict)

    @classmethod
    def from_patterns(cls, design: "Design", patterns: Iterable[str]) -> "Selection":
        """
        模式格式:
          - "cpu*"         : 选中名字匹配的整个模块
          - "cpu/alu_*"    : 只选中模块内匹配的 cell / wire
        名字匹配时忽略 '\\' 前缀。
        """
        patterns = list(patterns)
        if not patterns:
            return cls()
        sel = cls(full=False)
        for pat in patterns:
            mod_pat, _, member_pat = pat.partition("/")
            for mod in design.modules.values():
                if not _id_match(mod.name, mod_pat):
                    continue
                if not member_pat:
                    sel.modules.add(mod.name)
                    continue
                names = [n for n in list(mod.cells) + list(mod.wires)
                         if _id_match(n, member_pat)]
                if names:
                    sel.members.setdefault(mod.name, set()).update(names)
        return sel

    def selected_module(self, module_name: str) -> bool:
        if self.full or module_name in self.modules:
            return True
        return bool(self.members.get(module_name))

    def selected_member(self, module_name: str, member_name: str) -> bool:
        if self.full or module_name in self.modules:
            return True
        return member_name in self.members.get(module_name, ())


def _id_match(name: str, pattern: str) -> bool:
    return fnmatch.fnmatchcase(unescape_id(name), unescape_id(pattern)) or \
        fnmatch.fnmatchcase(name, pattern)


class Design:
    def __init__(self, top: Optional[str] = None):
        self.modules: Dict[str, Module] = {}
        self.top = escape_id(top) if top else None
        self.selection = Selection()

    def add_module(self, name: str) -> Module:
        name = escape_id(name)
        if name in self.modules:
            raise ValueError(f"duplicate module {name}")
        m = Module(name)
        m.design = self
        self.modules[name] = m
        return m

    def module(self, name: str) -> Optional[Module]:
        return self.modules.get(name)

    def top_module(self) -> Optional[Module]:
        if self.top is not None:
            return self.modules.get(self.top)
        # 没有指定 top：取未被任何 cell 实例化的唯一模块
        instantiated = {c.type for m in self.modules.values() for c in m.cells.values()}
        roots = [m for m in self.modules.values() if m.name not in instantiated]
        return roots[0] if len(roots) == 1 else None

    def selected_modules(self) -> List[Module]:
        return [m for m in self.modules.values() if self.selection.selected_module(m.name)]

    def selected(self, module: Module, member: Any = None) -> bool:
        if member is None:
            return self.selection.selected_module(module.name)
        return self.selection.selected_member(module.name, member.name)

    def summary(self) -> str:
        n_cells = sum(len(m.cells) for m in self.modules.values())
        n_wires = sum(len(m.wires) for m in self.modules.values())
        return f"Design: {len(self.modules)} modules, {n_wires} wires, {n_cells} cells"
