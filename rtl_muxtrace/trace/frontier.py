# rtl_muxtrace/trace/frontier.py

from __future__ import annotations
import logging
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Optional, Set, Tuple

from ..errors import UnresolvedProcessError
from ..netlist import Design, Module, SigChunk, SigSpec, Wire, escape_id
from .classifier import OUTPUT_PORT, SELECT_PORT, MuxClassifier, MuxSelect
from .hierarchy import HierarchyIndex
from .namer import better_wire_name

logger = logging.getLogger(__name__)

NOT_FOUND = "NONE"


@dataclass(frozen=True)
class MuxResult:
    select_wire: str
    module: str

    @classmethod
    def not_found(cls) -> "MuxResult":
        return cls(NOT_FOUND, NOT_FOUND)

    @property
    def found(self) -> bool:
        return self.select_wire != NOT_FOUND or self.module != NOT_FOUND


@dataclass(frozen=True)
class FrontierItem:
    """(模块名, 信号表达式) 结构化键，visited 判重按值比较。"""
    module: str
    sig: SigSpec

    def __repr__(self) -> str:
        return f"{self.module}:{self.sig!r}"


@dataclass
class SearchStats:
    popped: int = 0
    skipped: int = 0
    hops: Counter = field(default_factory=Counter)

    def summary(self) -> str:
        hops = ", ".join(f"{k}={v}" for k, v in sorted(self.hops.items()))
        return f"popped={self.popped} skipped={self.skipped} hops[{hops}]"


class Frontier:
    """
    一次查询的工作队列 + 已探索集合：
      - 直连 / 跨层次是“零代价”的，压到队首
      - 经过逻辑 cell 的扇出压到队尾
    """

    def __init__(self):
        self.queue: Deque[FrontierItem] = deque()
        self.visited: Set[FrontierItem] = set()

    def __bool__(self) -> bool:
        return bool(self.queue)

    def __len__(self) -> int:
        return len(self.queue)

    def push_front(self, item: FrontierItem) -> None:
        self.queue.appendleft(item)

    def push_back(self, item: FrontierItem) -> None:
        self.queue.append(item)

    def pop(self) -> FrontierItem:
        return self.queue.popleft()

    def mark(self, item: FrontierItem) -> bool:
        """已探索返回 False，否则记录并返回 True。"""
        if item in self.visited:
            return False
        self.visited.add(item)
        return True


def _bound_to(sig: SigSpec, wire: Wire) -> bool:
    # 按 wire 名字匹配（不是对象身份）
    return sig.is_wire() and sig.as_wire().name == wire.name


class FrontierSearch:
    """
    从起点信号出发，沿扇出 / 直连 / 子模块 / 父模块四类边前向搜索，
    返回第一个 select 为真正选择信号（非复位）的 mux。
    """

    def __init__(self, design: Design, index: HierarchyIndex,
                 classifier: Optional[MuxClassifier] = None):
        self.design = design
        self.index = index
        self.classifier = classifier or MuxClassifier()

    def run(self, module: Module, sig: SigSpec) -> MuxResult:
        return self.run_with_stats(module, sig)[0]

    def run_with_stats(self, module: Module, sig: SigSpec) -> Tuple[MuxResult, SearchStats]:
        """队列、visited 和统计都只属于这一次调用。"""
        frontier = Frontier()
        stats = SearchStats()
        frontier.push_back(FrontierItem(module.name, sig))

        while frontier:
            item = frontier.pop()
            stats.popped += 1
            if not frontier.mark(item):
                stats.skipped += 1
                logger.debug("The current pair has already been explored: %r", item)
                continue

            cur = self.design.module(item.module)
            if cur.processes:
                raise UnresolvedProcessError(cur.name)

            for chunk in item.sig.chunks:
                if chunk.wire is None:
                    logger.debug("The current chunk is not a wire.")
                    continue
                logger.debug("Intermediate wire: %s (module: %s)", chunk.wire.name, cur.name)

                result = self._check_muxes(frontier, stats, cur, chunk)
                if result is not None:
                    logger.debug("Search finished: %s", stats.summary())
                    return result, stats
                self._expand_cells(frontier, stats, cur, chunk)
                self._expand_connections(frontier, stats, cur, chunk)
                self._expand_submodules(frontier, stats, cur, chunk)
                self._expand_parent(frontier, stats, cur, chunk)

        logger.debug("Frontier exhausted: %s", stats.summary())
        return MuxResult.not_found(), stats

    def _push(self, frontier: Frontier, stats: SearchStats, kind: str,
              module: Module, sig: SigSpec, front: bool) -> None:
        stats.hops[kind] += 1
        item = FrontierItem(module.name, sig)
        if front:
            frontier.push_front(item)
        else:
            frontier.push_back(item)
        logger.debug("  Adding %r (module: %s) through %s", sig, module.name, kind)

    # ----- a) mux 检查 -----
    def _check_muxes(self, frontier: Frontier, stats: SearchStats, module: Module,
                     chunk: SigChunk) -> Optional[MuxResult]:
        for cell in module.selected_cells():
            if not self.classifier.is_mux(cell):
                continue
            for port, sig in cell.connections.items():
                if not _bound_to(sig, chunk.wire) or not cell.input(port):
                    continue
                if port == SELECT_PORT and \
                        self.classifier.classify(cell) is MuxSelect.GENUINE:
                    logger.debug("    Found mux %s with genuine select.", cell.name)
                    select = self.classifier.select_wire(cell)
                    return MuxResult(better_wire_name(module, select), module.name)
                if port == SELECT_PORT:
                    logger.debug("    Mux %s select %s is a reset signal.",
                                 cell.name, chunk.wire.name)
                self._push(frontier, stats, "mux", module, cell.get_port(OUTPUT_PORT),
                           front=False)
        return None

    # ----- b) 普通 cell 扇出 -----
    def _expand_cells(self, frontier: Frontier, stats: SearchStats, module: Module,
                      chunk: SigChunk) -> None:
        for cell in module.selected_cells():
            if self.design.module(cell.type) is not None:
                continue
            for port, sig in cell.connections.items():
                if not _bound_to(sig, chunk.wire) or not cell.input(port):
                    continue
                for _, out_sig in cell.output_ports():
                    if out_sig:
                        self._push(frontier, stats, f"cell {cell.type}", module, out_sig,
                                   front=False)

    # ----- c) 直连别名 -----
    def _expand_connections(self, frontier: Frontier, stats: SearchStats, module: Module,
                            chunk: SigChunk) -> None:
        for lhs, rhs in module.connections:
            if _bound_to(rhs, chunk.wire):
                self._push(frontier, stats, "connection", module, lhs, front=True)

    # ----- d) 向下进入子模块 -----
    def _expand_submodules(self, frontier: Frontier, stats: SearchStats, module: Module,
                           chunk: SigChunk) -> None:
        for cell in module.selected_cells():
            sub = self.design.module(cell.type)
            if sub is None:
                continue
            for port, sig in cell.connections.items():
                if not _bound_to(sig, chunk.wire) or cell.output(port):
                    continue
                port_wire = sub.wire(escape_id(port))
                if port_wire is None:
                    logger.warning("Submodule %s has no port %s (cell %s in %s)",
                                   sub.name, port, cell.name, module.name)
                    continue
                self._push(frontier, stats, "submodule", sub, SigSpec.from_wire(port_wire),
                           front=True)

    # ----- e) 向上回到父模块 -----
    def _expand_parent(self, frontier: Frontier, stats: SearchStats, module: Module,
                       chunk: SigChunk) -> None:
        wire = module.wire(chunk.wire.name)
        if wire is None or not wire.port_output:
            return
        parent = self.index.parent_of(module)
        if parent is None:
            return
        for cell in parent.selected_cells():
            if self.design.module(cell.type) is not module:
                continue
            for port, sig in cell.connections.items():
                if escape_id(port) == wire.name and sig:
                    self._push(frontier, stats, "parent", parent, sig, front=True)
