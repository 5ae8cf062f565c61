# rtl_muxtrace/trace/hierarchy.py

from __future__ import annotations
import logging
from typing import Dict, List, Optional, Set

import networkx as nx

from ..errors import EmptySelectionError, RecursiveHierarchyError
from ..netlist import Design, Module

logger = logging.getLogger(__name__)


class HierarchyIndex:
    """
    模块实例化层次的索引：
      - order:   拓扑序，被实例化的模块排在实例化它的模块之前
      - parents: 被实例化模块 -> 实例化它的模块（同一模块有多个父模块时，后写覆盖前写）
      - multi_parent: 观察到多个不同父模块的模块名；向上穿越只会用 parents 里记录的那一个
    每次查询都重新构建，不跨调用缓存。
    """

    def __init__(self, design: Design, graph: nx.DiGraph, order: List[str],
                 parents: Dict[str, str], multi_parent: Set[str]):
        self.design = design
        self.graph = graph
        self.order = order
        self.parents = parents
        self.multi_parent = multi_parent

    @classmethod
    def build(cls, design: Design) -> "HierarchyIndex":
        selected = design.selected_modules()
        if not selected:
            raise EmptySelectionError()

        graph = _build_instance_graph(design, selected)
        try:
            order = list(nx.lexicographical_topological_sort(graph))
        except nx.NetworkXUnfeasible:
            cycle = _find_cycle(graph)
            raise RecursiveHierarchyError(cycle) from None

        parents, multi_parent = _build_parent_map(design, selected)
        for name in sorted(multi_parent):
            logger.warning(
                "Module %s is instantiated by more than one parent; "
                "upward crossing only follows %s", name, parents[name])

        logger.debug("Hierarchy order: %s", ", ".join(order))
        return cls(design, graph, order, parents, multi_parent)

    def modules(self) -> List[Module]:
        return [self.design.module(name) for name in self.order]

    def parent_of(self, module: Module) -> Optional[Module]:
        name = self.parents.get(module.name)
        if name is None:
            return None
        return self.design.module(name)

    def summary(self) -> str:
        return (f"Hierarchy: {len(self.order)} modules, "
                f"{self.graph.number_of_edges()} instantiation edges")


def _build_instance_graph(design: Design, selected: List[Module]) -> nx.DiGraph:
    """边方向：被实例化模块 -> 实例化它的模块。"""
    graph = nx.DiGraph()
    worklist = list(selected)
    while worklist:
        module = worklist.pop(0)
        graph.add_node(module.name)
        for cell in module.selected_cells():
            tpl = design.module(cell.type)
            if tpl is None:
                continue
            if tpl.name not in graph:
                worklist.append(tpl)
            graph.add_edge(tpl.name, module.name)
    return graph


def _build_parent_map(design: Design, selected: List[Module]):
    parents: Dict[str, str] = {}
    multi_parent: Set[str] = set()
    for module in selected:
        for cell in module.selected_cells():
            tpl = design.module(cell.type)
            if tpl is None:
                continue
            prev = parents.get(tpl.name)
            if prev is not None and prev != module.name:
                multi_parent.add(tpl.name)
            parents[tpl.name] = module.name
    return parents, multi_parent


def _find_cycle(graph: nx.DiGraph) -> List[str]:
    try:
        edges = nx.find_cycle(graph)
    except nx.NetworkXNoCycle:
        return []
    return [u for u, _ in edges]
