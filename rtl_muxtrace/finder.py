# rtl_muxtrace/finder.py
from __future__ import annotations
import logging
from typing import List, Optional, Tuple

from .config import Config
from .errors import AmbiguousWireError, UnknownModuleError, UnknownWireError
from .frontend import NetlistFrontend
from .netlist import Design, Module, Selection, SigSpec, Wire, escape_id
from .trace import FrontierSearch, HierarchyIndex, MuxClassifier, MuxResult

logger = logging.getLogger(__name__)


class MuxFinder:
    """find_next_mux 命令：定位起点 wire，建立层次索引，执行前沿搜索。"""

    def __init__(self, design: Design, cfg: Optional[Config] = None):
        self.design = design
        self.cfg = cfg or Config()
        self.classifier = MuxClassifier(self.cfg.mux_types, self.cfg.reset_token)

    @classmethod
    def from_config(cls, cfg: Config) -> "MuxFinder":
        design = NetlistFrontend(cfg).load()
        if cfg.select:
            design.selection = Selection.from_patterns(design, cfg.select)
        return cls(design, cfg)

    def locate_start(self, wire_name: str, module_filter: Optional[str] = None,
                     index: Optional[HierarchyIndex] = None) -> Tuple[Module, Wire]:
        """
        按拓扑序遍历候选模块，找到唯一包含起点 wire 的模块。
        module_filter 按模块名子串匹配。
        """
        if index is None:
            index = HierarchyIndex.build(self.design)
        target = escape_id(wire_name)
        filter_matched = not module_filter
        found: List[Tuple[Module, Wire]] = []

        for module in index.modules():
            if module_filter and module_filter not in module.name:
                continue
            filter_matched = True
            wire = module.wire(target)
            if wire is None:
                continue
            found.append((module, wire))
            if len(found) > 1:
                raise AmbiguousWireError(wire_name, [m.name for m, _ in found])

        if not filter_matched:
            raise UnknownModuleError(module_filter)
        if not found:
            raise UnknownWireError(wire_name)
        return found[0]

    def find_next_mux(self, wire_name: str, module_filter: Optional[str] = None) -> MuxResult:
        index = HierarchyIndex.build(self.design)
        logger.info(index.summary())
        module, wire = self.locate_start(wire_name, module_filter, index=index)
        logger.info("Start wire: %s (module: %s)", wire.name, module.name)

        search = FrontierSearch(self.design, index, self.classifier)
        result, stats = search.run_with_stats(module, SigSpec.from_wire(wire))
        logger.debug("Search stats: %s", stats.summary())
        logger.info("Mux select: %s", result.select_wire)
        logger.info("Module: %s", result.module)
        return result
