# rtl_muxtrace/trace/__init__.py

from .classifier import MuxClassifier, MuxSelect
from .frontier import Frontier, FrontierItem, FrontierSearch, MuxResult, SearchStats
from .hierarchy import HierarchyIndex
from .namer import better_wire_name

__all__ = [
    "MuxClassifier",
    "MuxSelect",
    "Frontier",
    "FrontierItem",
    "FrontierSearch",
    "MuxResult",
    "SearchStats",
    "HierarchyIndex",
    "better_wire_name",
]
