# rtl_muxtrace/frontend/__init__.py

from .base import FrontendBase
from .netlist_frontend import NetlistFrontend, build_design, parse_sig

__all__ = ["FrontendBase", "NetlistFrontend", "build_design", "parse_sig"]
