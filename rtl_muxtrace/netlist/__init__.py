# rtl_muxtrace/netlist/__init__.py

from .sigspec import SigChunk, SigSpec
from .model import (
    Cell,
    Design,
    Module,
    Selection,
    Wire,
    escape_id,
    is_public_id,
    unescape_id,
)

__all__ = [
    "SigChunk",
    "SigSpec",
    "Cell",
    "Design",
    "Module",
    "Selection",
    "Wire",
    "escape_id",
    "is_public_id",
    "unescape_id",
]
