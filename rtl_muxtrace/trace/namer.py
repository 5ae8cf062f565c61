# rtl_muxtrace/trace/namer.py

from ..netlist import Module, Wire, is_public_id


def _is_same_wire(sig, wire: Wire) -> bool:
    return sig.is_wire() and sig.as_wire().name == wire.name


def better_wire_name(module: Module, wire: Wire) -> str:
    """
    若 wire 在某条直连的一侧，而另一侧是用户命名（'\\' 开头）的整条 wire，
    返回那个名字；否则返回 wire 自己的名字。
    """
    for lhs, rhs in module.connections:
        if _is_same_wire(rhs, wire):
            if lhs.is_wire() and is_public_id(lhs.as_wire().name):
                return lhs.as_wire().name
        elif _is_same_wire(lhs, wire):
            if rhs.is_wire() and is_public_id(rhs.as_wire().name):
                return rhs.as_wire().name
    return wire.name
