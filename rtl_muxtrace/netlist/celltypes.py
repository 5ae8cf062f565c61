# rtl_muxtrace/netlist/celltypes.py
"""Port-direction signatures of the internal primitive cell library."""
from __future__ import annotations

from typing import Dict, NamedTuple, Optional, Tuple


class CellSignature(NamedTuple):
    inputs: Tuple[str, ...]
    outputs: Tuple[str, ...]


_UNARY_OPS = (
    "$not", "$pos", "$neg", "$logic_not",
    "$reduce_and", "$reduce_or", "$reduce_xor", "$reduce_xnor", "$reduce_bool",
)

_BINARY_OPS = (
    "$and", "$or", "$xor", "$xnor",
    "$shl", "$shr", "$sshl", "$sshr", "$shift", "$shiftx",
    "$lt", "$le", "$eq", "$ne", "$eqx", "$nex", "$ge", "$gt",
    "$add", "$sub", "$mul", "$div", "$mod", "$pow",
    "$logic_and", "$logic_or",
)

_GATES_1 = ("$_BUF_", "$_NOT_")
_GATES_2 = ("$_AND_", "$_NAND_", "$_OR_", "$_NOR_", "$_XOR_", "$_XNOR_",
            "$_ANDNOT_", "$_ORNOT_")

CELL_TYPES: Dict[str, CellSignature] = {}

for _t in _UNARY_OPS + _GATES_1:
    CELL_TYPES[_t] = CellSignature(("A",), ("Y",))
for _t in _BINARY_OPS + _GATES_2:
    CELL_TYPES[_t] = CellSignature(("A", "B"), ("Y",))

CELL_TYPES.update({
    "$mux": CellSignature(("A", "B", "S"), ("Y",)),
    "$pmux": CellSignature(("A", "B", "S"), ("Y",)),
    "$bmux": CellSignature(("A", "S"), ("Y",)),
    "$_MUX_": CellSignature(("A", "B", "S"), ("Y",)),
    "$_NMUX_": CellSignature(("A", "B", "S"), ("Y",)),
    "$dff": CellSignature(("CLK", "D"), ("Q",)),
    "$dffe": CellSignature(("CLK", "EN", "D"), ("Q",)),
    "$adff": CellSignature(("CLK", "ARST", "D"), ("Q",)),
    "$adffe": CellSignature(("CLK", "ARST", "EN", "D"), ("Q",)),
    "$sdff": CellSignature(("CLK", "SRST", "D"), ("Q",)),
    "$sdffe": CellSignature(("CLK", "SRST", "EN", "D"), ("Q",)),
    "$dlatch": CellSignature(("EN", "D"), ("Q",)),
    "$_DFF_P_": CellSignature(("C", "D"), ("Q",)),
    "$_DFF_N_": CellSignature(("C", "D"), ("Q",)),
    "$memrd": CellSignature(("CLK", "EN", "ADDR"), ("DATA",)),
    "$memwr": CellSignature(("CLK", "EN", "ADDR", "DATA"), ()),
    "$mem": CellSignature(("RD_CLK", "RD_EN", "RD_ADDR", "WR_CLK", "WR_EN",
                           "WR_ADDR", "WR_DATA"), ("RD_DATA",)),
})

# Fallback for unknown cell types without recorded directions.
DEFAULT_OUTPUT_PORTS = ("Y", "Z", "Q", "OUT", "O")


def get_signature(cell_type: str) -> Optional[CellSignature]:
    return CELL_TYPES.get(cell_type)


def port_direction(cell_type: str, port: str) -> Optional[str]:
    """'input', 'output' or None when the cell type does not know the port."""
    sig = CELL_TYPES.get(cell_type)
    if sig is None:
        return None
    if port in sig.inputs:
        return "input"
    if port in sig.outputs:
        return "output"
    return None
