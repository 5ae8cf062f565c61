# rtl_muxtrace/netlist/sigspec.py
"""Signal expressions: ordered bit-range chunks over wires and constants.

Chunks are stored LSB first. Equality and hashing are structural (wire name,
offset, width, constant bits), so two expressions that select the same bits
of the same wires compare equal no matter how they were built.
"""
from __future__ import annotations

from typing import Iterator, List, Optional, Sequence, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .model import Wire


class SigChunk:
    __slots__ = ("wire", "offset", "width", "data")

    def __init__(self, wire: Optional["Wire"] = None, offset: int = 0,
                 width: Optional[int] = None, data: str = ""):
        self.wire = wire
        if wire is not None:
            self.offset = offset
            self.width = wire.width - offset if width is None else width
            self.data = ""
            if self.offset < 0 or self.width < 0 or self.offset + self.width > wire.width:
                raise ValueError(
                    f"chunk [{offset}+:{self.width}] out of range for wire "
                    f"{wire.name} (width {wire.width})"
                )
        else:
            self.offset = 0
            self.width = len(data)
            self.data = data

    @classmethod
    def const(cls, bits: str) -> "SigChunk":
        """bits: LSB-first string over 0/1/x/z."""
        return cls(data=bits)

    @property
    def is_const(self) -> bool:
        return self.wire is None

    def key(self) -> Tuple:
        if self.wire is None:
            return ("const", self.data)
        return ("wire", self.wire.name, self.offset, self.width)

    def __eq__(self, other) -> bool:
        if not isinstance(other, SigChunk):
            return NotImplemented
        return self.key() == other.key()

    def __hash__(self) -> int:
        return hash(self.key())

    def __repr__(self) -> str:
        if self.wire is None:
            return f"{len(self.data)}'b{self.data[::-1]}"
        if self.offset == 0 and self.width == self.wire.width:
            return self.wire.name
        if self.width == 1:
            return f"{self.wire.name} [{self.offset}]"
        return f"{self.wire.name} [{self.offset + self.width - 1}:{self.offset}]"


def _merge(chunks: Sequence[SigChunk]) -> Tuple[SigChunk, ...]:
    out: List[SigChunk] = []
    for c in chunks:
        if c.width == 0:
            continue
        if out:
            last = out[-1]
            if last.wire is None and c.wire is None:
                out[-1] = SigChunk.const(last.data + c.data)
                continue
            if (last.wire is not None and last.wire is c.wire
                    and last.offset + last.width == c.offset):
                out[-1] = SigChunk(last.wire, last.offset, last.width + c.width)
                continue
        out.append(c)
    return tuple(out)


class SigSpec:
    """Immutable, hashable signal expression."""

    __slots__ = ("_chunks", "_hash")

    def __init__(self, chunks: Sequence[SigChunk] = ()):
        self._chunks = _merge(chunks)
        self._hash = None

    @classmethod
    def from_wire(cls, wire: "Wire") -> "SigSpec":
        return cls([SigChunk(wire)])

    @classmethod
    def const(cls, value: int, width: int) -> "SigSpec":
        bits = "".join("1" if (value >> i) & 1 else "0" for i in range(width))
        return cls([SigChunk.const(bits)])

    @property
    def chunks(self) -> Tuple[SigChunk, ...]:
        return self._chunks

    def wire_chunks(self) -> Iterator[SigChunk]:
        return (c for c in self._chunks if c.wire is not None)

    @property
    def size(self) -> int:
        return sum(c.width for c in self._chunks)

    def __len__(self) -> int:
        return self.size

    def __bool__(self) -> bool:
        return bool(self._chunks)

    def is_wire(self) -> bool:
        if len(self._chunks) != 1:
            return False
        c = self._chunks[0]
        return c.wire is not None and c.offset == 0 and c.width == c.wire.width

    def is_chunk(self) -> bool:
        return len(self._chunks) == 1

    def is_fully_const(self) -> bool:
        return all(c.wire is None for c in self._chunks)

    def as_wire(self) -> "Wire":
        if not self.is_wire():
            raise ValueError(f"{self!r} is not a whole wire")
        return self._chunks[0].wire

    def as_chunk(self) -> SigChunk:
        if not self.is_chunk():
            raise ValueError(f"{self!r} is not a single chunk")
        return self._chunks[0]

    def __eq__(self, other) -> bool:
        if not isinstance(other, SigSpec):
            return NotImplemented
        return self._chunks == other._chunks

    def __hash__(self) -> int:
        if self._hash is None:
            self._hash = hash(self._chunks)
        return self._hash

    def __repr__(self) -> str:
        if not self._chunks:
            return "{}"
        if len(self._chunks) == 1:
            return repr(self._chunks[0])
        return "{ " + " ".join(repr(c) for c in reversed(self._chunks)) + " }"
