from __future__ import annotations

import pytest

from rtl_muxtrace.netlist import Module, SigChunk, SigSpec, Wire


def _module():
    m = Module("\\m")
    m.add_wire("bus", width=8)
    m.add_wire("flag")
    return m


def test_whole_wire_sigspec():
    m = _module()
    s = SigSpec.from_wire(m.wire("\\bus"))
    assert s.is_wire()
    assert s.as_wire() is m.wire("\\bus")
    assert s.size == 8
    assert repr(s) == "\\bus"


def test_adjacent_slices_merge_into_whole_wire():
    m = _module()
    bus = m.wire("\\bus")
    s = SigSpec([SigChunk(bus, 0, 4), SigChunk(bus, 4, 4)])
    assert s.is_wire()
    assert s == SigSpec.from_wire(bus)
    assert hash(s) == hash(SigSpec.from_wire(bus))


def test_structural_equality_uses_names():
    a = Wire("\\sig", 2)
    b = Wire("\\sig", 2)
    assert SigSpec.from_wire(a) == SigSpec.from_wire(b)
    assert SigSpec.from_wire(a) != SigSpec([SigChunk(a, 0, 1)])


def test_slice_is_not_a_wire():
    m = _module()
    s = SigSpec([SigChunk(m.wire("\\bus"), 2, 3)])
    assert not s.is_wire()
    assert s.is_chunk()
    assert repr(s) == "\\bus [4:2]"
    with pytest.raises(ValueError):
        s.as_wire()


def test_constants_and_wire_chunks():
    m = _module()
    s = SigSpec([SigChunk.const("10"), SigChunk.const("1"), SigChunk(m.wire("\\flag"))])
    assert len(s.chunks) == 2
    assert s.chunks[0].data == "101"
    assert [c.wire.name for c in s.wire_chunks()] == ["\\flag"]
    assert not s.is_fully_const()
    assert SigSpec.const(5, 3).chunks[0].data == "101"
    assert SigSpec.const(5, 3).is_fully_const()


def test_out_of_range_chunk_rejected():
    m = _module()
    with pytest.raises(ValueError):
        SigChunk(m.wire("\\flag"), 0, 2)


def test_wire_cannot_be_input_and_output():
    with pytest.raises(ValueError):
        Wire("\\w", 1, port_input=True, port_output=True)
