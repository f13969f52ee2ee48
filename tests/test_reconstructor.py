import numpy as np
import pytest
from hypothesis import given, settings, strategies as st

from rollstats.core.services.reconstructor import (
    CopyingReconstructor,
    SliceReconstructor,
    ReconstructorStrategy,
)
from rollstats.utils.synthetic import split_chunks

STRATEGIES = [CopyingReconstructor, SliceReconstructor]

# ------------------------------------------------------------
# Helpers
# ------------------------------------------------------------

def feed(reconstructor, chunks):
    records = []
    for chunk in chunks:
        records.extend(bytes(r) for r in reconstructor.consume(chunk))
    return records, reconstructor.tail


def be_i32(*values):
    return b"".join(v.to_bytes(4, "big", signed=True) for v in values)

# ------------------------------------------------------------
# Tests
# ------------------------------------------------------------

@pytest.mark.parametrize("cls", STRATEGIES)
def test_whole_records_in_one_chunk(cls):
    records, tail = feed(cls(4), [be_i32(1, 2, 3, 4)])

    assert records == [be_i32(1), be_i32(2), be_i32(3), be_i32(4)]
    assert tail == b""


@pytest.mark.parametrize("cls", STRATEGIES)
def test_partial_data_leading(cls):
    data = be_i32(1, 2, 3, 4)
    records, tail = feed(cls(4), [data[:2], data[2:]])

    assert records == [be_i32(1), be_i32(2), be_i32(3), be_i32(4)]
    assert tail == b""


@pytest.mark.parametrize("cls", STRATEGIES)
def test_partial_data_trailing(cls):
    data = be_i32(1, 2, 3, 4)
    records, tail = feed(cls(4), [data[:6], data[6:]])

    assert records == [be_i32(1), be_i32(2), be_i32(3), be_i32(4)]
    assert tail == b""


@pytest.mark.parametrize("cls", STRATEGIES)
def test_boundary_split_example(cls):
    stream = bytes(range(8))

    split = feed(cls(4), [stream[:3], stream[3:]])
    whole = feed(cls(4), [stream])

    assert split == ([stream[:4], stream[4:]], b"")
    assert split == whole


@pytest.mark.parametrize("cls", STRATEGIES)
def test_empty_chunk_leaves_tail_unchanged(cls):
    r = cls(4)
    r.consume(b"\x01\x02")

    assert r.consume(b"") == []
    assert r.tail == b"\x01\x02"
    assert r.records_emitted == 0


@pytest.mark.parametrize("cls", STRATEGIES)
def test_short_chunk_grows_tail(cls):
    r = cls(4)
    assert r.consume(b"\x01") == []
    assert r.consume(b"\x02") == []
    assert r.tail == b"\x01\x02"
    assert r.pending == 2


@pytest.mark.parametrize("cls", STRATEGIES)
def test_chunk_exactly_completing_tail(cls):
    r = cls(4)
    r.consume(b"\x01\x00")
    records = r.consume(b"\x00\x00")

    assert [bytes(x) for x in records] == [b"\x01\x00\x00\x00"]
    assert r.tail == b""


@pytest.mark.parametrize("cls", STRATEGIES)
def test_partial_buffer_sequence(cls):
    # (chunk, records produced, pending afterwards)
    steps = [
        (b"\x01\x00", 0, 2),
        (b"\x00\x00", 1, 0),
        (b"\x01\x00\x00\x00\x02\x00", 1, 2),
        (b"\x01\x00\x00\x00\x02\x00", 2, 0),
        (b"\x01\x00\x00\x00\x02\x00", 1, 2),
    ]
    r = cls(4)
    for chunk, produced, pending in steps:
        assert len(r.consume(chunk)) == produced
        assert r.pending == pending
    assert r.records_emitted == 5
    assert r.stream_offset == 22


@pytest.mark.parametrize("cls", STRATEGIES)
def test_accepts_any_buffer(cls):
    data = be_i32(7, 8)
    for chunk in (bytearray(data), memoryview(data), np.frombuffer(data, dtype=np.uint8)):
        records, tail = feed(cls(4), [chunk])
        assert records == [be_i32(7), be_i32(8)]
        assert tail == b""


@pytest.mark.parametrize("cls", STRATEGIES)
def test_ingest_is_a_pure_step(cls):
    r = cls(4)
    records, tail = r.ingest(b"\x00\x00", b"\x00\x05\x00\x00")

    assert [bytes(x) for x in records] == [be_i32(5)]
    assert bytes(tail) == b"\x00\x00"
    # stateful side untouched
    assert r.pending == 0
    assert r.records_emitted == 0


@pytest.mark.parametrize("cls", STRATEGIES)
@pytest.mark.parametrize("chunk", [b"\x03", b"\x03\x04", b"\x03\x04\x05\x06\x07"])
def test_ingest_leaves_caller_tail_alone(cls, chunk):
    r = cls(4)
    tail = bytearray(b"\x01\x02")

    first = r.ingest(tail, chunk)
    assert tail == bytearray(b"\x01\x02")

    second = r.ingest(tail, chunk)
    assert [bytes(x) for x in first[0]] == [bytes(x) for x in second[0]]
    assert bytes(first[1]) == bytes(second[1])


def test_strategies_agree_on_a_shared_tail():
    tail = bytearray(b"\x01\x02")
    results = [cls(4).ingest(tail, b"\x03\x04\x05") for cls in STRATEGIES]

    for records, new_tail in results:
        assert [bytes(x) for x in records] == [b"\x01\x02\x03\x04"]
        assert bytes(new_tail) == b"\x05"


def test_slice_records_view_the_chunk():
    chunk = bytearray(be_i32(1, 2))
    records = SliceReconstructor(4).consume(chunk)

    assert all(isinstance(x, memoryview) for x in records)
    chunk[3] = 9
    assert bytes(records[0]) == be_i32(9)


def test_copying_records_are_owned():
    chunk = bytearray(be_i32(1, 2))
    records = CopyingReconstructor(4).consume(chunk)

    chunk[3] = 9
    assert records[0] == be_i32(1)


def test_record_offsets():
    r = SliceReconstructor(8)
    r.consume(bytes(20))
    assert r.records_emitted == 2
    assert r.record_offset(2) == 16


@pytest.mark.parametrize("cls", STRATEGIES)
def test_rejects_oversized_tail(cls):
    with pytest.raises(ValueError):
        cls(4).ingest(b"\x00" * 4, b"")


@pytest.mark.parametrize("width", [0, -1])
def test_rejects_non_positive_width(width):
    with pytest.raises(ValueError):
        CopyingReconstructor(width)


def test_strategy_parse_and_build():
    assert ReconstructorStrategy.parse("copy") is ReconstructorStrategy.COPYING
    assert ReconstructorStrategy.parse(" Slice-Direct ") is ReconstructorStrategy.SLICE
    assert isinstance(ReconstructorStrategy.COPYING.build(2), CopyingReconstructor)
    assert isinstance(ReconstructorStrategy.SLICE.build(2), SliceReconstructor)
    with pytest.raises(ValueError):
        ReconstructorStrategy.parse("zero-copy")
    with pytest.raises(TypeError):
        ReconstructorStrategy.parse(3)

# ------------------------------------------------------------
# Chunk split invariance
# ------------------------------------------------------------

@settings(max_examples=200)
@given(
    data=st.binary(max_size=200),
    width=st.integers(min_value=1, max_value=9),
    sizes=st.lists(st.integers(min_value=0, max_value=23), max_size=30),
)
def test_chunk_split_invariance(data, width, sizes):
    expected = (
        [data[i : i + width] for i in range(0, len(data) - len(data) % width, width)],
        data[len(data) - len(data) % width :],
    )
    chunks = split_chunks(data, sizes)

    for cls in STRATEGIES:
        assert feed(cls(width), [data]) == expected
        assert feed(cls(width), chunks) == expected


@pytest.mark.parametrize("cls", STRATEGIES)
def test_reset_drops_pending_tail(cls):
    r = cls(4)
    r.consume(b"\x00\x00\x00")
    r.reset()

    assert r.pending == 0
    assert [bytes(x) for x in r.consume(be_i32(3))] == [be_i32(3)]


@pytest.mark.parametrize("cls", STRATEGIES)
def test_record_offsets_after_reset(cls):
    r = cls(4)
    r.consume(bytes(9))  # two records, one byte pending
    r.reset()
    r.consume(bytes(8))

    assert r.records_emitted == 4
    assert r.stream_offset == 17
    # the dropped byte shifts everything after the reset
    assert r.record_offset(2) == 9
    assert r.record_offset(3) == 13
