import pytest

from srec16.errors import SrecError
from srec16.errors import SrecErrorKind
from srec16.records import DATA_MAX
from srec16.records import DataChunk
from srec16.records import RecordKind
from srec16.records import SrecRecord


class TestRecordKind:

    def test_enum(self):
        assert RecordKind.INVALID == -1
        assert RecordKind.HEADER == 0
        assert RecordKind.DATA_16 == 1
        assert RecordKind.DATA_24 == 2
        assert RecordKind.DATA_32 == 3
        assert RecordKind.RESERVED == 4
        assert RecordKind.COUNT_16 == 5
        assert RecordKind.COUNT_24 == 6
        assert RecordKind.START_32 == 7
        assert RecordKind.START_24 == 8
        assert RecordKind.START_16 == 9

    def test_from_code(self):
        for code in range(10):
            assert RecordKind.from_code(code) == code

        for code in (-2, -1, 10, 11, 0xF, 0x10, 0xFF):
            assert RecordKind.from_code(code) is RecordKind.INVALID

    def test_is_count(self):
        counts = {RecordKind.COUNT_16, RecordKind.COUNT_24}
        for kind in RecordKind:
            assert kind.is_count() == (kind in counts)

    def test_is_data(self):
        datas = {RecordKind.DATA_16, RecordKind.DATA_24, RecordKind.DATA_32}
        for kind in RecordKind:
            assert kind.is_data() == (kind in datas)

    def test_is_header(self):
        for kind in RecordKind:
            assert kind.is_header() == (kind == RecordKind.HEADER)

    def test_is_start(self):
        starts = {RecordKind.START_16, RecordKind.START_24, RecordKind.START_32}
        for kind in RecordKind:
            assert kind.is_start() == (kind in starts)


class TestSrecRecord:

    def test___init__(self):
        record = SrecRecord(RecordKind.DATA_16, 0x1234, b'abc')
        assert record.kind == RecordKind.DATA_16
        assert record.address == 0x1234
        assert record.data == b'abc'
        assert record.count == 6
        assert record.checksum == 0x8D

    def test___init___explicit(self):
        record = SrecRecord(RecordKind.DATA_16, 0x1234, bytearray(b'abc'), count=9, checksum=0)
        assert record.data == b'abc'
        assert isinstance(record.data, bytes)
        assert record.count == 9
        assert record.checksum == 0

    def test___eq__(self):
        record1 = SrecRecord(RecordKind.DATA_16, 0x1234, b'abc')
        record2 = SrecRecord(RecordKind.DATA_16, 0x1234, b'abc')
        record3 = SrecRecord(RecordKind.DATA_16, 0x1235, b'abc')
        assert record1 == record2
        assert record1 != record3
        assert record1 != 'S10612346162638D'

    def test___repr__(self):
        record = SrecRecord(RecordKind.DATA_16, 0x1234, b'abc')
        text = repr(record)
        assert text == ("SrecRecord(RecordKind.DATA_16, address=0x1234, "
                        "data=b'abc', count=6, checksum=0x8D)")

    def test___str__(self):
        record = SrecRecord(RecordKind.DATA_16, 0x1234, b'abc')
        assert str(record) == 'S10612346162638D'

    def test_compute_checksum(self):
        assert SrecRecord(RecordKind.HEADER).compute_checksum() == 0xFC
        assert SrecRecord(RecordKind.START_16, 0x1234).compute_checksum() == 0xB6
        assert SrecRecord(RecordKind.COUNT_16, 0x0001).compute_checksum() == 0xFB
        assert SrecRecord(RecordKind.DATA_16, 0x0010, b'\x01\x02\x03').compute_checksum() == 0xE3

    def test_compute_count(self):
        assert SrecRecord(RecordKind.HEADER).compute_count() == 3
        assert SrecRecord(RecordKind.DATA_16, 0, b'abc').compute_count() == 6
        assert SrecRecord(RecordKind.DATA_16, 0, bytes(DATA_MAX)).compute_count() == 0xFF

    def test_create_data(self):
        record = SrecRecord.create_data(0x1234, b'abc')
        assert record.kind == RecordKind.DATA_16
        assert str(record) == 'S10612346162638D'

        record = SrecRecord.create_data(0x10010, b'\xFF')
        assert record.address == 0x0010
        assert str(record) == 'S1040010FFEC'

        record = SrecRecord.create_data(0, bytes(DATA_MAX))
        assert record.count == 0xFF

    def test_create_data_raises(self):
        with pytest.raises(ValueError, match='data size overflow'):
            SrecRecord.create_data(0, bytes(DATA_MAX + 1))

    def test_create_header(self):
        assert str(SrecRecord.create_header()) == 'S0030000FC'
        assert str(SrecRecord.create_header(b'HDR\0')) == 'S0070000484452001A'
        assert str(SrecRecord.create_header(b'TEST')) == 'S007000054455354B8'

    def test_create_header_raises(self):
        with pytest.raises(ValueError, match='data size overflow'):
            SrecRecord.create_header(bytes(DATA_MAX + 1))

    def test_create_start(self):
        assert str(SrecRecord.create_start()) == 'S9030000FC'
        assert str(SrecRecord.create_start(0x0010)) == 'S9030010EC'
        assert str(SrecRecord.create_start(0x1234)) == 'S9031234B6'
        assert str(SrecRecord.create_start(0x11234)) == 'S9031234B6'

    def test_parse(self):
        record = SrecRecord.parse('S1060010010203E3')
        assert record == SrecRecord(RecordKind.DATA_16, 0x0010, b'\x01\x02\x03')

        record = SrecRecord.parse('s1060010010203e3')
        assert record.data == b'\x01\x02\x03'
        assert record.checksum == 0xE3

        record = SrecRecord.parse('S9030000FC')
        assert record.kind == RecordKind.START_16
        assert record.data == b''

    def test_parse_unknown_type(self):
        record = SrecRecord.parse('SA030000FC')
        assert record.kind is RecordKind.INVALID

    def test_parse_raises_marker(self):
        with pytest.raises(SrecError, match='missing record marker') as excinfo:
            SrecRecord.parse('X9030000FC', lineno=3)
        assert excinfo.value.kind == SrecErrorKind.MALFORMED_RECORD
        assert excinfo.value.lineno == 3

    def test_parse_raises_count(self):
        with pytest.raises(SrecError, match='byte count too small') as excinfo:
            SrecRecord.parse('S9020000')
        assert excinfo.value.kind == SrecErrorKind.MALFORMED_RECORD
        assert excinfo.value.expected == 3
        assert excinfo.value.actual == 2

    def test_parse_raises_truncated(self):
        for line in ('S', 'S9', 'S90', 'S903', 'S9030000', 'S9030000F'):
            with pytest.raises(SrecError, match='record truncated') as excinfo:
                SrecRecord.parse(line)
            assert excinfo.value.kind == SrecErrorKind.MALFORMED_RECORD

    def test_parse_raises_length(self):
        with pytest.raises(SrecError, match='record length mismatch') as excinfo:
            SrecRecord.parse('S9030000FC00')
        assert excinfo.value.kind == SrecErrorKind.MALFORMED_RECORD
        assert excinfo.value.expected == 10
        assert excinfo.value.actual == 12

    def test_parse_raises_digit(self):
        with pytest.raises(SrecError, match='non-hexadecimal') as excinfo:
            SrecRecord.parse('S1060010010Z03E3')
        assert excinfo.value.kind == SrecErrorKind.MALFORMED_RECORD

    def test_parse_raises_checksum(self):
        with pytest.raises(SrecError, match='checksum error') as excinfo:
            SrecRecord.parse('S1060010010203E4', lineno=5)
        error = excinfo.value
        assert error.kind == SrecErrorKind.CHECKSUM_ERROR
        assert error.lineno == 5
        assert error.expected == 0xE3
        assert error.actual == 0xE4

    def test_to_str(self):
        record = SrecRecord(RecordKind.COUNT_16, 0x0001)
        assert record.to_str() == 'S5030001FB'

        record = SrecRecord(RecordKind.DATA_16, 0x0010, b'\x01\x02\x03', checksum=0)
        assert record.to_str() == 'S106001001020300'

    def test_to_str_raises(self):
        with pytest.raises(ValueError, match='invalid record type'):
            SrecRecord(RecordKind.INVALID).to_str()


def test_data_chunk():
    chunk = DataChunk(0x10, b'abc')
    assert chunk.address == 0x10
    assert chunk.data == b'abc'
    assert chunk == (0x10, b'abc')
