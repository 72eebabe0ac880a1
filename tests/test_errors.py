from srec16.errors import SrecError
from srec16.errors import SrecErrorKind


def test_srec_error():
    error = SrecError(SrecErrorKind.COUNT_MISMATCH, 'unexpected count',
                      lineno=4, expected=1, actual=2)
    assert error.kind is SrecErrorKind.COUNT_MISMATCH
    assert error.message == 'unexpected count'
    assert error.lineno == 4
    assert error.expected == 1
    assert error.actual == 2
    assert str(error) == 'unexpected count (line 4)'
    assert error.args == ('unexpected count',)
    assert repr(error) == "SrecError(COUNT_MISMATCH, 'unexpected count', lineno=4)"


def test_srec_error_no_line():
    error = SrecError(SrecErrorKind.IO_FAILURE, 'failed')
    assert error.lineno is None
    assert error.expected is None
    assert error.actual is None
    assert str(error) == 'failed'


def test_kinds():
    names = {kind.name for kind in SrecErrorKind}
    assert names == {
        'MALFORMED_RECORD',
        'CHECKSUM_ERROR',
        'UNSUPPORTED_RECORD',
        'RESERVED_RECORD',
        'UNKNOWN_RECORD_TYPE',
        'COUNT_MISMATCH',
        'UNEXPECTED_EOF',
        'IO_FAILURE',
    }
