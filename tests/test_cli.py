from pathlib import Path
from typing import cast as _cast

import pytest
from click.core import Command
from click.testing import CliRunner

from srec16 import __version__ as _version
from srec16.__main__ import main as _main
from srec16.cli import *
from srec16.decoder import load
from srec16.errors import SrecError
from srec16.errors import SrecErrorKind

main = _cast(Command, main)  # suppress warnings


@pytest.fixture
def tmppath(tmpdir):
    return Path(str(tmpdir))


def read_text(path):
    path = str(path)
    with open(path, 'rt') as file:
        data = file.read()
    data = data.replace('\r\n', '\n').replace('\r', '\n')  # normalize
    return data


def test_main_module():
    _main('__not_main__')


def test_version():
    runner = CliRunner()
    result = runner.invoke(main, ['--version'])
    assert result.exit_code == 0
    assert result.output.strip() == _version


class TestBasedIntParamType:

    def test_convert(self):
        assert BASED_INT.convert('0x100', None, None) == 0x100
        assert BASED_INT.convert('10', None, None) == 10

    def test_convert_fail(self):
        with pytest.raises(click.BadParameter, match='invalid integer'):
            BASED_INT.convert('0xZZ', None, None)


class TestEncode:

    def test_encode(self, tmppath):
        path_in = tmppath / 'test.bin'
        path_out = tmppath / 'test.s19'
        path_in.write_bytes(bytes(range(20)))

        args = ['encode', '-a', '0x100', '-H', 'TEST', '-H', 'v1', str(path_in), str(path_out)]
        result = CliRunner().invoke(main, args)
        assert result.exit_code == 0, result.output

        lines = read_text(path_out).splitlines()
        assert len(lines) == 5
        assert lines[0] == 'S007000054455354B8'
        assert lines[2].startswith('S1130100')
        assert lines[3].startswith('S1070110')
        assert lines[4] == 'S9030100FB'

        image = load(path_out)
        assert image.headers == ('TEST', 'v1')
        assert image.start == 0x0100
        assert image.end == 0x0113
        assert image.data == bytes(range(20))

    def test_encode_width(self, tmppath):
        path_in = tmppath / 'test.bin'
        path_out = tmppath / 'test.s19'
        path_in.write_bytes(bytes(range(10)))

        result = CliRunner().invoke(main, ['encode', '-w', '3', str(path_in), str(path_out)])
        assert result.exit_code == 0, result.output

        lines = read_text(path_out).splitlines()
        assert len(lines) == 5
        assert [line[:8] for line in lines[:4]] == ['S1060000', 'S1060003', 'S1060006', 'S1040009']

    def test_encode_empty(self, tmppath):
        path_in = tmppath / 'test.bin'
        path_out = tmppath / 'test.s19'
        path_in.write_bytes(b'')

        result = CliRunner().invoke(main, ['encode', str(path_in), str(path_out)])
        assert result.exit_code == 0, result.output
        assert read_text(path_out) == 'S9030000FC\n'

    def test_encode_stdio(self):
        result = CliRunner().invoke(main, ['encode', '-a', '0x10', '-', '-'], input=b'\x01\x02\x03')
        assert result.exit_code == 0, result.output
        lines = result.stdout_bytes.decode().splitlines()
        assert lines == ['S1060010010203E3', 'S9030010EC']

    def test_encode_address_overflow(self, tmppath):
        path_in = tmppath / 'test.bin'
        path_out = tmppath / 'test.s19'
        path_in.write_bytes(b'\x01\x02')

        result = CliRunner().invoke(main, ['encode', '-a', '0xFFFF', str(path_in), str(path_out)])
        assert result.exit_code == 2
        assert 'address overflow' in result.output
        assert not path_out.exists()

        result = CliRunner().invoke(main, ['encode', '-a', '0xFFFE', str(path_in), str(path_out)])
        assert result.exit_code == 0, result.output

    def test_encode_width_range(self, tmppath):
        path_in = tmppath / 'test.bin'
        path_in.write_bytes(b'\x01')

        result = CliRunner().invoke(main, ['encode', '-w', '0', str(path_in), '-'])
        assert result.exit_code == 2

        result = CliRunner().invoke(main, ['encode', '-w', '253', str(path_in), '-'])
        assert result.exit_code == 2


class TestDecode:

    def test_decode(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_out = tmppath / 'test.bin'
        path_in.write_text('S1040010FFEC\nS1040013FFE9\nS9030010EC\n')

        result = CliRunner().invoke(main, ['decode', str(path_in), str(path_out)])
        assert result.exit_code == 0, result.output
        assert path_out.read_bytes() == b'\xFF\x00\x00\xFF'

    def test_decode_stdio(self):
        text = b'S1060010010203E3\r\nS9030010EC\r\n'
        result = CliRunner().invoke(main, ['decode', '-', '-'], input=text)
        assert result.exit_code == 0, result.output
        assert result.stdout_bytes == b'\x01\x02\x03'

    def test_decode_invalid(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_out = tmppath / 'test.bin'
        path_in.write_text('S1040010FFEC\n')

        result = CliRunner().invoke(main, ['decode', str(path_in), str(path_out)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SrecError)
        assert result.exception.kind == SrecErrorKind.UNEXPECTED_EOF
        assert not path_out.exists()


class TestInfo:

    def test_info(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_in.write_text('S007000054455354B8\nS1060010010203E3\nS9030010EC\n')

        result = CliRunner().invoke(main, ['info', str(path_in)])
        assert result.exit_code == 0, result.output
        assert result.output == ('header: TEST\n'
                                 'start: 0x0010\n'
                                 'end: 0x0012\n'
                                 'size: 3\n'
                                 'records: 1\n')

    def test_info_empty(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_in.write_text('S9030000FC\n')

        result = CliRunner().invoke(main, ['info', str(path_in)])
        assert result.exit_code == 0, result.output
        assert result.output == 'start: 0x0000\nend: 0x0000\nsize: 0\nrecords: 0\n'


class TestValidate:

    def test_validate(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_in.write_text('S1060010010203E3\nS9030010EC\n')

        result = CliRunner().invoke(main, ['validate', str(path_in)])
        assert result.exit_code == 0, result.output
        assert result.output == ''

    def test_validate_raises(self, tmppath):
        path_in = tmppath / 'test.s19'
        path_in.write_text('S1060010010203E3\nS2040010FFEC\nS9030010EC\n')

        result = CliRunner().invoke(main, ['validate', str(path_in)])
        assert result.exit_code == 1
        assert isinstance(result.exception, SrecError)
        assert result.exception.kind == SrecErrorKind.UNSUPPORTED_RECORD
        assert result.exception.lineno == 2

    def test_validate_missing(self, tmppath):
        result = CliRunner().invoke(main, ['validate', str(tmppath / 'missing.s19')])
        assert result.exit_code == 2
