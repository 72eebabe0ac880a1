# Copyright (c) 2013-2025, Andrea Zoppi
# All rights reserved.
#
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are met:
#
# 1. Redistributions of source code must retain the above copyright notice,
#    this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS"
# AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO, THE
# IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE
# ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR CONTRIBUTORS BE
# LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR
# CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO, PROCUREMENT OF
# SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS
# INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF LIABILITY, WHETHER IN
# CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE)
# ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE, EVEN IF ADVISED OF THE
# POSSIBILITY OF SUCH DAMAGE.

r"""16-bit Motorola S-record decoder.

Quirks:
    Overlapping data records silently overwrite each other, in file order
    (last write wins).

    Duplicate header records are all kept, in file order.
"""

import io
import logging
import sys
from typing import IO
from typing import Iterable
from typing import List
from typing import NamedTuple
from typing import Optional
from typing import Tuple
from typing import Union

from bytesparse import Memory

from .errors import SrecError
from .errors import SrecErrorKind
from .records import DataChunk
from .records import RecordKind
from .records import SrecRecord
from .utils import AnyPath

_logger = logging.getLogger(__name__)


class DecodedImage(NamedTuple):
    r"""Decoded S-record file contents.

    The whole data is flattened into :attr:`data`, whose first byte lies at
    :attr:`start` and whose last byte lies at :attr:`end`.
    Addresses not covered by any data record read as zero.
    """

    headers: Tuple[str, ...]
    r"""Header strings, in file order."""

    start: int
    r"""Address of the first data byte; zero without data."""

    end: int
    r"""Address of the last data byte; zero without data."""

    data: bytes
    r"""Contiguous data buffer."""

    chunks: Tuple[DataChunk, ...] = ()
    r"""Data records, in file order."""

    @property
    def size(self) -> int:
        r"""int: Number of bytes within :attr:`data`."""

        return len(self.data)

    @property
    def memory(self) -> Memory:
        r"""Sparse memory built from :attr:`chunks`.

        Unlike :attr:`data`, holes between data records are not filled.

        Examples:
            >>> image = decode(['S1050010ABCD72', 'S1040020EFEC', 'S9030010EC'])
            >>> [list(block) for block in image.memory.to_blocks()]
            [[16, b'\xab\xcd'], [32, b'\xef']]
        """

        memory = Memory()
        for chunk in self.chunks:
            memory.write(chunk.address, chunk.data)
        return memory


class _DecodeState:

    def __init__(self):

        self.headers: List[str] = []
        self.chunks: List[DataChunk] = []
        self.start: Optional[int] = None
        self.end: Optional[int] = None
        self.terminated: bool = False
        self.records: int = 0

    def add_chunk(self, address: int, data: bytes) -> None:

        self.chunks.append(DataChunk(address, data))
        if data:
            endin = address + len(data) - 1
            self.start = address if self.start is None else min(self.start, address)
            self.end = endin if self.end is None else max(self.end, endin)

    def build(self) -> DecodedImage:

        memory = Memory()
        for chunk in self.chunks:
            memory.write(chunk.address, chunk.data)

        if self.start is None:
            start = end = 0
            data = b''
        else:
            start, end = self.start, self.end
            memory.flood(pattern=0)
            data = memory.to_bytes()

        return DecodedImage(tuple(self.headers), start, end, data, tuple(self.chunks))


def _parse_header(data: bytes) -> str:

    return data.rstrip(b'\0').decode('ascii', errors='replace')


def _apply_record(state: _DecodeState, record: SrecRecord, lineno: int) -> None:

    if state.terminated:
        raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'decoding already terminated',
                        lineno=lineno)

    kind = record.kind
    state.records += 1

    if kind == RecordKind.HEADER:
        state.headers.append(_parse_header(record.data))

    elif kind == RecordKind.DATA_16:
        state.add_chunk(record.address, record.data)

    elif kind == RecordKind.DATA_24 or kind == RecordKind.DATA_32:
        raise SrecError(SrecErrorKind.UNSUPPORTED_RECORD, 'unsupported address size',
                        lineno=lineno, actual=kind)

    elif kind == RecordKind.RESERVED:
        raise SrecError(SrecErrorKind.RESERVED_RECORD, 'S4 records are reserved',
                        lineno=lineno)

    elif kind.is_count():
        actual = len(state.chunks)
        if record.address != actual:
            raise SrecError(SrecErrorKind.COUNT_MISMATCH,
                            f'unexpected count: got 0x{actual:02X}, '
                            f'expected 0x{record.address:02X}',
                            lineno=lineno, expected=record.address, actual=actual)

    elif kind == RecordKind.START_24 or kind == RecordKind.START_32:
        raise SrecError(SrecErrorKind.UNSUPPORTED_RECORD,
                        'unsupported address termination type',
                        lineno=lineno, actual=kind)

    elif kind == RecordKind.START_16:
        state.terminated = True

    else:
        raise SrecError(SrecErrorKind.UNKNOWN_RECORD_TYPE, 'invalid record type',
                        lineno=lineno)


def decode(lines: Iterable[str]) -> DecodedImage:
    r"""Decodes a 16-bit S-record file.

    Each line is stripped of surrounding whitespace; blank lines are
    skipped. Line numbers reported by errors are the 1-based positions of
    the lines within `lines`, blank lines included. A missing termination
    record is reported at the last line; empty input reports no line number.

    A ``S9`` termination record is required; nothing may follow it.

    Args:
        lines (str iterable):
            Record lines, without or with line terminators.

    Returns:
        :class:`DecodedImage`: Decoded contents.

    Raises:
        :class:`SrecError`: The first invalid line aborts decoding.

    Examples:
        >>> image = decode(['S007000054455354B8',
        ...                 'S1060010010203E3',
        ...                 'S9030010EC'])
        >>> image.headers
        ('TEST',)
        >>> image.start, image.end, image.data
        (16, 18, b'\x01\x02\x03')
    """

    state = _DecodeState()
    lineno = None

    for lineno, line in enumerate(lines, 1):
        line = line.strip()
        if line:
            record = SrecRecord.parse(line, lineno)
            _apply_record(state, record, lineno)

    if not state.terminated:
        raise SrecError(SrecErrorKind.UNEXPECTED_EOF, 'unexpected end of file',
                        lineno=lineno)

    image = state.build()
    _logger.debug('decoded %d records, %d data chunks, span 0x%04X..0x%04X (%d bytes)',
                  state.records, len(image.chunks), image.start, image.end, image.size)
    return image


def load(in_path_or_stream: Optional[Union[AnyPath, IO]] = None) -> DecodedImage:
    r"""Loads and decodes a 16-bit S-record file.

    Args:
        in_path_or_stream (str or bytes IO):
            Path of the file within the filesystem, or byte input stream.
            If ``None``, ``sys.stdin.buffer`` is used.

    Returns:
        :class:`DecodedImage`: Decoded contents.

    Raises:
        :class:`SrecError`: Invalid file contents.

    See Also:
        :func:`decode`
    """

    if in_path_or_stream is None:
        in_path_or_stream = sys.stdin.buffer

    if isinstance(in_path_or_stream, io.IOBase):
        content = in_path_or_stream.read()
    else:
        path = str(in_path_or_stream)
        _logger.debug('loading %s', path)
        with open(path, 'rb') as stream:
            content = stream.read()

    lines = (line.decode('ascii', errors='replace') for line in content.splitlines())
    return decode(lines)
