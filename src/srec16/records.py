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

r"""Motorola S-record types and single-record handling.

Only 16-bit addressing is supported: every record carries a 4-digit
address field.

See Also:
    `<https://en.wikipedia.org/wiki/SREC_(file_format)>`_
"""

import enum
from typing import NamedTuple
from typing import Optional

from .errors import SrecError
from .errors import SrecErrorKind
from .utils import AnyBytes
from .utils import checksum
from .utils import decode_hex
from .utils import encode_hex_byte
from .utils import encode_hex_word
from .utils import hexlify

ADDRESS_SIZE: int = 2
r"""Address field size, in bytes."""

DATA_MAX: int = 0xFF - ADDRESS_SIZE - 1
r"""Maximum data field size, in bytes."""

INDEX_TYPE: int = 1
INDEX_COUNT: int = 2
INDEX_ADDRESS: int = 4
INDEX_DATA: int = 8


class RecordKind(enum.IntEnum):
    r"""Motorola S-record type."""

    INVALID = -1
    r"""Any type digit not listed below."""

    HEADER = 0
    r"""Header string. Optional."""

    DATA_16 = 1
    r"""16-bit address data record."""

    DATA_24 = 2
    r"""24-bit address data record."""

    DATA_32 = 3
    r"""32-bit address data record."""

    RESERVED = 4
    r"""Reserved tag."""

    COUNT_16 = 5
    r"""16-bit record count. Optional."""

    COUNT_24 = 6
    r"""24-bit record count. Optional."""

    START_32 = 7
    r"""32-bit start address. Terminates :attr:`DATA_32`."""

    START_24 = 8
    r"""24-bit start address. Terminates :attr:`DATA_24`."""

    START_16 = 9
    r"""16-bit start address. Terminates :attr:`DATA_16`."""

    @classmethod
    def from_code(cls, code: int) -> 'RecordKind':
        r"""Looks up a record type by its type digit.

        Args:
            code (int):
                Record type digit.

        Returns:
            :class:`RecordKind`: Matching kind, or :attr:`INVALID`.

        Examples:
            >>> RecordKind.from_code(1)
            <RecordKind.DATA_16: 1>
            >>> RecordKind.from_code(0xA)
            <RecordKind.INVALID: -1>
            >>> RecordKind.from_code(-1)
            <RecordKind.INVALID: -1>
        """

        if 0 <= code <= 9:
            return cls(code)
        return cls.INVALID

    def is_count(self) -> bool:
        r"""Tells whether this is a record count type."""

        return self == self.COUNT_16 or self == self.COUNT_24

    def is_data(self) -> bool:
        r"""Tells whether this is a data record type.

        Examples:
            >>> RecordKind.DATA_32.is_data()
            True
            >>> RecordKind.HEADER.is_data()
            False
        """

        return (self == self.DATA_16 or
                self == self.DATA_24 or
                self == self.DATA_32)

    def is_header(self) -> bool:

        return self == self.HEADER

    def is_start(self) -> bool:
        r"""Tells whether this is a start address (termination) type."""

        return (self == self.START_16 or
                self == self.START_24 or
                self == self.START_32)


class DataChunk(NamedTuple):
    r"""Contiguous run of data bytes at an absolute address."""

    address: int
    r"""Address of the first byte."""

    data: bytes
    r"""Byte data."""


class SrecRecord:
    r"""16-bit Motorola S-record line.

    Args:
        kind (:class:`RecordKind`):
            Record type.

        address (int):
            Address field value.

        data (bytes):
            Data field.

        count (int):
            Byte count field; computed if ``None``.

        checksum (int):
            Checksum field; computed if ``None``.
    """

    def __init__(
        self,
        kind: RecordKind,
        address: int = 0,
        data: AnyBytes = b'',
        count: Optional[int] = None,
        checksum: Optional[int] = None,
    ):

        self.kind: RecordKind = kind
        self.address: int = address
        self.data: bytes = bytes(data)
        self.count: int = self.compute_count() if count is None else count
        self.checksum: int = self.compute_checksum() if checksum is None else checksum

    def __eq__(self, other: object) -> bool:

        if not isinstance(other, SrecRecord):
            return NotImplemented
        return (self.kind == other.kind and
                self.address == other.address and
                self.data == other.data and
                self.count == other.count and
                self.checksum == other.checksum)

    def __repr__(self) -> str:

        return (f'{type(self).__name__}(RecordKind.{self.kind.name}, address=0x{self.address:04X}, '
                f'data={self.data!r}, count={self.count}, checksum=0x{self.checksum:02X})')

    def __str__(self) -> str:

        return self.to_str()

    def compute_checksum(self) -> int:
        r"""Computes the checksum over count, address and data fields.

        Examples:
            >>> record = SrecRecord(RecordKind.START_16, 0x1234)
            >>> hex(record.compute_checksum())
            '0xb6'
        """

        address = self.address & 0xFFFF
        values = [self.count & 0xFF, address >> 8, address & 0xFF]
        values.extend(self.data)
        return checksum(values)

    def compute_count(self) -> int:

        return ADDRESS_SIZE + len(self.data) + 1

    @classmethod
    def create_data(cls, address: int, data: AnyBytes) -> 'SrecRecord':
        r"""Creates a 16-bit data record.

        Args:
            address (int):
                Record address; masked to 16 bits.

            data (bytes):
                Record byte data.

        Returns:
            :class:`SrecRecord`: Data record object.

        Raises:
            ValueError: data size overflow.

        Examples:
            >>> str(SrecRecord.create_data(0x1234, b'abc'))
            'S10612346162638D'
        """

        if len(data) > DATA_MAX:
            raise ValueError('data size overflow')

        return cls(RecordKind.DATA_16, address=(address & 0xFFFF), data=data)

    @classmethod
    def create_header(cls, data: AnyBytes = b'') -> 'SrecRecord':
        r"""Creates a header record.

        Examples:
            >>> str(SrecRecord.create_header())
            'S0030000FC'
            >>> str(SrecRecord.create_header(b'HDR\0'))
            'S0070000484452001A'
        """

        if len(data) > DATA_MAX:
            raise ValueError('data size overflow')

        return cls(RecordKind.HEADER, data=data)

    @classmethod
    def create_start(cls, address: int = 0) -> 'SrecRecord':
        r"""Creates a 16-bit start address (termination) record.

        Examples:
            >>> str(SrecRecord.create_start(0x1234))
            'S9031234B6'
        """

        return cls(RecordKind.START_16, address=(address & 0xFFFF))

    @classmethod
    def parse(cls, line: str, lineno: Optional[int] = None) -> 'SrecRecord':
        r"""Parses a single record line.

        The line is expected to be already stripped of whitespace and line
        terminators. Hexadecimal digits are case-insensitive.

        Only the line syntax, its length, and its checksum are verified here;
        the record type is not interpreted, except for the :attr:`kind`
        lookup.

        Args:
            line (str):
                Record line.

            lineno (int):
                Line number reported on failure.

        Returns:
            :class:`SrecRecord`: Parsed record.

        Raises:
            :class:`SrecError`: malformed line or checksum mismatch.

        Examples:
            >>> record = SrecRecord.parse('S1040010FFEC')
            >>> record.kind, hex(record.address), record.data
            (<RecordKind.DATA_16: 1>, '0x10', b'\xff')
        """

        line = line.upper()

        if not line.startswith('S'):
            raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'missing record marker',
                            lineno=lineno)

        code = decode_hex(line, INDEX_TYPE, 1, lineno)
        count = decode_hex(line, INDEX_COUNT, 2, lineno)
        if count < ADDRESS_SIZE + 1:
            raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'byte count too small',
                            lineno=lineno, expected=ADDRESS_SIZE + 1, actual=count)

        length = INDEX_ADDRESS + (count * 2)
        if len(line) < length:
            raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'record truncated',
                            lineno=lineno, expected=length, actual=len(line))
        if len(line) > length:
            raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'record length mismatch',
                            lineno=lineno, expected=length, actual=len(line))

        address = decode_hex(line, INDEX_ADDRESS, ADDRESS_SIZE * 2, lineno)
        size = count - ADDRESS_SIZE - 1
        data = bytes(decode_hex(line, INDEX_DATA + (index * 2), 2, lineno)
                     for index in range(size))
        declared = decode_hex(line, INDEX_DATA + (size * 2), 2, lineno)

        record = cls(RecordKind.from_code(code), address=address, data=data,
                     count=count, checksum=declared)

        computed = record.compute_checksum()
        if computed != declared:
            raise SrecError(SrecErrorKind.CHECKSUM_ERROR, 'checksum error',
                            lineno=lineno, expected=computed, actual=declared)

        return record

    def to_str(self) -> str:
        r"""Formats the record as a line, without line terminator.

        The type digit of :attr:`RecordKind.INVALID` cannot be formatted.

        Raises:
            ValueError: invalid record type.
        """

        if self.kind == RecordKind.INVALID:
            raise ValueError('invalid record type')

        return ''.join((
            'S',
            str(int(self.kind)),
            encode_hex_byte(self.count),
            encode_hex_word(self.address, ADDRESS_SIZE),
            hexlify(self.data),
            encode_hex_byte(self.checksum),
        ))
