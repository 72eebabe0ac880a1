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

r"""Generic utility functions.

This module also hosts the hexadecimal and checksum primitives shared by
both the decoder and the encoder, so that both directions agree on a single
definition of a valid line.
"""

import binascii
import os
import re
from typing import Any
from typing import Iterable
from typing import Iterator
from typing import Mapping
from typing import Optional
from typing import Union

from .errors import SrecError
from .errors import SrecErrorKind

AnyBytes = Union[bytes, bytearray, memoryview]
AnyPath = Union[bytes, bytearray, str, os.PathLike]

SUFFIX_SCALE: Mapping[str, int] = {
    'k': 2**10,
    'm': 2**20,
    'kib': 2**10,
    'mib': 2**20,
    'kb': 10**3,
    'mb': 10**6,
}
r"""Integer suffix to scale factor."""

INT_REGEX = re.compile(r'^\s*(?P<sign>[+-]?)\s*'
                       r'(?P<prefix>(0x|0b|0o|0)?)'
                       r'(?P<value>[a-f0-9]+)'
                       r'(?P<suffix>h?)'
                       r'\s*(?P<scale>(k|m|kib|mib|kb|mb)?)\s*$')

HEX_REGEX = re.compile(r'[0-9A-Fa-f]+')

HEX_DIGITS: str = '0123456789ABCDEF'
r"""Uppercase hexadecimal digits, indexed by nibble value."""


def chop(
    vector: AnyBytes,
    window: int,
) -> Iterator[AnyBytes]:
    r"""Chops a vector.

    Iterates through the vector grouping its items into windows.

    Args:
        vector (items):
            Vector to chop.

        window (int):
            Window length.

    Yields:
        list or items: `vector` slices of up to `window` elements.

    Examples:
        >>> list(chop(b'ABCDEFG', 2))
        [b'AB', b'CD', b'EF', b'G']
        >>> b':'.join(chop(b'ABCDEFG', 2))
        b'AB:CD:EF:G'
    """

    window = int(window)
    if window <= 0:
        raise ValueError('non-positive window')

    for i in range(0, len(vector), window):
        yield vector[i:(i + window)]


def hexlify(bytestr: AnyBytes) -> str:
    r"""Converts raw bytes into an uppercase hexadecimal string.

    Args:
        bytestr (bytes):
            Source byte string.

    Returns:
        str: Hexadecimal string.

    Examples:
        >>> hexlify(b'\xAA\xBB\xCC')
        'AABBCC'
    """

    return binascii.hexlify(bytestr).decode('ascii').upper()


def parse_int(
    value: Union[str, Any],
) -> Optional[int]:
    r"""Parses an integer.

    Args:
        value:
            A generic object to convert to integer.
            In case `value` is a :obj:`str` (case-insensitive), it can be
            either prefixed with ``0x`` or postfixed with ``h`` to convert
            from a hexadecimal representation, or prefixed with ``0b`` from
            binary; a prefix of only ``0`` converts from octal.
            A further suffix applies a scale factor as per
            :data:`SUFFIX_SCALE`.
            A ``None`` value evaluates as ``None``.
            Any other object class will call the standard :func:`int`.

    Returns:
        int: None if `value` is ``None``, its integer conversion otherwise.

    Examples:
        >>> parse_int('0x1000')
        4096
        >>> parse_int('1Fh')
        31
        >>> parse_int(None) is None
        True
        >>> parse_int(135.7)
        135
    """

    if value is None:
        return None

    elif isinstance(value, str):
        value = value.lower()
        m = INT_REGEX.match(value)
        if not m:
            raise ValueError(f'invalid syntax: {value!r}')
        g = m.groupdict()
        sign = g['sign']
        prefix = g['prefix']
        value = g['value']
        suffix = g['suffix']
        scale = g['scale']
        if prefix in ('0b', '0o') and suffix == 'h':
            raise ValueError(f'invalid syntax: {value!r}')

        if prefix == '0x' or suffix == 'h':
            i = int(value, 16)
        elif prefix == '0b':
            i = int(value, 2)
        elif prefix == '0' or prefix == '0o':
            i = int(value, 8)
        else:
            i = int(value, 10)

        i *= SUFFIX_SCALE.get((scale or '').lower(), 1)

        if sign == '-':
            i = -i

        return i

    else:
        return int(value)


def encode_hex_byte(value: int) -> str:
    r"""Encodes a byte as two uppercase hexadecimal digits.

    Examples:
        >>> encode_hex_byte(0xA5)
        'A5'
        >>> encode_hex_byte(0x1FF)
        'FF'
    """

    value &= 0xFF
    return HEX_DIGITS[value >> 4] + HEX_DIGITS[value & 0xF]


def encode_hex_word(value: int, size: int) -> str:
    r"""Encodes an integer as big-endian hexadecimal digits.

    Args:
        value (int):
            Value to encode; masked to `size` bytes.

        size (int):
            Number of bytes; the result has ``2 * size`` digits.

    Returns:
        str: Uppercase hexadecimal digits, most significant byte first.

    Examples:
        >>> encode_hex_word(0x1234, 2)
        '1234'
        >>> encode_hex_word(0x12345, 2)
        '2345'
        >>> encode_hex_word(0x7B, 3)
        '00007B'
    """

    return ''.join(encode_hex_byte(value >> (index << 3))
                   for index in reversed(range(size)))


def decode_hex(
    text: str,
    offset: int,
    size: int,
    lineno: Optional[int] = None,
) -> int:
    r"""Decodes a fixed-width hexadecimal field.

    Args:
        text (str):
            Source text.

        offset (int):
            Index of the most significant digit.

        size (int):
            Number of digits to parse.

        lineno (int):
            Line number reported on failure.

    Returns:
        int: Unsigned big-endian value of the field.

    Raises:
        :class:`SrecError`: truncated field or non-hexadecimal digit.

    Examples:
        >>> decode_hex('S1130000', 2, 2)
        19
        >>> decode_hex('S1130000', 4, 4)
        0
        >>> decode_hex('S113', 2, 4)
        Traceback (most recent call last):
            ...
        srec16.errors.SrecError: record truncated
    """

    endex = offset + size
    if endex > len(text):
        raise SrecError(SrecErrorKind.MALFORMED_RECORD, 'record truncated',
                        lineno=lineno)

    digits = text[offset:endex]
    if not HEX_REGEX.fullmatch(digits):
        raise SrecError(SrecErrorKind.MALFORMED_RECORD,
                        f'non-hexadecimal digit in {digits!r}', lineno=lineno)

    return int(digits, 16)


def checksum(data: Iterable[int]) -> int:
    r"""Computes the S-record checksum.

    It is the one's complement of the low byte of the sum of all the given
    byte values (byte count, address bytes, and data bytes).

    Examples:
        >>> hex(checksum([0x03, 0x00, 0x00]))
        '0xfc'
        >>> hex(checksum(b'\x06\x12\x34abc'))
        '0x8d'
    """

    return (sum(data) & 0xFF) ^ 0xFF
