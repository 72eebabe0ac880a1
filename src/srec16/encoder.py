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

r"""16-bit Motorola S-record encoder."""

import io
import logging
import os
import sys
from typing import IO
from typing import Iterable
from typing import List
from typing import Optional
from typing import Tuple
from typing import Union

from deprecated import deprecated

from .errors import SrecError
from .errors import SrecErrorKind
from .records import DATA_MAX
from .records import DataChunk
from .records import SrecRecord
from .utils import AnyBytes
from .utils import AnyPath

_logger = logging.getLogger(__name__)


class SrecEncoder:
    r"""16-bit Motorola S-record encoder.

    Headers and data chunks are collected in call order, and serialized
    only once by :meth:`finish` or :meth:`save`.
    After that, the encoder cannot be used anymore.

    Overlapping data chunks are not checked; each chunk becomes its own
    data record.

    When used as a context manager, :meth:`save` is called upon a clean
    exit, targeting `out_path_or_stream`.

    Args:
        out_path_or_stream (str or bytes IO):
            Default destination of :meth:`save`.

    Examples:
        >>> encoder = SrecEncoder()
        >>> encoder.add_header('TEST')
        >>> encoder.add_data(0x0010, b'\x01\x02\x03')
        >>> encoder.finish()
        ['S007000054455354B8', 'S1060010010203E3', 'S9030010EC']
    """

    def __init__(self, out_path_or_stream: Optional[Union[AnyPath, IO]] = None):

        self._destination = out_path_or_stream
        self._headers: List[str] = []
        self._chunks: List[DataChunk] = []
        self._finished: bool = False

    def __enter__(self) -> 'SrecEncoder':

        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:

        if exc_type is None and not self._finished:
            self.save(self._destination)

    def _check_usable(self) -> None:

        if self._finished:
            raise ValueError('encoder already finished')

    @property
    def finished(self) -> bool:
        r"""bool: The encoder has already been consumed."""

        return self._finished

    def add_header(self, text: str) -> None:
        r"""Adds a header record.

        Args:
            text (str):
                ASCII header text.

        Raises:
            ValueError: non-ASCII text, data size overflow, or finished
            encoder.
        """

        self._check_usable()
        if len(text.encode('ascii')) > DATA_MAX:
            raise ValueError('data size overflow')
        self._headers.append(text)

    def add_data(
        self,
        address: int,
        data: AnyBytes,
        start: int = 0,
        length: Optional[int] = None,
    ) -> None:
        r"""Adds a data record.

        Args:
            address (int):
                Address of the first byte; masked to 16 bits when written.

            data (bytes):
                Source byte data.

            start (int):
                Index of the first byte of `data` to take.

            length (int):
                Number of bytes of `data` to take; ``None`` takes up to the
                end of `data`.

        Raises:
            ValueError: invalid arguments, or finished encoder.

        Examples:
            >>> encoder = SrecEncoder()
            >>> encoder.add_data(0x1234, b'xabcx', start=1, length=3)
            >>> encoder.finish()
            ['S10612346162638D', 'S9031234B6']
        """

        self._check_usable()
        if address < 0:
            raise ValueError('address overflow')
        if start < 0:
            raise ValueError('negative start')

        if length is None:
            length = len(data) - start
        if length < 0:
            raise ValueError('negative length')
        if start + length > len(data):
            raise ValueError('data range overflow')
        if length > DATA_MAX:
            raise ValueError('data size overflow')

        chunk = bytes(data[start:(start + length)])
        self._chunks.append(DataChunk(address, chunk))

    @deprecated(reason='Use add_header() instead')
    def with_header(self, text: str) -> None:

        self.add_header(text)

    @deprecated(reason='Use add_data() instead')
    def with_data(
        self,
        address: int,
        data: AnyBytes,
        start: int = 0,
        length: Optional[int] = None,
    ) -> None:

        self.add_data(address, data, start=start, length=length)

    def finish(self) -> List[str]:
        r"""Serializes the collected records.

        Header records come first, then data records, in call order.
        The final ``S9`` record carries the lowest data chunk address, or
        zero without data.

        Quirk:
            The lowest address is taken among the raw chunk addresses, and
            only then masked to 16 bits. Chunks at ``0x10000`` and ``0x20``
            yield a start address of ``0x0020``, not ``0x0000``.

        Returns:
            list of str: Record lines, without line terminators.

        Raises:
            ValueError: finished encoder.
        """

        self._check_usable()
        self._finished = True

        records = [SrecRecord.create_header(text.encode('ascii'))
                   for text in self._headers]

        for chunk in self._chunks:
            records.append(SrecRecord.create_data(chunk.address, chunk.data))

        startaddr = min((chunk.address for chunk in self._chunks), default=0)
        records.append(SrecRecord.create_start(startaddr))

        _logger.debug('encoded %d headers, %d data chunks, start address 0x%04X',
                      len(self._headers), len(self._chunks), startaddr & 0xFFFF)

        self._headers = []
        self._chunks = []
        return [record.to_str() for record in records]

    def save(
        self,
        out_path_or_stream: Optional[Union[AnyPath, IO]] = None,
        end: str = os.linesep,
    ) -> 'SrecEncoder':
        r"""Serializes and writes the collected records.

        Lines are written as ASCII bytes. Writing stops at the first failure;
        what was already written is left as-is.

        Args:
            out_path_or_stream (str or bytes IO):
                Path of the file within the filesystem, or output byte stream.
                If ``None``, ``sys.stdout.buffer`` is used.

            end (str):
                Line terminator.

        Returns:
            :class:`SrecEncoder`: *self*.

        Raises:
            :class:`SrecError`: output write failure.
            ValueError: finished encoder.
        """

        lines = self.finish()
        terminator = end.encode('ascii')

        if out_path_or_stream is None:
            out_path_or_stream = sys.stdout.buffer

        try:
            if isinstance(out_path_or_stream, io.IOBase):
                self._write_lines(out_path_or_stream, lines, terminator)
            else:
                path = str(out_path_or_stream)
                with open(path, 'wb') as stream:
                    self._write_lines(stream, lines, terminator)
        except OSError as exc:
            raise SrecError(SrecErrorKind.IO_FAILURE,
                            f'failed to write S-record output: {exc}') from exc

        return self

    @staticmethod
    def _write_lines(stream: IO, lines: List[str], terminator: bytes) -> None:

        for line in lines:
            stream.write(line.encode('ascii') + terminator)


def encode(
    chunks: Iterable[Tuple[int, AnyBytes]],
    headers: Iterable[str] = (),
) -> List[str]:
    r"""Encodes data chunks into 16-bit S-record lines.

    Shortcut to :class:`SrecEncoder`.

    Args:
        chunks (iterable of (int, bytes)):
            Address and data pairs, in output order.

        headers (iterable of str):
            Header strings, in output order.

    Returns:
        list of str: Record lines, without line terminators.

    Examples:
        >>> encode([(0x0010, b'\x01\x02\x03')], headers=['TEST'])
        ['S007000054455354B8', 'S1060010010203E3', 'S9030010EC']
    """

    encoder = SrecEncoder()
    for text in headers:
        encoder.add_header(text)
    for address, data in chunks:
        encoder.add_data(address, data)
    return encoder.finish()
