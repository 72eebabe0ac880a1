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

r"""Error reporting.

Every failure of the codec is reported through a single exception type,
:class:`SrecError`, discriminated by its :attr:`SrecError.kind`.
"""

import enum
from typing import Any
from typing import Optional


class SrecErrorKind(enum.Enum):
    r"""Kind of codec failure."""

    MALFORMED_RECORD = 'malformed record'
    r"""Bad marker, bad length, truncated field, or non-hex digit."""

    CHECKSUM_ERROR = 'checksum error'
    r"""Computed checksum differs from the declared one."""

    UNSUPPORTED_RECORD = 'unsupported record'
    r"""24-bit or 32-bit address record."""

    RESERVED_RECORD = 'reserved record'
    r"""Reserved record type ``S4``."""

    UNKNOWN_RECORD_TYPE = 'unknown record type'
    r"""Record type digit not in the record table."""

    COUNT_MISMATCH = 'count mismatch'
    r"""Declared record count differs from the data records seen."""

    UNEXPECTED_EOF = 'unexpected end of file'
    r"""No termination record found."""

    IO_FAILURE = 'I/O failure'
    r"""Output sink write error."""


class SrecError(Exception):
    r"""S-record codec error.

    Args:
        kind (:class:`SrecErrorKind`):
            Error kind.

        message (str):
            Human readable message.

        lineno (int):
            1-based number of the offending line, if any.

        expected:
            Expected value, if meaningful for `kind`.

        actual:
            Actual value, if meaningful for `kind`.

    Examples:
        >>> error = SrecError(SrecErrorKind.CHECKSUM_ERROR, 'checksum error', lineno=3)
        >>> str(error)
        'checksum error (line 3)'
        >>> error.kind
        <SrecErrorKind.CHECKSUM_ERROR: 'checksum error'>
    """

    def __init__(
        self,
        kind: SrecErrorKind,
        message: str,
        lineno: Optional[int] = None,
        expected: Any = None,
        actual: Any = None,
    ):

        super().__init__(message)
        self.kind: SrecErrorKind = kind
        self.message: str = message
        self.lineno: Optional[int] = lineno
        self.expected: Any = expected
        self.actual: Any = actual

    def __str__(self) -> str:

        if self.lineno is None:
            return self.message
        return f'{self.message} (line {self.lineno})'

    def __repr__(self) -> str:

        return (f'{type(self).__name__}({self.kind.name}, {self.message!r}, '
                f'lineno={self.lineno!r})')
