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

"""
Module that contains the command line app.

Why does this file exist, and why not put this in __main__?

  You might be tempted to import things from __main__ later, but that will cause
  problems: the code will get executed twice:

  - When you run `python -m srec16` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``srec16.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``srec16.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import sys
from typing import Optional
from typing import Sequence

import click

from .__init__ import __version__
from .decoder import load
from .encoder import SrecEncoder
from .records import DATA_MAX
from .utils import chop
from .utils import parse_int


class BasedIntParamType(click.ParamType):
    name = 'integer'

    def convert(self, value, param, ctx):
        try:
            return parse_int(value)
        except ValueError:
            self.fail(f'invalid integer: {value!r}', param, ctx)


BASED_INT = BasedIntParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)
FILE_PATH_OUT = click.Path(dir_okay=False, allow_dash=True, writable=True)


def _std_path(path: Optional[str]) -> Optional[str]:

    if path is None or path == '-':
        return None
    return path


def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


# ============================================================================

@click.group()
@click.option('--version', is_flag=True, is_eager=True, expose_value=False,
              callback=print_version, help="""
    Prints the package version number.
""")
def main() -> None:
    """
    Command line utilities for 16-bit Motorola S-record files.

    Being built with `Click <https://click.palletsprojects.com/en/stable/>`_, all the
    commands follow POSIX-like syntax rules, as well as reserving the virtual
    file path ``-`` for command chaining via standard output/input buffering.
    """


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN, required=False)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def decode(
    infile: str,
    outfile: str,
) -> None:
    r"""Converts a record file into a raw binary file.

    The binary file starts at the lowest data address, with holes filled
    with zeros.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` to write to standard output.
    """

    image = load(_std_path(infile))
    outfile = _std_path(outfile)

    if outfile is None:
        sys.stdout.buffer.write(image.data)
        sys.stdout.buffer.flush()
    else:
        with open(outfile, 'wb') as stream:
            stream.write(image.data)


# ----------------------------------------------------------------------------

@main.command()
@click.option('-a', '--address', type=BASED_INT, default=0, show_default=True, help="""
    Address of the first byte.
""")
@click.option('-w', '--width', type=click.IntRange(1, DATA_MAX), default=16,
              show_default=True, help="""
    Maximum data bytes per record.
""")
@click.option('-H', '--header', 'headers', multiple=True, help="""
    Header text; can be repeated.
""")
@click.argument('infile', type=FILE_PATH_IN, required=False)
@click.argument('outfile', type=FILE_PATH_OUT, required=False)
def encode(
    address: int,
    width: int,
    headers: Sequence[str],
    infile: str,
    outfile: str,
) -> None:
    r"""Converts a raw binary file into a record file.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.

    ``OUTFILE`` is the path of the output file.
    Set to ``-`` to write to standard output.
    """

    infile = _std_path(infile)
    if infile is None:
        data = sys.stdin.buffer.read()
    else:
        with open(infile, 'rb') as stream:
            data = stream.read()

    if address < 0 or address + len(data) > 0x10000:
        raise click.BadParameter('address overflow', param_hint='--address')

    encoder = SrecEncoder()
    for text in headers:
        encoder.add_header(text)

    offset = address
    for chunk in chop(data, width):
        encoder.add_data(offset, chunk)
        offset += len(chunk)

    encoder.save(_std_path(outfile))


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN, required=False)
def info(
    infile: str,
) -> None:
    r"""Prints a summary of a record file.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    image = load(_std_path(infile))

    for text in image.headers:
        click.echo(f'header: {text}')
    click.echo(f'start: 0x{image.start:04X}')
    click.echo(f'end: 0x{image.end:04X}')
    click.echo(f'size: {image.size}')
    click.echo(f'records: {len(image.chunks)}')


# ----------------------------------------------------------------------------

@main.command()
@click.argument('infile', type=FILE_PATH_IN, required=False)
def validate(
    infile: str,
) -> None:
    r"""Validates a record file.

    ``INFILE`` is the path of the input file.
    Set to ``-`` to read from standard input.
    """

    load(_std_path(infile))
