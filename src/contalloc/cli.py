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

  - When you run `python -m contalloc` python will execute
    ``__main__.py`` as a script. That means there won't be any
    ``contalloc.__main__`` in ``sys.modules``.
  - When you import __main__ it will get executed again (as a module) because
    there's no ``contalloc.__main__`` in ``sys.modules``.

  Also see (1) from https://click.palletsprojects.com/en/stable/setuptools/#setuptools-integration
"""

import logging
from typing import IO
from typing import Optional

import click

from .__init__ import __version__
from .allocator import strategy_types
from .base import InvalidCapacityError
from .manager import DEFAULT_PROMPT
from .manager import MemoryManager
from .manager import run_command
from .utils import parse_int


class CapacityParamType(click.ParamType):
    name = 'capacity'

    def convert(self, value, param, ctx):
        try:
            capacity = parse_int(value)
            if capacity <= 0:
                raise InvalidCapacityError(capacity)
            return capacity
        except ValueError:
            self.fail(f'invalid capacity: {value!r}', param, ctx)


CAPACITY = CapacityParamType()

FILE_PATH_IN = click.Path(dir_okay=False, allow_dash=True, readable=True, exists=True)

STRATEGY_CHOICE = click.Choice(sorted(strategy_types.keys()), case_sensitive=False)

LOG_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)


# ----------------------------------------------------------------------------

def print_version(ctx, _, value):

    if not value or ctx.resilient_parsing:
        return

    click.echo(str(__version__))
    ctx.exit()


def setup_logging(verbose: int) -> None:

    level = LOG_LEVELS[min(verbose, len(LOG_LEVELS) - 1)]
    logging.basicConfig(level=level, format='%(levelname)s:%(name)s:%(message)s')


def run_session(
    manager: MemoryManager,
    stream: IO,
    prompt: Optional[str],
    strategy: Optional[str],
    color: bool,
) -> None:
    r"""Runs commands until the exit command or the end of the stream.

    Arguments:
        manager (:class:`MemoryManager`):
            Memory manager to operate on.

        stream (text file):
            Command lines.

        prompt (str):
            Prompt printed before reading each line; ``None`` to disable
            (comment lines are allowed only then).

        strategy (str):
            Default placement strategy.

        color (bool):
            Colorizes status reports.
    """

    if prompt is not None:
        click.echo(prompt, nl=False)

    for line in stream:
        if prompt is None and (not line.strip() or line.lstrip().startswith('#')):
            continue

        result = run_command(manager, line, strategy, color)
        if result.output:
            click.echo(result.output, color=color or None)
        if result.done:
            break

        if prompt is not None:
            click.echo(prompt, nl=False)


# ============================================================================

@click.group()
@click.option('--version', is_flag=True, is_eager=True,
              expose_value=False, callback=print_version, help="""
    Prints the package version number.
""")
@click.option('-V', '--verbose', count=True, help="""
    Logs allocator activity to standard error.
    Repeat for debug messages.
""")
def main(verbose: int) -> None:
    """
    Simulates a contiguous memory allocator.

    An address space of a given capacity is managed through the commands of
    the classic allocator prompt:

    \b
      RQ <ProcessID> <Space> <Algorithm>   request (F, B, W fit)
      RL <ProcessID>                       release
      C                                    compact
      STAT                                 status report
      X                                    exit
    """

    if verbose:
        setup_logging(verbose)


# ----------------------------------------------------------------------------

@main.command()
@click.option('-s', '--strategy', type=STRATEGY_CHOICE, help="""
    Default placement strategy, for requests omitting it.
""")
@click.option('--color/--no-color', default=False, show_default=True, help="""
    Colorizes status reports.
""")
@click.option('-p', '--prompt', default=DEFAULT_PROMPT, show_default=True, help="""
    Interactive prompt.
""")
@click.argument('capacity', type=CAPACITY)
def shell(
    strategy: Optional[str],
    color: bool,
    prompt: str,
    capacity: int,
) -> None:
    r"""Runs the interactive allocator prompt.

    Commands are read from the standard input until ``X`` or its end.
    """

    with click.open_file('-', 'rt', errors='replace') as stream:
        run_session(MemoryManager(capacity), stream, prompt, strategy, color)


# ----------------------------------------------------------------------------

@main.command()
@click.option('-s', '--strategy', type=STRATEGY_CHOICE, help="""
    Default placement strategy, for requests omitting it.
""")
@click.option('--color/--no-color', default=False, show_default=True, help="""
    Colorizes status reports.
""")
@click.argument('capacity', type=CAPACITY)
@click.argument('script', type=FILE_PATH_IN)
def run(
    strategy: Optional[str],
    color: bool,
    capacity: int,
    script: str,
) -> None:
    r"""Runs a script of allocator commands.

    Lines starting with ``#`` are comments; blank lines are ignored.
    Use ``-`` to read from the standard input.
    """

    with click.open_file(script, 'rt', errors='replace') as stream:
        run_session(MemoryManager(capacity), stream, None, strategy, color)
