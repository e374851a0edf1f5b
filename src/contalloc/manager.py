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

r"""Memory manager and command interpreter.

The :class:`MemoryManager` bundles an :class:`AddressSpace` with the
components operating on it, while :func:`run_command` interprets the
line-oriented commands typed at the allocator prompt:

============  ==================  ===========================================
Command       Aliases             Syntax
============  ==================  ===========================================
request       ``RQ``, allocate    ``RQ <ProcessID> <Space> <Algorithm>``
release       ``RL``, release     ``RL <ProcessID>``
compact       ``C``, compact      ``C``
status        ``STAT``, status    ``STAT``
exit          ``X``, exit, quit   ``X``
============  ==================  ===========================================
"""

import logging
from typing import Callable
from typing import List
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Tuple

from .allocator import Allocator
from .allocator import AnyStrategy
from .base import AllocatorError
from .base import Block
from .compactor import Compactor
from .reclaimer import Reclaimer
from .space import AddressSpace
from .status import StatusView
from .status import format_status
from .utils import parse_int

_log = logging.getLogger(__name__)

DEFAULT_PROMPT: str = 'allocator> '
r"""Default interactive prompt."""

INVALID_COMMAND_MESSAGE = 'Invalid command. Please try again.'
UNKNOWN_COMMAND_MESSAGE = 'Unrecognized command. Valid commands: RQ, RL, C, STAT, X'
RQ_USAGE_MESSAGE = 'Invalid RQ command format. Use: RQ <ProcessID> <Space> <Algorithm>'
RL_USAGE_MESSAGE = 'Invalid RL command format. Use: RL <ProcessID>'


class MemoryManager:
    r"""Contiguous memory manager.

    Arguments:
        capacity (int):
            Address space capacity.

    Raises:
        InvalidCapacityError: Non-positive capacity.

    Examples:
        >>> manager = MemoryManager(100)
        >>> manager.allocate('P1', 40, 'F')
        (0, 39)
        >>> manager.allocate('P2', 30, 'B')
        (40, 69)
        >>> manager.release('P1')
        Block(start=0, size=40, owner='P1')
        >>> manager.compact()
        30
        >>> print(manager.report())
        Total available space: 70
        Addresses [0 : 29] -> Process: P2
        Addresses [30 : 99] -> Process: FREE
    """

    def __init__(
        self,
        capacity: int,
    ):
        self.space: AddressSpace = AddressSpace(capacity)
        self.allocator: Allocator = Allocator(self.space)
        self.reclaimer: Reclaimer = Reclaimer(self.space)
        self.compactor: Compactor = Compactor(self.space)
        self._view: StatusView = StatusView(self.space)

    def __repr__(self) -> str:
        return f'<{type(self).__name__} capacity={self.space.capacity} free={self.total_free()}>'

    def allocate(
        self,
        process_id: str,
        size: int,
        strategy: AnyStrategy,
    ) -> Tuple[int, int]:
        r"""Allocates a block; see :meth:`Allocator.allocate`."""
        return self.allocator.allocate(process_id, size, strategy)

    def release(
        self,
        process_id: str,
    ) -> Block:
        r"""Releases a block; see :meth:`Reclaimer.release`."""
        return self.reclaimer.release(process_id)

    def compact(self) -> int:
        r"""Compacts the address space; see :meth:`Compactor.compact`."""
        return self.compactor.compact()

    def total_free(self) -> int:
        return self.space.total_free()

    def status(self) -> StatusView:
        r"""Read-only view of the address space.

        Returns:
            :class:`StatusView`: Status view.
        """
        return self._view

    def report(
        self,
        color: bool = False,
    ) -> str:
        r"""Formats the status report; see :func:`format_status`."""
        return format_status(self._view, color=color)


# ============================================================================

class CommandResult(NamedTuple):
    r"""Outcome of a command line."""

    output: str = ''
    r"""Text to show to the user, empty if none."""

    done: bool = False
    r"""The session is over."""


def _command_request(
    manager: MemoryManager,
    args: List[str],
    default_strategy: Optional[AnyStrategy],
    color: bool,
) -> CommandResult:

    if len(args) == 2 and default_strategy is not None:
        args = args + [default_strategy]

    # Trailing tokens are ignored
    if len(args) < 3:
        return CommandResult(RQ_USAGE_MESSAGE)

    process_id, size_text, strategy = args[:3]
    try:
        size = parse_int(size_text)
    except ValueError:
        return CommandResult(RQ_USAGE_MESSAGE)

    if size < 1:
        return CommandResult(RQ_USAGE_MESSAGE)

    manager.allocate(process_id, size, strategy)
    return CommandResult()


def _command_release(
    manager: MemoryManager,
    args: List[str],
    default_strategy: Optional[AnyStrategy],
    color: bool,
) -> CommandResult:

    if not args:
        return CommandResult(RL_USAGE_MESSAGE)

    manager.release(args[0])
    return CommandResult()


def _command_compact(
    manager: MemoryManager,
    args: List[str],
    default_strategy: Optional[AnyStrategy],
    color: bool,
) -> CommandResult:

    manager.compact()
    return CommandResult()


def _command_status(
    manager: MemoryManager,
    args: List[str],
    default_strategy: Optional[AnyStrategy],
    color: bool,
) -> CommandResult:

    return CommandResult(manager.report(color=color))


def _command_exit(
    manager: MemoryManager,
    args: List[str],
    default_strategy: Optional[AnyStrategy],
    color: bool,
) -> CommandResult:

    return CommandResult(done=True)


CommandHandler = Callable[[MemoryManager, List[str], Optional[AnyStrategy], bool], CommandResult]

COMMANDS: Mapping[str, CommandHandler] = {
    'rq':       _command_request,
    'allocate': _command_request,
    'rl':       _command_release,
    'release':  _command_release,
    'c':        _command_compact,
    'compact':  _command_compact,
    'stat':     _command_status,
    'status':   _command_status,
    'x':        _command_exit,
    'exit':     _command_exit,
    'quit':     _command_exit,
}
r"""Command handlers, by lowercase command name."""


def run_command(
    manager: MemoryManager,
    line: str,
    default_strategy: Optional[AnyStrategy] = None,
    color: bool = False,
) -> CommandResult:
    r"""Runs a command line.

    Allocator errors are not raised, but reported as the command output.

    Arguments:
        manager (:class:`MemoryManager`):
            Memory manager to operate on.

        line (str):
            Command line, case-insensitive command name followed by
            whitespace separated arguments.

        default_strategy (str or :class:`Strategy`):
            Placement strategy of ``RQ`` commands omitting it.
            If ``None``, the strategy is mandatory.

        color (bool):
            Colorizes the status report.

    Returns:
        :class:`CommandResult`: Command outcome.

    Examples:
        >>> manager = MemoryManager(100)
        >>> run_command(manager, 'RQ P1 40 F')
        CommandResult(output='', done=False)
        >>> run_command(manager, 'RL P9')
        CommandResult(output='Process P9 not found in memory.', done=False)
        >>> run_command(manager, 'X')
        CommandResult(output='', done=True)
    """
    tokens = line.split()
    if not tokens:
        return CommandResult(INVALID_COMMAND_MESSAGE)

    name, args = tokens[0].lower(), tokens[1:]
    handler = COMMANDS.get(name)
    if handler is None:
        return CommandResult(UNKNOWN_COMMAND_MESSAGE)

    _log.debug('command %r %r', name, args)
    try:
        return handler(manager, args, default_strategy, color)
    except AllocatorError as exc:
        _log.debug('command %r failed: %s', name, exc)
        return CommandResult(str(exc))
