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

r"""Block placement strategies.

When more free blocks can host a request, the *placement strategy* selects
which one to use:

* *First-Fit*: the first (lowest address) free block large enough;
* *Best-Fit*: the smallest free block large enough;
* *Worst-Fit*: the largest free block.

Ties between blocks of the same size are broken in favor of the lowest start
address.

+---+---+---+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 | 10| 11|
+===+===+===+===+===+===+===+===+===+===+===+===+
|[  |   |  ]|[A]|[  |  ]|[B]|[  |   |   |   |  ]|
+---+---+---+---+---+---+---+---+---+---+---+---+

Requesting 2 addresses, *First-Fit* selects the block at address 0,
*Best-Fit* the one at 4, *Worst-Fit* the one at 7.
"""

import enum
import logging
from typing import MutableMapping
from typing import Optional
from typing import Tuple
from typing import Union

from .base import DuplicateProcessError
from .base import InsufficientSpaceError
from .base import InvalidStrategyError
from .space import AddressSpace
from .utils import check_process_id

_log = logging.getLogger(__name__)


class Strategy(enum.Enum):
    r"""Placement strategy.

    The value is the one-letter token used at the allocator prompt.
    """

    FIRST_FIT = 'F'
    r"""Lowest address free block large enough."""

    BEST_FIT = 'B'
    r"""Smallest free block large enough."""

    WORST_FIT = 'W'
    r"""Largest free block large enough."""


strategy_types: MutableMapping[str, Strategy] = {}
r"""Registered strategy tokens.

Maps each lowercase token accepted by :func:`parse_strategy` to its
strategy."""

AnyStrategy = Union[Strategy, str]


def parse_strategy(
    value: AnyStrategy,
) -> Strategy:
    r"""Parses a placement strategy.

    Arguments:
        value (str or :class:`Strategy`):
            Either a :class:`Strategy` member, or a token registered within
            :data:`strategy_types` (case-insensitive).

    Returns:
        :class:`Strategy`: The selected strategy.

    Raises:
        InvalidStrategyError: Unrecognized strategy.

    Examples:
        >>> parse_strategy('B')
        <Strategy.BEST_FIT: 'B'>
        >>> parse_strategy('worst-fit')
        <Strategy.WORST_FIT: 'W'>
    """
    if isinstance(value, Strategy):
        return value

    if isinstance(value, str):
        strategy = strategy_types.get(value.strip().lower())
        if strategy is not None:
            return strategy

    raise InvalidStrategyError(value)


def select_block(
    space: AddressSpace,
    size: int,
    strategy: AnyStrategy,
) -> Optional[int]:
    r"""Selects the free block hosting a request.

    *Best-Fit* and *Worst-Fit* first scan the free blocks for the target
    size, then pick the first free block having exactly that size, which is
    the lowest address one among equal candidates.

    Arguments:
        space (:class:`AddressSpace`):
            Address space to scan.

        size (int):
            Requested size.

        strategy (str or :class:`Strategy`):
            Placement strategy.

    Returns:
        int: Index of the selected free block, ``None`` if no free block is
        large enough.

    Raises:
        InvalidStrategyError: Unrecognized strategy.
    """
    strategy = parse_strategy(strategy)

    if strategy is Strategy.FIRST_FIT:
        for index, block in space.free_blocks():
            if block.size >= size:
                return index
        return None

    sizes = [block.size for _, block in space.free_blocks() if block.size >= size]
    if not sizes:
        return None

    if strategy is Strategy.BEST_FIT:
        target = min(sizes)
    else:
        target = max(sizes)

    for index, block in space.free_blocks():
        if block.size == target:
            return index
    return None  # pragma: no cover


class Allocator:
    r"""Allocates blocks within an address space.

    Arguments:
        space (:class:`AddressSpace`):
            Address space to manage.

    Examples:
        >>> space = AddressSpace(100)
        >>> allocator = Allocator(space)
        >>> allocator.allocate('P1', 40, 'F')
        (0, 39)
        >>> space.total_free()
        60
    """

    def __init__(
        self,
        space: AddressSpace,
    ):
        self.space: AddressSpace = space

    def allocate(
        self,
        process_id: str,
        size: int,
        strategy: AnyStrategy = Strategy.FIRST_FIT,
    ) -> Tuple[int, int]:
        r"""Allocates a block to a process.

        Every check is performed before altering the address space, so that
        a failed request leaves it untouched.

        Arguments:
            process_id (str):
                Process ID, not owning any block yet.

            size (int):
                Requested size, at least one.

            strategy (str or :class:`Strategy`):
                Placement strategy.

        Returns:
            (int, int): Inclusive start and end addresses of the allocated
            block.

        Raises:
            ValueError: Invalid process ID or size.
            InvalidStrategyError: Unrecognized strategy.
            DuplicateProcessError: The process already owns a block.
            InsufficientSpaceError: No free block is large enough.
        """
        check_process_id(process_id)
        if isinstance(size, bool) or not isinstance(size, int) or size < 1:
            raise ValueError(f'invalid size: {size!r}')

        space = self.space
        if space.find_owned(process_id) is not None:
            raise DuplicateProcessError(process_id)

        strategy = parse_strategy(strategy)
        index = select_block(space, size, strategy)
        if index is None:
            raise InsufficientSpaceError(process_id, size)

        block = space[index]
        _log.debug('%s selected %r for %r (%d)', strategy.name, block, process_id, size)

        if block.size > size:
            space.split_at(index, size, process_id)
        else:
            space.assign(index, process_id)

        start, end = block.start, block.start + size - 1
        _log.info('allocated [%d : %d] to %r', start, end, process_id)
        return start, end
