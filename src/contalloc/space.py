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

r"""Address space bookkeeping.

The :class:`AddressSpace` keeps an ordered list of blocks which always
*partitions* the whole address range ``[0, capacity)``: blocks are sorted by
start address, contiguous, non-overlapping, and cover every address.

Moreover, no two adjacent blocks are both free, and each process owns at most
one block.

+---+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
+===+===+===+===+===+===+===+===+===+===+
|[A | A]|[  |  ]|[B | B | B]|[  |   |  ]|
+---+---+---+---+---+---+---+---+---+---+

>>> space = AddressSpace(10)
>>> space.blocks
[Block(start=0, size=10, owner=None)]
"""

import logging
from typing import Iterable
from typing import Iterator
from typing import List
from typing import Optional
from typing import Sequence
from typing import Tuple

from .base import Block
from .base import InvalidCapacityError

_log = logging.getLogger(__name__)


def check_blocks(
    blocks: Sequence[Block],
    capacity: int,
) -> None:
    r"""Checks that a sequence of blocks partitions an address space.

    Arguments:
        blocks (list of blocks):
            Sequence of blocks, by ascending start address.

        capacity (int):
            Address space capacity.

    Raises:
        ValueError: The first violated rule.

    Examples:
        >>> check_blocks([Block(0, 4, 'A'), Block(4, 6)], 10)

        >>> check_blocks([Block(0, 4, 'A'), Block(5, 5)], 10)
        Traceback (most recent call last):
            ...
        ValueError: gap or overlap at address 4
    """
    if not blocks:
        raise ValueError('no blocks')

    endex = 0
    previous_free = False
    owners = set()

    for block in blocks:
        start, size, owner = block

        if size < 1:
            raise ValueError(f'invalid block size at address {start}')

        if start != endex:
            raise ValueError(f'gap or overlap at address {endex}')

        if owner is None:
            if previous_free:
                raise ValueError(f'adjacent free blocks at address {start}')
            previous_free = True
        else:
            if owner in owners:
                raise ValueError(f'duplicate owner: {owner!r}')
            owners.add(owner)
            previous_free = False

        endex = start + size

    if endex != capacity:
        raise ValueError(f'coverage ends at address {endex}, not {capacity}')


class AddressSpace:
    r"""Fixed-size linear address space.

    The address space is created with a single free block covering the whole
    capacity.
    All the public methods leave the block list as a valid partition of the
    address range (see :func:`check_blocks`).

    The block list is meant to be modified only via the methods of this
    class; it can be read via :attr:`blocks`, iteration, and indexing.

    Arguments:
        capacity (int):
            Number of addresses, greater than zero.

    Raises:
        InvalidCapacityError: Non-positive or non-integer capacity.

    Examples:
        >>> space = AddressSpace(100)
        >>> space.capacity
        100
        >>> space.total_free()
        100
        >>> AddressSpace(0)
        Traceback (most recent call last):
            ...
        contalloc.base.InvalidCapacityError: invalid capacity: 0
    """

    def __init__(
        self,
        capacity: int,
    ):
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity <= 0:
            raise InvalidCapacityError(capacity)

        self._capacity: int = capacity
        self._blocks: List[Block] = [Block(0, capacity)]

    def __repr__(self) -> str:
        return f'<{type(self).__name__} capacity={self._capacity} blocks={len(self._blocks)}>'

    def __len__(self) -> int:
        return len(self._blocks)

    def __iter__(self) -> Iterator[Block]:
        return iter(self._blocks)

    def __getitem__(self, index: int) -> Block:
        return self._blocks[index]

    @property
    def capacity(self) -> int:
        r"""int: Number of addresses, constant."""
        return self._capacity

    @property
    def blocks(self) -> List[Block]:
        r"""list of blocks: Copy of the block list."""
        return list(self._blocks)

    def total_free(self) -> int:
        r"""Total free space.

        The value is computed from the block list each time, so that it can
        never drift from the actual free blocks.

        Returns:
            int: Sum of the sizes of the free blocks.
        """
        return sum(block.size for block in self._blocks if block.owner is None)

    def total_used(self) -> int:
        r"""Total allocated space.

        Returns:
            int: Sum of the sizes of the owned blocks.
        """
        return self._capacity - self.total_free()

    def free_blocks(self) -> Iterator[Tuple[int, Block]]:
        r"""Iterates over free blocks.

        Yields:
            (int, block): Index and free block, by ascending address.
        """
        for index, block in enumerate(self._blocks):
            if block.owner is None:
                yield index, block

    def find_owned(
        self,
        process_id: str,
    ) -> Optional[int]:
        r"""Finds the block owned by a process.

        Arguments:
            process_id (str):
                Process ID.

        Returns:
            int: Index of the owned block, or ``None`` if not found.

        Examples:
            >>> space = AddressSpace(10)
            >>> space.split_at(0, 4, 'A')
            >>> space.find_owned('A')
            0
            >>> space.find_owned('B') is None
            True
        """
        for index, block in enumerate(self._blocks):
            if block.owner is not None and block.owner == process_id:
                return index
        return None

    def split_at(
        self,
        index: int,
        first_size: int,
        owner: Optional[str] = None,
    ) -> None:
        r"""Splits a free block in two.

        The free block at `index` is replaced by a block of `first_size`
        addresses, at the same start address and assigned to `owner`,
        followed by a free block with the leftover addresses.

        +---+---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
        +===+===+===+===+===+===+===+===+===+===+
        |[  |   |   |   |   |   |   |   |   |  ]|
        +---+---+---+---+---+---+---+---+---+---+
        |[A | A | A]|[  |   |   |   |   |   |  ]|
        +---+---+---+---+---+---+---+---+---+---+

        Arguments:
            index (int):
                Index of the free block to split.

            first_size (int):
                Size of the first block, less than that of the split block.

            owner (str):
                Owner of the first block; ``None`` keeps it free.

        Raises:
            ValueError: The block is not free, or there would be no leftover.

        Examples:
            >>> space = AddressSpace(10)
            >>> space.split_at(0, 3, 'A')
            >>> space.blocks
            [Block(start=0, size=3, owner='A'), Block(start=3, size=7, owner=None)]
        """
        block = self._blocks[index]
        if block.owner is not None:
            raise ValueError(f'cannot split owned block at address {block.start}')
        if first_size < 1:
            raise ValueError(f'invalid first size: {first_size}')

        leftover = block.size - first_size
        if leftover <= 0:
            raise ValueError(f'no leftover when splitting {block.size} as {first_size}')

        first = Block(block.start, first_size, owner)
        second = Block(block.start + first_size, leftover)
        self._blocks[index:(index + 1)] = [first, second]
        _log.debug('split %r into %r + %r', block, first, second)

    def assign(
        self,
        index: int,
        owner: Optional[str],
    ) -> Block:
        r"""Changes the occupant of a block.

        The extent of the block is unchanged.
        Only a free block can get an owner, which must not own any other
        block.
        Freeing a block may leave it adjacent to other free blocks: call
        :meth:`merge_adjacent_free` afterwards.

        Arguments:
            index (int):
                Index of the block.

            owner (str):
                New owner; ``None`` frees the block.

        Returns:
            block: The block as it was before the change.

        Raises:
            ValueError: The block is already owned, or the owner owns another
            block.
        """
        block = self._blocks[index]
        if owner is not None:
            if block.owner is not None:
                raise ValueError(f'cannot assign owned block at address {block.start}')
            if self.find_owned(owner) is not None:
                raise ValueError(f'duplicate owner: {owner!r}')

        self._blocks[index] = block._replace(owner=owner)
        return block

    def merge_adjacent_free(self) -> int:
        r"""Coalesces adjacent free blocks.

        Each run of consecutive free blocks is merged into a single free
        block, within a single pass.

        +---+---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
        +===+===+===+===+===+===+===+===+===+===+
        |[A | A]|[  |  ]|[  |  ]|[B]|[  |   |  ]|
        +---+---+---+---+---+---+---+---+---+---+
        |[A | A]|[  |   |   |  ]|[B]|[  |   |  ]|
        +---+---+---+---+---+---+---+---+---+---+

        Returns:
            int: Number of blocks removed.
        """
        merged: List[Block] = []

        for block in self._blocks:
            if block.owner is None and merged and merged[-1].owner is None:
                last = merged[-1]
                merged[-1] = Block(last.start, last.size + block.size)
            else:
                merged.append(block)

        removed = len(self._blocks) - len(merged)
        if removed:
            self._blocks[:] = merged
            _log.debug('merged %d free blocks', removed)
        return removed

    def replace_blocks(
        self,
        blocks: Iterable[Block],
    ) -> None:
        r"""Replaces the whole block list.

        Arguments:
            blocks (list of blocks):
                New block list, which must be a valid partition of the address
                space.

        Raises:
            ValueError: Invalid block list; the address space is unchanged.
        """
        blocks = list(blocks)
        check_blocks(blocks, self._capacity)
        self._blocks[:] = blocks

    def check(self) -> None:
        r"""Checks the block list.

        Raises:
            ValueError: The first violated rule, see :func:`check_blocks`.
        """
        check_blocks(self._blocks, self._capacity)

    def is_valid(self) -> bool:
        r"""Tells whether the block list is a valid partition.

        Returns:
            bool: :meth:`check` passes.
        """
        try:
            self.check()
        except ValueError:
            return False
        else:
            return True
