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

r"""Address space compaction."""

import logging
from typing import List

from .base import Block
from .space import AddressSpace

_log = logging.getLogger(__name__)


class Compactor:
    r"""Compacts an address space.

    Arguments:
        space (:class:`AddressSpace`):
            Address space to manage.
    """

    def __init__(
        self,
        space: AddressSpace,
    ):
        self.space: AddressSpace = space

    def compact(self) -> int:
        r"""Moves all the owned blocks towards address zero.

        Owned blocks are packed from address zero, keeping their relative
        order, and all the free space is gathered into a single trailing free
        block.
        If no free space is left, there is no trailing free block at all.

        The block list is rebuilt from scratch, so compacting an already
        compacted address space yields the very same blocks.

        +---+---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
        +===+===+===+===+===+===+===+===+===+===+
        |[  |  ]|[A | A]|[  |  ]|[B | B | B]|[  ]|
        +---+---+---+---+---+---+---+---+---+---+
        |[A | A]|[B | B | B]|[  |   |   |   |  ]|
        +---+---+---+---+---+---+---+---+---+---+

        Returns:
            int: Number of moved addresses, *i.e.* the sum of the sizes of the
            owned blocks whose start address changed.

        Examples:
            >>> from contalloc import Allocator, AddressSpace, Reclaimer
            >>> space = AddressSpace(10)
            >>> _ = Allocator(space).allocate('A', 2, 'F')
            >>> _ = Allocator(space).allocate('B', 3, 'F')
            >>> _ = Reclaimer(space).release('A')
            >>> Compactor(space).compact()
            3
            >>> space.blocks
            [Block(start=0, size=3, owner='B'), Block(start=3, size=7, owner=None)]
        """
        space = self.space
        blocks: List[Block] = []
        cursor = 0
        moved = 0

        for block in space:
            if block.owner is not None:
                if block.start != cursor:
                    moved += block.size
                blocks.append(Block(cursor, block.size, block.owner))
                cursor += block.size

        leftover = space.capacity - cursor
        if leftover > 0:
            blocks.append(Block(cursor, leftover))

        space.replace_blocks(blocks)
        _log.info('compacted %d blocks, moved %d addresses', len(blocks), moved)
        return moved
