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

r"""Base types and errors.

A *block* describes a contiguous extent of the address space, together with
its occupant: either nobody (*free* block) or a process, identified by a
short string chosen by the caller.

A block occupies the addresses from `start` up to ``start + size - 1``
included.
As usual for Python intervals, the *exclusive* end address is named `endex`:

+---+---+---+---+---+---+---+---+---+---+
| 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
+===+===+===+===+===+===+===+===+===+===+
|[P1| P1| P1]|[  |   |   |   |   |   |  ]|
+---+---+---+---+---+---+---+---+---+---+

>>> Block(0, 3, 'P1')
Block(start=0, size=3, owner='P1')
>>> Block(3, 7)
Block(start=3, size=7, owner=None)
>>> Block(3, 7).end, Block(3, 7).endex
(9, 10)
"""

from typing import NamedTuple
from typing import Optional

FREE_LABEL: str = 'FREE'
r"""Label reported for free blocks."""


class Block(NamedTuple):
    r"""Contiguous extent of the address space.

    Blocks are immutable: any change of extent or occupant builds a new
    block, so that no reference held by a caller can alter an address space.
    """

    start: int
    r"""Inclusive start address."""

    size: int
    r"""Number of addresses, at least one."""

    owner: Optional[str] = None
    r"""Process ID of the occupant, ``None`` for a free block."""

    @property
    def end(self) -> int:
        r"""int: Inclusive end address."""
        return self.start + self.size - 1

    @property
    def endex(self) -> int:
        r"""int: Exclusive end address."""
        return self.start + self.size

    @property
    def label(self) -> str:
        r"""str: Process ID, or :data:`FREE_LABEL` for free blocks."""
        return FREE_LABEL if self.owner is None else self.owner

    def is_free(self) -> bool:
        r"""Tells whether the block is free.

        Returns:
            bool: The block has no occupant.

        Examples:
            >>> Block(0, 4).is_free()
            True
            >>> Block(0, 4, 'P1').is_free()
            False
        """
        return self.owner is None


# ============================================================================

class AllocatorError(ValueError):
    r"""Base class of the recoverable allocator errors.

    Any operation raising one of these errors leaves the address space
    untouched.
    """


class InvalidCapacityError(AllocatorError):
    r"""Address space capacity is not a positive integer."""

    def __init__(self, capacity):
        super().__init__(f'invalid capacity: {capacity!r}')
        self.capacity = capacity


class DuplicateProcessError(AllocatorError):
    r"""Process already owns a block."""

    def __init__(self, process_id: str):
        super().__init__(f'Process {process_id} is already allocated. Try a different ID.')
        self.process_id = process_id


class InsufficientSpaceError(AllocatorError):
    r"""No free block is large enough for the request."""

    def __init__(self, process_id: str, size: int):
        super().__init__(f'No sufficient space to allocate process {process_id} ({size} bytes)')
        self.process_id = process_id
        self.size = size


class InvalidStrategyError(AllocatorError):
    r"""Unrecognized placement strategy."""

    def __init__(self, strategy):
        super().__init__("Invalid algorithm. Use 'F' for First Fit, "
                         "'B' for Best Fit, or 'W' for Worst Fit.")
        self.strategy = strategy


class ProcessNotFoundError(AllocatorError):
    r"""No block is owned by the process."""

    def __init__(self, process_id: str):
        super().__init__(f'Process {process_id} not found in memory.')
        self.process_id = process_id
