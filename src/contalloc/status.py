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

r"""Read-only status of an address space."""

from typing import Iterator
from typing import List
from typing import Mapping
from typing import NamedTuple
from typing import Tuple

import colorama

from .base import Block
from .space import AddressSpace

LABEL_COLOR_CODES: Mapping[str, str] = {
    '':     colorama.Style.RESET_ALL,
    'free': colorama.Fore.GREEN,
    'used': colorama.Fore.RED,
    'size': colorama.Fore.CYAN,
}
r"""ANSI color codes for each status field type."""

StatusEntry = Tuple[int, int, str]


class FragmentationStats(NamedTuple):
    r"""External fragmentation figures."""

    total_free: int
    r"""Total free space."""

    largest_free: int
    r"""Size of the largest free block."""

    hole_count: int
    r"""Number of free blocks."""

    external: float
    r"""Share of free space out of the largest free block, within ``[0, 1)``."""


class StatusView:
    r"""Read-only view of an address space.

    Iterating over the view yields ``(start, end, label)`` triples by
    ascending address, where `end` is inclusive and `label` is either the
    process ID or :data:`~contalloc.base.FREE_LABEL`.
    Each call to :func:`iter` takes a snapshot of the current blocks, so the
    view can be iterated again after the address space changes.

    Arguments:
        space (:class:`AddressSpace`):
            Address space to observe.

    Examples:
        >>> from contalloc import AddressSpace, Allocator
        >>> space = AddressSpace(100)
        >>> view = StatusView(space)
        >>> _ = Allocator(space).allocate('P1', 40, 'F')
        >>> list(view)
        [(0, 39, 'P1'), (40, 99, 'FREE')]
        >>> view.total_free()
        60
    """

    def __init__(
        self,
        space: AddressSpace,
    ):
        self._space = space

    def __iter__(self) -> Iterator[StatusEntry]:
        blocks = self._space.blocks
        return ((block.start, block.end, block.label) for block in blocks)

    def blocks(self) -> List[Block]:
        r"""Snapshot of the blocks.

        Returns:
            list of blocks: Blocks by ascending address; being immutable, they
            cannot alter the address space.
        """
        return self._space.blocks

    @property
    def capacity(self) -> int:
        r"""int: Address space capacity."""
        return self._space.capacity

    def total_free(self) -> int:
        r"""Total free space.

        Returns:
            int: Sum of the sizes of the free blocks.
        """
        return self._space.total_free()

    def free_extents(self) -> List[Tuple[int, int]]:
        r"""Lists free extents.

        Returns:
            list of (int, int): Start address and size of each free block.
        """
        return [(block.start, block.size) for _, block in self._space.free_blocks()]

    def largest_free(self) -> int:
        r"""Size of the largest free block.

        Returns:
            int: Largest free block size, zero if there is no free space.
        """
        return max((size for _, size in self.free_extents()), default=0)

    def fragmentation(self) -> FragmentationStats:
        r"""Computes external fragmentation.

        External fragmentation is ``1 - largest_free / total_free``: zero when
        all the free space is contiguous (or there is none), approaching one
        as free space gets scattered across many small holes.

        Returns:
            :class:`FragmentationStats`: Fragmentation figures.
        """
        sizes = [size for _, size in self.free_extents()]
        total = sum(sizes)
        largest = max(sizes, default=0)
        external = 0.0 if total == 0 else 1.0 - (largest / total)
        return FragmentationStats(total, largest, len(sizes), external)


def colorize_label(
    label: str,
    key: str,
) -> str:
    r"""Prepends the ANSI color code of a status field.

    Arguments:
        label (str):
            Field text.

        key (str):
            Field type key within :data:`LABEL_COLOR_CODES`.

    Returns:
        str: `label` wrapped by its color code and the reset code.
    """
    codes = LABEL_COLOR_CODES
    return f'{codes[key]}{label}{codes[""]}'


def format_status(
    view: StatusView,
    color: bool = False,
) -> str:
    r"""Formats the status report.

    Arguments:
        view (:class:`StatusView`):
            Status to report.

        color (bool):
            Colorizes labels with ANSI codes.

    Returns:
        str: Multi-line report, without the trailing newline.

    Examples:
        >>> from contalloc import AddressSpace, Allocator
        >>> space = AddressSpace(100)
        >>> _ = Allocator(space).allocate('P1', 40, 'F')
        >>> print(format_status(StatusView(space)))
        Total available space: 60
        Addresses [0 : 39] -> Process: P1
        Addresses [40 : 99] -> Process: FREE
    """
    total = str(view.total_free())
    if color:
        total = colorize_label(total, 'size')
    lines = [f'Total available space: {total}']

    for block in view.blocks():
        start, end, label = block.start, block.end, block.label
        if color:
            label = colorize_label(label, 'free' if block.is_free() else 'used')
        lines.append(f'Addresses [{start} : {end}] -> Process: {label}')

    return '\n'.join(lines)
