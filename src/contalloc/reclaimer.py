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

r"""Block release."""

import logging

from .base import Block
from .base import ProcessNotFoundError
from .space import AddressSpace

_log = logging.getLogger(__name__)


class Reclaimer:
    r"""Releases blocks back to free space.

    Arguments:
        space (:class:`AddressSpace`):
            Address space to manage.
    """

    def __init__(
        self,
        space: AddressSpace,
    ):
        self.space: AddressSpace = space

    def release(
        self,
        process_id: str,
    ) -> Block:
        r"""Releases the block owned by a process.

        The block becomes free, and it is coalesced with any adjacent free
        blocks.

        +---+---+---+---+---+---+---+---+---+---+
        | 0 | 1 | 2 | 3 | 4 | 5 | 6 | 7 | 8 | 9 |
        +===+===+===+===+===+===+===+===+===+===+
        |[  |  ]|[A | A | A]|[  |  ]|[B | B | B]|
        +---+---+---+---+---+---+---+---+---+---+
        |[  |   |   |   |   |   |  ]|[B | B | B]|
        +---+---+---+---+---+---+---+---+---+---+

        Arguments:
            process_id (str):
                Process ID.

        Returns:
            block: The released block, as it was before release.

        Raises:
            ProcessNotFoundError: No block is owned by the process.
        """
        space = self.space
        index = space.find_owned(process_id)
        if index is None:
            raise ProcessNotFoundError(process_id)

        block = space.assign(index, None)
        space.merge_adjacent_free()
        _log.info('released [%d : %d] from %r', block.start, block.end, process_id)
        return block
