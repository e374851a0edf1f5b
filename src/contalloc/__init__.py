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

__version__ = '0.1.0'

from .allocator import Allocator
from .allocator import Strategy
from .allocator import parse_strategy
from .allocator import select_block
from .allocator import strategy_types
from .base import FREE_LABEL
from .base import AllocatorError
from .base import Block
from .base import DuplicateProcessError
from .base import InsufficientSpaceError
from .base import InvalidCapacityError
from .base import InvalidStrategyError
from .base import ProcessNotFoundError
from .compactor import Compactor
from .manager import MemoryManager
from .manager import run_command
from .reclaimer import Reclaimer
from .space import AddressSpace
from .status import StatusView
from .status import format_status


def _register_default_strategy_types():

    defaults = {
        # One-letter tokens of the allocator prompt
        'f': Strategy.FIRST_FIT,
        'b': Strategy.BEST_FIT,
        'w': Strategy.WORST_FIT,

        # Long names
        'first': Strategy.FIRST_FIT,
        'best': Strategy.BEST_FIT,
        'worst': Strategy.WORST_FIT,
    }

    for key, value in defaults.items():
        strategy_types.setdefault(key, value)
        if len(key) > 1:
            strategy_types.setdefault(f'{key}-fit', value)
            strategy_types.setdefault(f'{key}_fit', value)


# Automatically register default strategy types on module load
_register_default_strategy_types()
