# -*- coding: utf-8 -*-
import pytest

from contalloc.allocator import Allocator
from contalloc.base import Block
from contalloc.compactor import *
from contalloc.reclaimer import Reclaimer
from contalloc.space import AddressSpace


@pytest.fixture
def space():
    # [_ _][A A][_ _][B B B][_]
    space = AddressSpace(10)
    space.replace_blocks([
        Block(0, 2),
        Block(2, 2, 'A'),
        Block(4, 2),
        Block(6, 3, 'B'),
        Block(9, 1),
    ])
    return space


# ============================================================================

class TestCompactor:

    def test_compact_doctest(self):
        space = AddressSpace(10)
        Allocator(space).allocate('A', 2, 'F')
        Allocator(space).allocate('B', 3, 'F')
        Reclaimer(space).release('A')
        assert Compactor(space).compact() == 3
        assert space.blocks == [Block(0, 3, 'B'), Block(3, 7)]

    def test_compact(self, space):
        assert Compactor(space).compact() == 5
        ans_ref = [Block(0, 2, 'A'), Block(2, 3, 'B'), Block(5, 5)]
        assert space.blocks == ans_ref
        assert space.total_free() == 5
        assert space.is_valid()

    def test_compact_idempotent(self, space):
        compactor = Compactor(space)
        compactor.compact()
        blocks = space.blocks
        assert compactor.compact() == 0
        assert space.blocks == blocks

    def test_compact_keeps_order(self):
        space = AddressSpace(12)
        space.replace_blocks([
            Block(0, 3, 'Z'),
            Block(3, 1),
            Block(4, 2, 'A'),
            Block(6, 2),
            Block(8, 1, 'M'),
            Block(9, 3),
        ])
        Compactor(space).compact()
        ans_ref = [Block(0, 3, 'Z'), Block(3, 2, 'A'), Block(5, 1, 'M'), Block(6, 6)]
        assert space.blocks == ans_ref

    def test_compact_empty(self):
        space = AddressSpace(10)
        assert Compactor(space).compact() == 0
        assert space.blocks == [Block(0, 10)]

    def test_compact_full(self):
        space = AddressSpace(6)
        space.replace_blocks([Block(0, 2, 'A'), Block(2, 4, 'B')])
        assert Compactor(space).compact() == 0
        assert space.blocks == [Block(0, 2, 'A'), Block(2, 4, 'B')]
        assert space.total_free() == 0

    def test_compact_leading_free(self):
        space = AddressSpace(10)
        space.replace_blocks([Block(0, 2), Block(2, 3, 'A'), Block(5, 5, 'B')])
        assert Compactor(space).compact() == 8
        assert space.blocks == [Block(0, 3, 'A'), Block(3, 5, 'B'), Block(8, 2)]
        assert space.total_free() == 2

    def test_compact_preserves_owners(self, space):
        owned = {block.owner: block.size for block in space if block.owner}
        Compactor(space).compact()
        assert {block.owner: block.size for block in space if block.owner} == owned
