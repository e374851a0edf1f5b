# -*- coding: utf-8 -*-
import pytest

from contalloc.allocator import *
from contalloc.base import Block
from contalloc.base import DuplicateProcessError
from contalloc.base import InsufficientSpaceError
from contalloc.base import InvalidStrategyError
from contalloc.space import AddressSpace


@pytest.fixture
def space():
    # [_ _ _][A][_ _][B][_ _ _ _ _][C][_ _]
    space = AddressSpace(16)
    space.replace_blocks([
        Block(0, 3),
        Block(3, 1, 'A'),
        Block(4, 2),
        Block(6, 1, 'B'),
        Block(7, 5),
        Block(12, 1, 'C'),
        Block(13, 3),
    ])
    return space


@pytest.fixture
def allocator(space):
    return Allocator(space)


# ============================================================================

def test_strategy_values():
    assert Strategy.FIRST_FIT.value == 'F'
    assert Strategy.BEST_FIT.value == 'B'
    assert Strategy.WORST_FIT.value == 'W'


def test_strategy_types():
    for key, strategy in strategy_types.items():
        assert key == key.lower()
        assert isinstance(strategy, Strategy)

    for strategy in Strategy:
        assert strategy_types[strategy.value.lower()] is strategy


# ============================================================================

def test_parse_strategy_doctest():
    assert parse_strategy('B') is Strategy.BEST_FIT
    assert parse_strategy('worst-fit') is Strategy.WORST_FIT


def test_parse_strategy_pass():
    values = [
        (Strategy.FIRST_FIT, Strategy.FIRST_FIT),
        ('F', Strategy.FIRST_FIT),
        ('f', Strategy.FIRST_FIT),
        ('first', Strategy.FIRST_FIT),
        ('First-Fit', Strategy.FIRST_FIT),
        ('first_fit', Strategy.FIRST_FIT),
        ('B', Strategy.BEST_FIT),
        ('best', Strategy.BEST_FIT),
        (' best_fit ', Strategy.BEST_FIT),
        ('W', Strategy.WORST_FIT),
        ('WORST', Strategy.WORST_FIT),
    ]
    for value, strategy in values:
        assert parse_strategy(value) is strategy, value


def test_parse_strategy_fail():
    for value in ('Z', '', 'FB', 'fit', None, 0, b'F'):
        with pytest.raises(InvalidStrategyError) as exc_info:
            parse_strategy(value)
        assert exc_info.value.strategy is value


# ============================================================================

def test_select_block_first_fit(space):
    assert select_block(space, 1, 'F') == 0
    assert select_block(space, 3, 'F') == 0
    assert select_block(space, 4, 'F') == 4
    assert select_block(space, 5, 'F') == 4
    assert select_block(space, 6, 'F') is None


def test_select_block_best_fit(space):
    assert select_block(space, 1, 'B') == 2
    assert select_block(space, 2, 'B') == 2
    assert select_block(space, 3, 'B') == 0
    assert select_block(space, 4, 'B') == 4
    assert select_block(space, 6, 'B') is None


def test_select_block_worst_fit(space):
    assert select_block(space, 1, 'W') == 4
    assert select_block(space, 5, 'W') == 4
    assert select_block(space, 6, 'W') is None


def test_select_block_tie_lowest_start():
    # [_ _][A][_ _][B][_ _ _ _][C][_ _ _ _]
    space = AddressSpace(16)
    space.replace_blocks([
        Block(0, 2),
        Block(2, 1, 'A'),
        Block(3, 2),
        Block(5, 1, 'B'),
        Block(6, 4),
        Block(10, 1, 'C'),
        Block(11, 4),
        Block(15, 1, 'D'),
    ])
    assert select_block(space, 1, 'F') == 0
    assert select_block(space, 1, 'B') == 0
    assert select_block(space, 3, 'B') == 4
    assert select_block(space, 1, 'W') == 4


def test_select_block_full():
    space = AddressSpace(4)
    space.assign(0, 'A')
    for strategy in Strategy:
        assert select_block(space, 1, strategy) is None


def test_select_block_invalid(space):
    with pytest.raises(InvalidStrategyError):
        select_block(space, 1, 'Z')


# ============================================================================

class TestAllocator:

    def test_doctest(self):
        space = AddressSpace(100)
        allocator = Allocator(space)
        assert allocator.allocate('P1', 40, 'F') == (0, 39)
        assert space.total_free() == 60

    def test_allocate_first_fit(self, space, allocator):
        assert allocator.allocate('D', 2, Strategy.FIRST_FIT) == (0, 1)
        assert space[0] == Block(0, 2, 'D')
        assert space[1] == Block(2, 1)
        assert space.is_valid()

    def test_allocate_best_fit(self, space, allocator):
        assert allocator.allocate('D', 2, Strategy.BEST_FIT) == (4, 5)
        assert space[2] == Block(4, 2, 'D')
        assert space[3] == Block(6, 1, 'B')
        assert space.is_valid()

    def test_allocate_worst_fit(self, space, allocator):
        assert allocator.allocate('D', 2, Strategy.WORST_FIT) == (7, 8)
        assert space[4] == Block(7, 2, 'D')
        assert space[5] == Block(9, 3)
        assert space.is_valid()

    def test_allocate_default_strategy(self, space, allocator):
        assert allocator.allocate('D', 1) == (0, 0)

    def test_allocate_exact(self, space, allocator):
        count = len(space)
        assert allocator.allocate('D', 5, 'B') == (7, 11)
        assert space[4] == Block(7, 5, 'D')
        assert len(space) == count
        assert space.is_valid()

    def test_allocate_whole(self):
        space = AddressSpace(10)
        allocator = Allocator(space)
        assert allocator.allocate('A', 10, 'W') == (0, 9)
        assert space.blocks == [Block(0, 10, 'A')]
        assert space.total_free() == 0

    def test_allocate_accounting(self, space, allocator):
        for strategy, size in zip('FBW', (1, 2, 3)):
            before = space.total_free()
            process_id = f'P{strategy}'
            start, end = allocator.allocate(process_id, size, strategy)
            assert end - start + 1 == size
            assert space[space.find_owned(process_id)] == Block(start, size, process_id)
            assert space.total_free() == before - size
            assert space.is_valid()

    def test_allocate_duplicate(self, space, allocator):
        blocks = space.blocks
        with pytest.raises(DuplicateProcessError) as exc_info:
            allocator.allocate('A', 1, 'F')
        assert exc_info.value.process_id == 'A'
        assert space.blocks == blocks

    def test_allocate_duplicate_before_strategy(self, space, allocator):
        with pytest.raises(DuplicateProcessError):
            allocator.allocate('A', 1, 'Z')

    def test_allocate_insufficient(self, space, allocator):
        blocks = space.blocks
        for strategy in Strategy:
            with pytest.raises(InsufficientSpaceError) as exc_info:
                allocator.allocate('D', 6, strategy)
            assert exc_info.value.process_id == 'D'
            assert exc_info.value.size == 6
        assert space.blocks == blocks

    def test_allocate_fragmented(self, space, allocator):
        # Enough total free space, but scattered
        assert space.total_free() == 13
        with pytest.raises(InsufficientSpaceError):
            allocator.allocate('D', 10, 'F')

    def test_allocate_invalid_strategy(self, space, allocator):
        blocks = space.blocks
        with pytest.raises(InvalidStrategyError):
            allocator.allocate('D', 1, 'Z')
        assert space.blocks == blocks

    def test_allocate_invalid_size(self, space, allocator):
        blocks = space.blocks
        for size in (0, -1, 1.5, '1', None, True):
            with pytest.raises(ValueError, match='invalid size'):
                allocator.allocate('D', size, 'F')
        assert space.blocks == blocks

    def test_allocate_invalid_process_id(self, space, allocator):
        blocks = space.blocks
        for process_id in ('', None):
            with pytest.raises(ValueError, match='invalid process ID'):
                allocator.allocate(process_id, 1, 'F')
        assert space.blocks == blocks

    def test_allocate_deterministic(self):
        layout = [
            Block(0, 4),
            Block(4, 1, 'A'),
            Block(5, 4),
            Block(9, 1, 'B'),
            Block(10, 6),
        ]
        for strategy in Strategy:
            results = set()
            for _ in range(3):
                space = AddressSpace(16)
                space.replace_blocks(layout)
                results.add(Allocator(space).allocate('C', 4, strategy))
            assert len(results) == 1, strategy
