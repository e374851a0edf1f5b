# -*- coding: utf-8 -*-
import pytest

import contalloc.status as _st
from contalloc.allocator import Allocator
from contalloc.base import Block
from contalloc.space import AddressSpace
from contalloc.status import *


@pytest.fixture
def fake_label_color_codes(request):
    backup = _st.LABEL_COLOR_CODES
    _st.LABEL_COLOR_CODES = {key: f'[{key}]' for key in backup}
    yield
    _st.LABEL_COLOR_CODES = backup


@pytest.fixture
def space():
    # [_ _][A A][_][B B B][_ _ _ _]
    space = AddressSpace(12)
    space.replace_blocks([
        Block(0, 2),
        Block(2, 2, 'A'),
        Block(4, 1),
        Block(5, 3, 'B'),
        Block(8, 4),
    ])
    return space


# ============================================================================

class TestStatusView:

    def test_doctest(self):
        space = AddressSpace(100)
        view = StatusView(space)
        Allocator(space).allocate('P1', 40, 'F')
        assert list(view) == [(0, 39, 'P1'), (40, 99, 'FREE')]
        assert view.total_free() == 60

    def test___iter__(self, space):
        ans_ref = [
            (0, 1, 'FREE'),
            (2, 3, 'A'),
            (4, 4, 'FREE'),
            (5, 7, 'B'),
            (8, 11, 'FREE'),
        ]
        view = StatusView(space)
        assert list(view) == ans_ref
        assert list(view) == ans_ref

    def test___iter___restartable(self, space):
        view = StatusView(space)
        before = list(view)
        Allocator(space).allocate('C', 4, 'W')
        after = list(view)
        assert before != after
        assert after[-1] == (8, 11, 'C')

    def test___iter___snapshot(self, space):
        view = StatusView(space)
        iterator = iter(view)
        assert next(iterator) == (0, 1, 'FREE')
        Allocator(space).allocate('C', 2, 'F')
        assert next(iterator) == (2, 3, 'A')

    def test___iter___unconsumed(self, space):
        view = StatusView(space)
        ans_ref = list(view)
        iterator = iter(view)
        Allocator(space).allocate('C', 4, 'W')
        assert list(iterator) == ans_ref
        assert list(view) != ans_ref

    def test_capacity(self, space):
        assert StatusView(space).capacity == 12

    def test_blocks(self, space):
        view = StatusView(space)
        blocks = view.blocks()
        assert blocks == space.blocks
        blocks.clear()
        assert len(space) == 5

    def test_total_free(self, space):
        assert StatusView(space).total_free() == 7

    def test_free_extents(self, space):
        assert StatusView(space).free_extents() == [(0, 2), (4, 1), (8, 4)]

    def test_largest_free(self, space):
        assert StatusView(space).largest_free() == 4

    def test_largest_free_full(self):
        space = AddressSpace(3)
        space.assign(0, 'A')
        assert StatusView(space).largest_free() == 0

    def test_fragmentation(self, space):
        stats = StatusView(space).fragmentation()
        assert stats.total_free == 7
        assert stats.largest_free == 4
        assert stats.hole_count == 3
        assert stats.external == pytest.approx(3 / 7)

    def test_fragmentation_contiguous(self):
        stats = StatusView(AddressSpace(10)).fragmentation()
        assert stats == FragmentationStats(10, 10, 1, 0.0)

    def test_fragmentation_full(self):
        space = AddressSpace(3)
        space.assign(0, 'A')
        stats = StatusView(space).fragmentation()
        assert stats == FragmentationStats(0, 0, 0, 0.0)


# ============================================================================

def test_colorize_label(fake_label_color_codes):
    assert colorize_label('P1', 'used') == '[used]P1[]'
    assert colorize_label('FREE', 'free') == '[free]FREE[]'


def test_colorize_label_ansi():
    ans_out = colorize_label('P1', 'used')
    assert ans_out.startswith('\x1b[')
    assert 'P1' in ans_out
    assert ans_out.endswith('\x1b[0m')


def test_format_status_doctest():
    space = AddressSpace(100)
    Allocator(space).allocate('P1', 40, 'F')
    ans_out = format_status(StatusView(space))
    ans_ref = ('Total available space: 60\n'
               'Addresses [0 : 39] -> Process: P1\n'
               'Addresses [40 : 99] -> Process: FREE')
    assert ans_out == ans_ref


def test_format_status(space):
    ans_out = format_status(StatusView(space))
    ans_ref = ('Total available space: 7\n'
               'Addresses [0 : 1] -> Process: FREE\n'
               'Addresses [2 : 3] -> Process: A\n'
               'Addresses [4 : 4] -> Process: FREE\n'
               'Addresses [5 : 7] -> Process: B\n'
               'Addresses [8 : 11] -> Process: FREE')
    assert ans_out == ans_ref


def test_format_status_color(space, fake_label_color_codes):
    ans_out = format_status(StatusView(space), color=True)
    ans_ref = ('Total available space: [size]7[]\n'
               'Addresses [0 : 1] -> Process: [free]FREE[]\n'
               'Addresses [2 : 3] -> Process: [used]A[]\n'
               'Addresses [4 : 4] -> Process: [free]FREE[]\n'
               'Addresses [5 : 7] -> Process: [used]B[]\n'
               'Addresses [8 : 11] -> Process: [free]FREE[]')
    assert ans_out == ans_ref


def test_format_status_color_process_named_free(fake_label_color_codes):
    space = AddressSpace(4)
    Allocator(space).allocate('FREE', 2, 'F')
    ans_out = format_status(StatusView(space), color=True)
    assert 'Process: [used]FREE[]' in ans_out
    assert 'Process: [free]FREE[]' in ans_out
