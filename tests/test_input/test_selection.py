"""Tests for SquareSelection."""

from chesslink.input.selection import SquareSelection
from chesslink.rules.types import Move, Square

E2 = Square(4, 1)
E4 = Square(4, 3)
D2 = Square(3, 1)


class TestClickSelect:
    def test_first_click_selects_own_piece(self):
        sel = SquareSelection()
        assert sel.click(E2, selectable=True) is None
        assert sel.start == E2

    def test_first_click_on_empty_square_ignored(self):
        sel = SquareSelection()
        assert sel.click(E4, selectable=False) is None
        assert sel.start is None

    def test_second_click_proposes_move(self):
        sel = SquareSelection()
        sel.click(E2, selectable=True)
        assert sel.click(E4, selectable=False) == Move(E2, E4)

    def test_same_square_deselects(self):
        sel = SquareSelection()
        sel.click(E2, selectable=True)
        assert sel.click(E2, selectable=True) is None
        assert sel.start is None

    def test_other_own_piece_switches_selection(self):
        sel = SquareSelection()
        sel.click(E2, selectable=True)
        assert sel.click(D2, selectable=True) is None
        assert sel.start == D2

    def test_click_off_board_clears(self):
        sel = SquareSelection()
        sel.click(E2, selectable=True)
        assert sel.click(None, selectable=False) is None
        assert sel.start is None

    def test_clear(self):
        sel = SquareSelection()
        sel.click(E2, selectable=True)
        sel.clear()
        assert sel.start is None
