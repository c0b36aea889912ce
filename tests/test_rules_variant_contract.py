import pytest

from spaces.engine import rules


def test_variant_constants_defined():
    assert rules.MIN_BOARD_SIZE == 2
    assert rules.MAX_BOARD_SIZE == 99
    assert rules.MAX_TRAPS == 3
    assert (rules.MIN_MOVES, rules.MAX_MOVES) == (2, 8)
    assert rules.GOAL_ROW == -1
    assert rules.TOTAL_ROUNDS == 5
    assert rules.DECK_SIZE == 10


def test_default_rules_mirror_constants():
    assert rules.DEFAULT_RULES.max_traps == rules.MAX_TRAPS
    assert rules.DEFAULT_RULES.min_moves == rules.MIN_MOVES
    assert rules.DEFAULT_RULES.max_moves == rules.MAX_MOVES
    # Limite fixe quelle que soit la taille
    assert rules.DEFAULT_RULES.trap_limit(2) == 3
    assert rules.DEFAULT_RULES.trap_limit(50) == 3


def test_size_relative_trap_limit():
    relative = rules.RuleSet(size_relative_traps=True)
    assert relative.trap_limit(2) == 1
    assert relative.trap_limit(10) == 9


@pytest.mark.parametrize(
    "size, expected",
    [(2, True), (99, True), (1, False), (100, False), (True, False), ("3", False)],
)
def test_is_valid_board_size(size, expected):
    assert rules.is_valid_board_size(size) is expected
