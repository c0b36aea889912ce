"""Tests du codec texte minimal.

Objectifs:
- Les chaînes de référence s'encodent et se décodent à l'identique.
- Chaque malformation lève la sous-classe d'erreur correspondante.
- Les plateaux non représentables sont refusés à l'encodage.
"""

from dataclasses import replace

import pytest

from spaces.engine.board import CellContent, Position
from spaces.engine.codec import (
    SHARED_BOARD_NAME,
    BadFormatError,
    BadGoalColumnError,
    BadGoalTokenError,
    BadMoveTypeError,
    BadPositionError,
    BadSizeError,
    BoardCodecError,
    BoardEncodingError,
    TruncatedPositionError,
    decode_board,
    encode_board,
    position_width,
    validate_board_for_encoding,
)

from .board_factories import final, make_board, piece, trap

E, P, T = CellContent.EMPTY, CellContent.PIECE, CellContent.TRAP


@pytest.mark.parametrize(
    "board, encoded",
    [
        (make_board(2, piece(0, 0, 1), trap(1, 1, 2), final(0, 3)), "2|0p3tG0f"),
        (make_board(10, piece(0, 0, 1), trap(5, 5, 2), piece(9, 9, 3), final(0, 4)), "10|00p55t99pG0f"),
        (
            make_board(3, piece(0, 0, 1), trap(0, 2, 2), piece(1, 1, 3), trap(2, 0, 4), final(1, 5)),
            "3|0p2t4p6tG1f",
        ),
        (make_board(12, piece(11, 0, 1), final(11, 2)), "12|132pG11f"),
    ],
)
def test_reference_encodings(board, encoded):
    assert encode_board(board) == encoded
    decoded = decode_board(encoded)
    assert decoded.moves == board.moves
    assert decoded.grid == board.grid
    assert decoded.size == board.size


def test_decoded_grid_paints_pieces_and_traps():
    decoded = decode_board("3|0p2t4p6tG1f")
    assert decoded.grid == ((P, E, T), (E, P, E), (T, E, E))


def test_decoded_metadata_is_fresh():
    original = make_board(2, piece(1, 0, 1), trap(0, 0, 2), name="Mine")
    decoded = decode_board(encode_board(original))

    assert decoded.name == SHARED_BOARD_NAME
    assert decoded.thumbnail == ""
    assert decoded.created_at > 0
    assert decoded.id != original.id
    assert decode_board("2|2p0t").id != decoded.id


def test_empty_body_decodes_to_empty_board():
    decoded = decode_board("4|")
    assert decoded.moves == ()
    assert decoded.size == 4


@pytest.mark.parametrize("size, width", [(2, 1), (3, 1), (4, 2), (10, 2), (11, 3), (99, 4)])
def test_position_width(size, width):
    assert position_width(size) == width


@pytest.mark.parametrize(
    "encoded, error",
    [
        ("invalid", BadFormatError),
        ("2", BadFormatError),
        ("1|0p", BadSizeError),
        ("100|0p", BadSizeError),
        ("abc|0p", BadSizeError),
        ("2|0x", BadMoveTypeError),
        ("2|G", BadGoalTokenError),
        ("2|Gx", BadGoalTokenError),
        ("2|G1p", BadGoalTokenError),
        ("2|Gxp", BadGoalColumnError),
        ("2|G99f", BadGoalColumnError),
        ("3|G3f", BadGoalColumnError),
        ("12|G012f", BadGoalColumnError),
        ("2|xp", BadPositionError),
        ("2|4p", BadPositionError),
        ("10|0p", TruncatedPositionError),
    ],
)
def test_malformed_strings_are_rejected(encoded, error):
    with pytest.raises(error) as excinfo:
        decode_board(encoded)
    assert isinstance(excinfo.value, BoardCodecError)
    assert isinstance(excinfo.value, ValueError)
    assert excinfo.value.kind == error.kind


def test_oversized_goal_column_stays_a_codec_error():
    with pytest.raises(BadGoalColumnError):
        decode_board("2|G" + "9" * 5000 + "f")


def test_decoded_board_may_still_be_illegal():
    # Syntaxe correcte mais deux pions: la légalité reste l'affaire du validateur
    decoded = decode_board("2|2p0p")
    assert decoded.count_cells(CellContent.PIECE) == 2


class TestEncodingPreconditions:
    def test_empty_moves(self):
        with pytest.raises(BoardEncodingError, match="au moins un coup"):
            encode_board(make_board(2))

    def test_size_out_of_range(self):
        board = replace(make_board(2, piece(0, 0, 1)), size=1)
        with pytest.raises(BoardEncodingError, match="comprise entre 2 et 99"):
            encode_board(board)

    def test_order_mismatch(self):
        board = make_board(2, trap(0, 0, 2), piece(1, 0, 1))
        with pytest.raises(BoardEncodingError, match="Décalage de rang"):
            encode_board(board)

    def test_final_off_goal_row(self):
        board = make_board(2, piece(1, 0, 1))
        broken = replace(board, moves=(piece(1, 0, 1), replace(final(0, 2), position=Position(0, 0))))
        with pytest.raises(BoardEncodingError, match="ligne d'objectif"):
            validate_board_for_encoding(broken)

    def test_position_outside_grid(self):
        board = replace(make_board(2, piece(1, 0, 1)), moves=(piece(2, 0, 1),))
        with pytest.raises(BoardEncodingError, match="hors grille"):
            encode_board(board)

    def test_valid_board_passes(self):
        assert validate_board_for_encoding(make_board(2, piece(1, 0, 1), trap(0, 0, 2)))
