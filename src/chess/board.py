"""The Game board: sole authority on which piece stands where, and on raw (unchecked) mutation of that."""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.chess.moves import Move, attacks, legal_moves, reachable_squares
from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


@dataclass
class Board:
    """
    `position` only holds occupied squares: an empty square is simply absent.
    `captured` is in the order the pieces were taken, so the last one is what an undo restores.

    NOTE: the board does not enforce one king per color. `find_king` returns the first king found (or None).
    """

    position: dict[Square, Piece] = field(default_factory=dict)
    captured: list[Piece] = field(default_factory=list)

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        position: dict[Square, Piece] = {}
        fen_by_ranks = fen_str.split("/")
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            file = 1
            for character in fen_one_rank:
                if character.isalpha():
                    square = Square(file, rank)
                    position[square] = Piece.from_fen(character, square)
                    file += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    file += int(character)
        return cls(position)

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            piece = self.piece(Square(file, rank))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    # -- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        return self.position.get(square)

    def is_occupied(self, square: Square) -> bool:
        return square in self.position

    def is_occupied_by(self, square: Square, color: Color) -> bool:
        piece = self.piece(square)
        return piece is not None and piece.color == color

    def is_occupied_by_opponent(self, square: Square, color: Color) -> bool:
        piece = self.piece(square)
        return piece is not None and piece.color != color

    def pieces_of(self, color: Color) -> list[Piece]:
        """find all pieces of a given color"""
        return [piece for piece in self.position.values() if piece.color == color]

    def find_king(self, color: Color) -> Optional[Piece]:
        return next(
            (
                piece
                for piece in self.pieces_of(color)
                if piece.type == PieceType.KING
            ),
            None,
        )

    def reachable_squares(self, piece: Piece) -> list[Square]:
        return reachable_squares(piece, self)

    def legal_moves(self, piece: Piece) -> list[Move]:
        return legal_moves(piece, self)

    def is_square_attacked(self, square: Square, by_color: Color) -> bool:
        return any(attacks(piece, square, self) for piece in self.pieces_of(by_color))

    def is_king_in_check(self, color: Color) -> bool:
        """
        Any opposing piece that attacks the king's square gives check.

        NOTE: walks the rays of every opposing piece. Without a king there is nothing to attack.
        """
        king = self.find_king(color)
        if king is None:
            return False
        return self.is_square_attacked(king.square, color.opponent)

    # -- MUTATION (no legality checks: the caller is responsible) ---
    def place_piece(self, piece: Piece, square: Square) -> None:
        """Setup helper: put a piece on a square (replacing whatever stood there)."""
        piece.square = square
        self.position[square] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        """Setup helper: take a piece off the board without recording it as captured."""
        return self.position.pop(square, None)

    def execute_move(self, move: Move) -> None:
        """Update the position on the board"""
        if move.captured_piece is not None:
            del self.position[move.to_square]
            self.captured.append(move.captured_piece)

        piece = move.piece
        del self.position[move.from_square]
        self.position[move.to_square] = piece
        piece.square = move.to_square
        piece.has_moved = True

    def undo_move(self, move: Move) -> None:
        """
        Exact inverse of `execute_move`.

        NOTE: only valid for the move that was executed most recently.
        """
        piece = move.piece
        del self.position[move.to_square]
        self.position[move.from_square] = piece
        piece.square = move.from_square
        piece.has_moved = move.piece_had_moved

        if move.captured_piece is not None:
            self.position[move.to_square] = move.captured_piece
            self.captured.pop()

    @contextmanager
    def simulate(self, move: Move) -> Iterator[Self]:
        """Execute the move for the duration of the `with` block. The move is always undone afterwards."""
        self.execute_move(move)
        try:
            yield self
        finally:
            self.undo_move(move)

    def would_put_king_in_check(self, move: Move) -> bool:
        """Speculatively make the move and see if the mover's own king is attacked."""
        with self.simulate(move):
            return self.is_king_in_check(move.piece.color)
