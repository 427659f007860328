"""Defines the chess pieces"""

from dataclasses import dataclass
from typing import Self

from src.chess.square import Square
from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

# Letter used in move notation. Pawns don't get one.
PIECE_TO_NOTATION: dict[PieceType, str] = {
    PieceType.PAWN: "",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}

# The rank a pawn starts on. Only from here it may push two squares.
PAWN_HOME_RANK: dict[Color, int] = {Color.WHITE: 2, Color.BLACK: 7}


@dataclass(eq=False)
class Piece:
    """
    A piece standing on the board.

    NOTE: compared by identity. The same object travels from square to square during the game
    (its `square` gets updated in place), so two white pawns are never "equal".
    """

    type: PieceType
    color: Color
    square: Square
    has_moved: bool = False

    @classmethod
    def from_fen(cls, character: str, square: Square) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color, square)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    @property
    def notation(self) -> str:
        return PIECE_TO_NOTATION[self.type]

    @property
    def name(self) -> str:
        return self.type.value

    def is_on_home_rank(self) -> bool:
        """Only meaningful for pawns: still on the rank it started from, and never moved."""
        return not self.has_moved and self.square.rank == PAWN_HOME_RANK[self.color]

    def __str__(self) -> str:
        """Example: 'white pawn at e2'"""
        return f"{self.color} {self.name} at {self.square}"
