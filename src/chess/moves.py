"""
Geometry/Base movement rules + the Move record

Key idea: every piece type is described by a set of directions. A direction is a step vector plus
the maximum number of steps that may be taken along it. One raycasting algorithm then covers all pieces:

* sliding pieces (bishop, rook, queen) take up to 7 steps (the board diameter)
* leapers (knight, king) take a single step
* the pawn gets gated directions: pushes may only land on empty squares, its diagonals only on the opponent.

Legality (not leaving your own king attacked) is checked afterwards, see `legal_moves()`.
"""

from dataclasses import dataclass, field, replace
from enum import Enum, auto
from typing import Optional, Protocol, Self

from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def would_put_king_in_check(self, move: "Move") -> bool: ...


Vector = tuple[int, int]

# longest possible ray on an 8x8 board
MAX_SLIDE = 7


class Gate(Enum):
    """Which kind of target square a direction may land on."""

    ANY = auto()  # empty or opponent
    QUIET = auto()  # empty only (pawn pushes)
    CAPTURE = auto()  # opponent only (pawn takes)


@dataclass(frozen=True)
class Direction:
    d_file: int
    d_rank: int
    max_steps: int = 1
    gate: Gate = Gate.ANY


DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]
KNIGHT_JUMPS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]


def _rays(vectors: list[Vector], max_steps: int) -> list[Direction]:
    return [Direction(df, dr, max_steps) for df, dr in vectors]


def _pawn_directions(color: Color, on_home_rank: bool) -> list[Direction]:
    """
    A pawn:
    - moves forward by a single square, onto an empty square only.
    - can move by two in their first move (so when on their starting rank). Both squares must be empty,
      which is exactly what a quiet ray of length 2 gives us.
    - takes diagonally, and only takes.

    NOTE: no en passant, no promotion.
    """
    # White moves up the board, black moves down the board
    forward = 1 if color == Color.WHITE else -1
    push_length = 2 if on_home_rank else 1
    return [
        Direction(0, forward, push_length, Gate.QUIET),
        Direction(-1, forward, 1, Gate.CAPTURE),
        Direction(1, forward, 1, Gate.CAPTURE),
    ]


def directions(
    piece_type: PieceType, color: Color, on_home_rank: bool = False
) -> list[Direction]:
    """All directions a piece of this type/color may move along. Only the pawn cares about color and home rank."""
    match piece_type:
        case PieceType.PAWN:
            return _pawn_directions(color, on_home_rank)
        case PieceType.KNIGHT:
            return _rays(KNIGHT_JUMPS, 1)
        case PieceType.BISHOP:
            return _rays(DIAGONALS, MAX_SLIDE)
        case PieceType.ROOK:
            return _rays(STRAIGHTS, MAX_SLIDE)
        case PieceType.QUEEN:
            return _rays(DIAGONALS + STRAIGHTS, MAX_SLIDE)
        case PieceType.KING:
            return _rays(DIAGONALS + STRAIGHTS, 1)
    raise ValueError(f"Unknown piece type: {piece_type!r}")


# --- MOVEMENT RULES ---
def reachable_squares(piece: Piece, board: Board) -> list[Square]:
    """
    Raycasting algorithm
    -----

    ---
    For every direction: keep stepping until we hit the edge of the board, a piece, or the step limit.
    * own piece: blocked, square excluded.
    * opponent piece: square included (capture), ray ends.
    * empty square: included, keep going.

    The pawn gates decide whether an empty / opponent square may be landed on at all.

    ---
    The result is pseudo-legal: it does not care whether the own king is left attacked.
    """
    squares: list[Square] = []
    for direction in directions(piece.type, piece.color, piece.is_on_home_rank()):
        current = piece.square
        for _ in range(direction.max_steps):
            target = current.offset(direction.d_file, direction.d_rank)
            if target is None:
                break

            occupant = board.piece(target)
            if occupant is not None:
                # only the first occupied square matters: take it if it's the opponent's (and the gate allows it)
                if occupant.color != piece.color and direction.gate != Gate.QUIET:
                    squares.append(target)
                break

            if direction.gate != Gate.CAPTURE:
                squares.append(target)
            current = target
    return squares


def attacks(piece: Piece, square: Square, board: Board) -> bool:
    """
    Could `piece` capture whatever stands on `square`?

    Same rays as `reachable_squares`, but pawn pushes never attack and the pawn diagonals attack
    whether or not something stands there. For an occupied enemy square (ex. the king) this is the same
    as asking if the square is reachable.
    """
    for direction in directions(piece.type, piece.color, piece.is_on_home_rank()):
        if direction.gate == Gate.QUIET:
            continue
        current = piece.square
        for _ in range(direction.max_steps):
            target = current.offset(direction.d_file, direction.d_rank)
            if target is None:
                break
            if target == square:
                return True
            if board.piece(target) is not None:
                break
            current = target
    return False


# --- THE MOVE ---
@dataclass(frozen=True)
class Move:
    """
    A transition from one square to another.
    ---

    Created as a *candidate* via `Move.candidate()`: the moving piece and any captured piece are read from the board
    at that moment. Once the Game has executed it, `with_outcome()` produces the historical record with the check
    flags and move number filled in. Moves are never mutated.

    NOTE: two moves are equal when they go from the same square to the same square.
    """

    from_square: Square
    to_square: Square
    piece: Piece = field(compare=False)
    captured_piece: Optional[Piece] = field(default=None, compare=False)
    is_check: bool = field(default=False, compare=False)
    is_checkmate: bool = field(default=False, compare=False)
    move_number: int = field(default=0, compare=False)
    # the moved-flag of the piece before this move, so undo can restore it
    piece_had_moved: bool = field(default=False, compare=False)
    notation: str = field(default="", compare=False)

    def __post_init__(self) -> None:
        if not self.notation:
            object.__setattr__(self, "notation", self._generate_notation())

    @classmethod
    def candidate(cls, from_square: Square, to_square: Square, board: Board) -> Self:
        """Unvalidated move. Whatever stands on `to_square` right now is what gets captured."""
        piece = board.piece(from_square)
        if piece is None:
            raise ValueError(f"No piece on {from_square} to build a move from.")
        return cls(
            from_square=from_square,
            to_square=to_square,
            piece=piece,
            captured_piece=board.piece(to_square),
            piece_had_moved=piece.has_moved,
        )

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    def with_outcome(self, is_check: bool, is_checkmate: bool, move_number: int) -> Self:
        """The historical version of this move, with notation regenerated."""
        return replace(
            self,
            is_check=is_check,
            is_checkmate=is_checkmate,
            move_number=move_number,
            notation="",
        )

    def is_castling(self) -> bool:
        """
        Notation heuristic only: a king moving two files along its rank.

        NOTE: the king only ever steps a single square in our movement rules, so this never fires for a
        move the Game accepted. Castling itself is not implemented.
        """
        if self.piece.type != PieceType.KING:
            return False
        file_distance, rank_distance = self.from_square.distance(self.to_square)
        return file_distance == 2 and rank_distance == 0

    def _generate_notation(self) -> str:
        """
        Piece letter (none for pawns), 'x' on a capture, the target square, then '#' for checkmate or '+' for check.

        NOTE: a mating move only gets '#', as in standard algebraic notation. The engine this one was modelled on
        writes both ('+#').
        """
        if self.is_castling():
            # 'g' is file 7
            return "O-O" if self.to_square.file == 7 else "O-O-O"

        capture = "x" if self.is_capture else ""
        suffix = "#" if self.is_checkmate else "+" if self.is_check else ""
        return f"{self.piece.notation}{capture}{self.to_square}{suffix}"

    def to_uci(self) -> str:
        """Convert into UCI notation, ex. 'e2e4'"""
        return f"{self.from_square}{self.to_square}"

    def __str__(self) -> str:
        return f"{self.move_number}. {self.notation}"

    def describe(self) -> str:
        """ex. '3. white pawn from e4 to d5 (capture)'"""
        details = f"{self.move_number}. {self.piece.color} {self.piece.name} from {self.from_square} to {self.to_square}"
        if self.is_capture:
            details += " (capture)"
        if self.is_check:
            details += " (check)"
        if self.is_checkmate:
            details += " (checkmate)"
        return details


# --- LEGALITY FILTER ---
def candidate_moves(piece: Piece, board: Board) -> list[Move]:
    """Phase 1: one candidate per pseudo-legal target square."""
    return [
        Move.candidate(piece.square, target, board)
        for target in reachable_squares(piece, board)
    ]


def legal_moves(piece: Piece, board: Board) -> list[Move]:
    """Phase 2: keep those candidates that do not leave (or put) your own king under attack."""
    return [
        move
        for move in candidate_moves(piece, board)
        if not board.would_put_king_in_check(move)
    ]
