"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Optional

from src.core.exceptions import InvalidNotationError

# Chess board is always 8x8. Just in case we want to try some funky stuff, make it adjustable
BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = "abcdefgh"


def _within_bounds(file: int, rank: int) -> bool:
    return (1 <= file <= BOARD_DIMENSIONS[0]) and (1 <= rank <= BOARD_DIMENSIONS[1])


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    def __post_init__(self) -> None:
        # NOTE: never clamp. Movement code asks for `offset()` instead, which returns None off the board.
        if not _within_bounds(self.file, self.rank):
            raise InvalidNotationError(
                f"Square outside of the board: file={self.file}, rank={self.rank}"
            )

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not isinstance(sq, str) or len(sq) != 2:
            raise InvalidNotationError(f"Invalid square notation: {sq!r}")

        file_char, rank_char = sq[0], sq[1]
        if file_char not in FILE_NAMES or rank_char not in "12345678":
            raise InvalidNotationError(f"Invalid square notation: {sq!r}")

        return cls(FILE_NAMES.index(file_char) + 1, int(rank_char))

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.file - 1]}{self.rank}"

    def __str__(self) -> str:
        return self.to_algebraic()

    def offset(self, d_file: int, d_rank: int) -> Optional[Square]:
        """The square reached by stepping (d_file, d_rank) away, or None when that falls off the board."""
        file = self.file + d_file
        rank = self.rank + d_rank
        if not _within_bounds(file, rank):
            return None
        return Square(file, rank)

    def distance(self, other: Square) -> tuple[int, int]:
        """(file distance, rank distance), both absolute."""
        return abs(other.file - self.file), abs(other.rank - self.rank)

    def same_diagonal(self, other: Square) -> bool:
        file_distance, rank_distance = self.distance(other)
        return file_distance == rank_distance and file_distance > 0

    def same_file(self, other: Square) -> bool:
        return self.file == other.file

    def same_rank(self, other: Square) -> bool:
        return self.rank == other.rank


def all_squares() -> Iterator[Square]:
    """a1, a2, ..., h8"""
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        for rank in range(1, BOARD_DIMENSIONS[1] + 1):
            yield Square(file, rank)
