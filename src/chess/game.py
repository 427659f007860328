"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game:
turn order, legality, detecting the end of the game, the move history and undo.
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from loguru import logger

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.pieces import Piece
from src.chess.square import Square
from src.core.exceptions import (
    EmptySquareError,
    GameOverError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
    RuleViolationError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status


@dataclass(frozen=True)
class GameState:
    """
    Read-only snapshot handed to callers. The lists are copies: adding to or removing from them does not touch the Game.

    NOTE: the pieces inside them are not copied. `captured_pieces` and `move_history[i].piece` are the Game's own
    Piece objects, so changing one (ex. its `square` or `has_moved`) changes the board. Treat them as read-only.
    """

    current_player: Color
    move_history: list[Move]
    captured_pieces: list[Piece]
    status: Status
    winner: Optional[Color] = None
    is_check: bool = False

    @property
    def is_game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    @property
    def result(self) -> Optional[Status]:
        """checkmate / stalemate, or None while the game is still going."""
        return self.status if self.is_game_over else None


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.starting_position)
    moves: list[Move] = field(default_factory=list)
    current_player: Color = Color.WHITE
    status: Status = Status.IN_PROGRESS
    winner: Optional[Color] = None

    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, white to move."""
        return cls()

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """
        Define how to construct a Game from the information the Service layer actually has.

        The moves get replayed from the starting position, so every rule is checked again on the way.
        """
        status_name = model.status.replace(" ", "_").upper()
        if status_name not in Status.__members__:
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join([status.value for status in Status])}"
            )

        game = cls.new_game()
        for move_uci in model.moves_uci:
            if len(move_uci) != 4:
                raise GameStateError(
                    f"Stored move {move_uci!r} is not in UCI notation (ex. 'e2e4')."
                )
            try:
                game.make_move(move_uci[:2], move_uci[2:4])
            except RuleViolationError as exc:
                raise GameStateError(
                    f"Stored move {move_uci!r} cannot be replayed: {exc}"
                ) from exc

        if game.status != Status[status_name]:
            raise GameStateError(
                f"Stored status {model.status!r} does not match the replayed game ({game.status})."
            )
        replayed_winner = game.winner.value if game.winner else None
        if model.winner != replayed_winner:
            raise GameStateError(
                f"Stored winner {model.winner!r} does not match the replayed game ({replayed_winner!r})."
            )
        return game

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            moves_uci=[move.to_uci() for move in self.moves],
            status=self.status.value,
            winner=self.winner.value if self.winner else None,
        )

    @property
    def is_game_over(self) -> bool:
        return self.status != Status.IN_PROGRESS

    def get_game_state(self) -> GameState:
        return GameState(
            current_player=self.current_player,
            move_history=list(self.moves),
            captured_pieces=list(self.board.captured),
            status=self.status,
            winner=self.winner,
            is_check=self.board.is_king_in_check(self._color_to_reply()),
        )

    def legal_moves_for(self, square: str) -> list[Move]:
        """Legal moves of the piece on the given square. Empty if there is no piece of the side to move."""
        piece = self.board.piece(Square.from_algebraic(square))
        if piece is None or piece.color != self.current_player:
            return []
        return self.board.legal_moves(piece)

    def legal_moves(self) -> list[Move]:
        """Every legal move of the side to move."""
        return self._legal_moves_of(self.current_player)

    def make_move(self, from_square: str, to_square: str) -> Move:
        """
        Attempt to make a move
        -----

        1. make sure the game is still in progress, and that the squares are valid
        2. there must be a piece of the side to move on the starting square
        3. the target must be among that piece's legal moves
        4. update the board
        5. check for the end of the game (for the opponent: are they mated / stalemated?)
        6. update the (history of) moves
        7. pass the turn (only if the game goes on)
        """
        if self.is_game_over:
            raise GameOverError(f"Game is over. status: {self.status}")

        from_sq = Square.from_algebraic(from_square)
        to_sq = Square.from_algebraic(to_square)

        piece = self.board.piece(from_sq)
        if piece is None:
            raise EmptySquareError(f"No piece at {from_sq}")
        if piece.color != self.current_player:
            raise NotYourTurnError(f"It's {self.current_player}'s turn")

        new_move = Move.candidate(from_sq, to_sq, self.board)
        if new_move not in self.board.legal_moves(piece):
            raise IllegalMoveError(
                f"Move not allowed: {piece.name} cannot move from {from_sq} to {to_sq}"
            )

        self.board.execute_move(new_move)

        opponent = self.current_player.opponent
        is_check = self.board.is_king_in_check(opponent)
        self._update_game_status(opponent, is_check)

        accepted_move = new_move.with_outcome(
            is_check=is_check,
            is_checkmate=self.status == Status.CHECKMATE,
            move_number=len(self.moves) // 2 + 1,
        )
        self.moves.append(accepted_move)
        logger.debug(f"{self.current_player} played {accepted_move}")

        if not self.is_game_over:
            self.current_player = opponent
        return accepted_move

    def undo_move(self) -> bool:
        """
        Take back the last move. Returns False if there is nothing to undo.

        NOTE: a move is only ever accepted while the game is in progress, so going back one ply always
        lands in an in-progress position. Repeated calls walk back through the entire history.
        """
        if not self.moves:
            return False

        last_move = self.moves.pop()
        self.board.undo_move(last_move)
        self.current_player = last_move.piece.color
        self.status = Status.IN_PROGRESS
        self.winner = None
        logger.debug(f"Took back {last_move}")
        return True

    def reset(self) -> None:
        """Throw the board and history away and start over."""
        self.board = Board.starting_position()
        self.moves = []
        self.current_player = Color.WHITE
        self.status = Status.IN_PROGRESS
        self.winner = None
        logger.debug("Game reset to the starting position")

    def move_history_text(self) -> str:
        return "\n".join(str(move) for move in self.moves)

    # -- PRIVATE HELPERS ---
    def _color_to_reply(self) -> Color:
        """Whoever has to answer the last move. After the game ended the turn is not passed, so that is the opponent."""
        return self.current_player.opponent if self.is_game_over else self.current_player

    def _legal_moves_of(self, color: Color) -> list[Move]:
        return [
            move
            for piece in self.board.pieces_of(color)
            for move in self.board.legal_moves(piece)
        ]

    def _has_legal_move(self, color: Color) -> bool:
        return any(self.board.legal_moves(piece) for piece in self.board.pieces_of(color))

    def _update_game_status(self, opponent: Color, is_check: bool) -> None:
        """Performs checks to see if game has ended and changes status accordingly.

        NOTE the board has already been updated, and the turn not yet passed: `self.current_player` made the move.
        """
        if self._has_legal_move(opponent):
            return

        if is_check:
            self.status = Status.CHECKMATE
            self.winner = self.current_player
        else:
            self.status = Status.STALEMATE
        logger.info(f"Game over: {self.status} after {len(self.moves) + 1} plies")
