"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

from uuid import UUID

from loguru import logger

from src.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    ResetGameRequest,
    UndoMoveRequest,
)
from src.chess.game import Game
from src.core.exceptions import RepositoryError, RuleViolationError
from src.db.repository import GameRepository


class ChessService:
    """Orchestration of layers for chess game.

    NOTE: every request rebuilds its own Game (and thus its own Board) from the stored model,
    so concurrent requests never share a mutable board.
    """

    def __init__(self, repository: GameRepository) -> None:
        self.repo = repository

    # -- API routes logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position."""
        new_game = Game.new_game()
        _, game_id = self.repo.create_game(new_game.to_model())
        logger.info(f"Created game {game_id}")
        return self._create_game_response(game_id, new_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = self._load_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal moves for the side to move: of one piece if a square is given, otherwise of all pieces."""
        game = self._load_game(request.game_id)
        moves = (
            game.legal_moves_for(request.square)
            if request.square
            else game.legal_moves()
        )
        return LegalMovesResponse(
            game_id=request.game_id,
            color=game.current_player,
            legal_moves=[move.to_uci() for move in moves],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """Make a move attempt. Rule violations propagate to the caller untouched."""
        game = self._load_game(request.game_id)
        try:
            game.make_move(request.from_square, request.to_square)
        except RuleViolationError as exc:
            logger.warning(
                f"Rejected move {request.from_square}{request.to_square} in game {request.game_id}: {exc.kind}"
            )
            raise

        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def undo_move(self, request: UndoMoveRequest) -> GameResponse:
        """Take back the last move (no-op on a game without moves)."""
        game = self._load_game(request.game_id)
        if game.undo_move():
            self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def reset_game(self, request: ResetGameRequest) -> GameResponse:
        game = self._load_game(request.game_id)
        game.reset()
        self.repo.update_game(request.game_id, game.to_model())
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        if self.repo.delete_game(request.game_id) is None:
            raise RepositoryError(f"Game with game_id={request.game_id} not found.")
        logger.info(f"Deleted game {request.game_id}")

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game's state into a GameResponse (for game with given ID.)"""
        state = game.get_game_state()
        return GameResponse(
            game_id=game_id,
            current_player=state.current_player,
            status=state.status,
            winner=state.winner,
            is_check=state.is_check,
            move_history=[move.notation for move in state.move_history],
            moves_uci=[move.to_uci() for move in state.move_history],
            captured_pieces=[piece.to_fen() for piece in state.captured_pieces],
            board=game.board.to_fen(),
        )

    def _load_game(self, game_id: UUID) -> Game:
        """Attempt to find the game in the repository (and raise error if it fails), then rebuild it."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise RepositoryError(f"Game with {game_id=} not found.")
        return Game.from_model(game_model)
