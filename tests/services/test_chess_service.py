"""Unit tests for src/services/chess_service.py"""

from typing import Generator
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from src.core.exceptions import (
    GameError,
    GameOverError,
    IllegalMoveError,
    NotYourTurnError,
    RepositoryError,
)
from src.core.models import GameModel
from src.core.shared_types import Color, Status
from src.db.sql_repository import SQLGameRepository
from src.services.chess_service import (
    ChessService,
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

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
FOOLS_MATE = [("f2", "f3"), ("e7", "e5"), ("g2", "g4"), ("d8", "h4")]


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        game_id = uuid4()
        self._games[game_id] = game
        return game, game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        return self._games.get(game_id)

    def update_game(self, game_id: UUID, game: GameModel) -> GameModel | None:
        """Add new info to existing record."""
        if game_id not in self._games:
            return None
        self._games[game_id] = game
        return game

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        return self._games.pop(game_id, None)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()


@pytest.fixture
def service(mock_repository: MockRepository) -> ChessService:
    return ChessService(mock_repository)


def new_game_id(service: ChessService) -> UUID:
    return service.create_new_game(CreateGameRequest()).game_id


def move(service: ChessService, game_id: UUID, from_square: str, to_square: str) -> GameResponse:
    return service.make_move(
        MoveRequest(game_id=game_id, from_square=from_square, to_square=to_square)
    )


# --- SERVICE - CREATE NEW GAME ----
def test_create_a_new_game(service: ChessService, mock_repository: MockRepository) -> None:
    """Check that new game is created, persisted in repo, and return has the appropriate information."""
    response = service.create_new_game(CreateGameRequest())

    assert isinstance(response, GameResponse)
    assert isinstance(response.game_id, UUID)
    assert response.current_player == Color.WHITE
    assert response.status == Status.IN_PROGRESS
    assert response.winner is None
    assert not response.is_check
    assert response.move_history == []
    assert response.captured_pieces == []
    assert response.board == STARTING_POSITION_FEN

    stored_game = mock_repository.get_game(response.game_id)
    assert stored_game == GameModel(moves_uci=[], status="in progress", winner=None)


# --- SERVICE - GET GAME ----
def test_get_game_state(service: ChessService) -> None:
    game_id = new_game_id(service)
    move(service, game_id, "e2", "e4")
    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.current_player == Color.BLACK
    assert response.move_history == ["e4"]
    assert response.moves_uci == ["e2e4"]


def test_get_unknown_game(service: ChessService) -> None:
    with pytest.raises(RepositoryError):
        service.get_game_state(GetGameRequest(game_id=uuid4()))


# --- SERVICE - LEGAL MOVES ----
def test_legal_moves_all_pieces(service: ChessService) -> None:
    game_id = new_game_id(service)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id))
    assert isinstance(response, LegalMovesResponse)
    assert response.color == Color.WHITE
    assert len(response.legal_moves) == 20


def test_legal_moves_single_square(service: ChessService) -> None:
    game_id = new_game_id(service)
    response = service.legal_moves(LegalMovesRequest(game_id=game_id, square="b1"))
    assert sorted(response.legal_moves) == ["b1a3", "b1c3"]


# --- SERVICE - MAKE MOVE ----
def test_make_move_is_persisted(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    response = move(service, game_id, "g1", "f3")

    assert response.move_history == ["Nf3"]
    assert response.current_player == Color.BLACK
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.moves_uci == ["g1f3"]


def test_capture_shows_up_in_response(service: ChessService) -> None:
    game_id = new_game_id(service)
    for from_square, to_square in [("e2", "e4"), ("d7", "d5")]:
        move(service, game_id, from_square, to_square)
    response = move(service, game_id, "e4", "d5")
    assert response.captured_pieces == ["p"]
    assert response.move_history[-1] == "xd5"


@pytest.mark.parametrize(
    "from_square, to_square, error",
    [("e2", "e5", IllegalMoveError), ("e7", "e5", NotYourTurnError)],
)
def test_rejected_moves_propagate(
    service: ChessService,
    mock_repository: MockRepository,
    from_square: str,
    to_square: str,
    error: type[GameError],
) -> None:
    """The service does not hide the specific rule that got broken, and stores nothing."""
    game_id = new_game_id(service)
    with pytest.raises(error):
        move(service, game_id, from_square, to_square)
    stored = mock_repository.get_game(game_id)
    assert stored is not None
    assert stored.moves_uci == []


def test_checkmate_through_the_service(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    for from_square, to_square in FOOLS_MATE:
        response = move(service, game_id, from_square, to_square)

    assert response.status == Status.CHECKMATE
    assert response.winner == Color.BLACK
    assert response.is_check
    assert mock_repository.get_game(game_id) == GameModel(
        moves_uci=["f2f3", "e7e5", "g2g4", "d8h4"], status="checkmate", winner="black"
    )
    with pytest.raises(GameOverError):
        move(service, game_id, "e2", "e4")


# --- SERVICE - UNDO / RESET ----
def test_undo_move(service: ChessService) -> None:
    game_id = new_game_id(service)
    move(service, game_id, "e2", "e4")
    response = service.undo_move(UndoMoveRequest(game_id=game_id))
    assert response.moves_uci == []
    assert response.current_player == Color.WHITE
    assert response.board == STARTING_POSITION_FEN


def test_undo_on_fresh_game(service: ChessService) -> None:
    game_id = new_game_id(service)
    response = service.undo_move(UndoMoveRequest(game_id=game_id))
    assert response.moves_uci == []


def test_reset_game(service: ChessService) -> None:
    game_id = new_game_id(service)
    for from_square, to_square in FOOLS_MATE:
        move(service, game_id, from_square, to_square)
    response = service.reset_game(ResetGameRequest(game_id=game_id))
    assert response.status == Status.IN_PROGRESS
    assert response.moves_uci == []
    assert response.board == STARTING_POSITION_FEN


# --- SERVICE - DELETE ----
def test_delete_game(service: ChessService, mock_repository: MockRepository) -> None:
    game_id = new_game_id(service)
    service.delete_game(DeleteGameRequest(game_id=game_id))
    assert mock_repository.get_game(game_id) is None
    with pytest.raises(RepositoryError):
        service.delete_game(DeleteGameRequest(game_id=game_id))


# --- SERVICE + SQL REPOSITORY ----
def test_full_stack_with_sql_repository(db_session_repo: Session) -> None:
    service = ChessService(SQLGameRepository(db_session_repo))
    game_id = new_game_id(service)
    for from_square, to_square in [("e2", "e4"), ("e7", "e5")]:
        move(service, game_id, from_square, to_square)

    response = service.get_game_state(GetGameRequest(game_id=game_id))
    assert response.moves_uci == ["e2e4", "e7e5"]
    assert response.current_player == Color.WHITE
