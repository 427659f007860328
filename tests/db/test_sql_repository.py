"""Unit tests for src/db/sql_repository.py"""

from uuid import uuid4

from sqlalchemy.orm import Session

from src.core.config import Settings
from src.core.shared_types import Status
from src.db.database import get_db
from src.db.sql_repository import GameModel, SQLGameRepository


def mock_model() -> GameModel:
    return GameModel(
        moves_uci=["e2e4", "e7e5", "g1f3"],
        status=Status.IN_PROGRESS.value,
        winner=None,
    )


def test_create_game(db_session_repo: Session) -> None:
    """Conversion from a GameModel to DBGame for a new entry to the database."""
    model = mock_model()
    repo = SQLGameRepository(db_session_repo)
    record_in_db, _ = repo.create_game(model)
    assert isinstance(record_in_db, GameModel)
    assert record_in_db == model


def test_get_game_by_id(db_session_repo: Session) -> None:
    """Create a game, then fetch it from db."""
    repo = SQLGameRepository(db_session_repo)
    expected_game, game_id = repo.create_game(mock_model())
    game_found = repo.get_game(game_id)
    assert isinstance(game_found, GameModel)
    assert game_found == expected_game


def test_get_unknown_game(db_session_repo: Session) -> None:
    """
    Should return None if ID does not match anything in database.

    NOTE with an empty database, any id is a valid test case.
    """
    repo = SQLGameRepository(db_session_repo)
    assert repo.get_game(uuid4()) is None

    # Now do it with creating a game, but retrieving from the wrong ID
    repo.create_game(mock_model())
    assert repo.get_game(uuid4()) is None


def test_update_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    _, game_id = repo.create_game(GameModel())

    mated = GameModel(
        moves_uci=["f2f3", "e7e5", "g2g4", "d8h4"],
        status=Status.CHECKMATE.value,
        winner="black",
    )
    updated = repo.update_game(game_id, mated)
    assert updated == mated
    assert repo.get_game(game_id) == mated


def test_update_unknown_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    assert repo.update_game(uuid4(), mock_model()) is None


def test_delete_game(db_session_repo: Session) -> None:
    repo = SQLGameRepository(db_session_repo)
    model = mock_model()
    _, game_id = repo.create_game(model)

    assert repo.delete_game(game_id) == model
    assert repo.get_game(game_id) is None
    assert repo.delete_game(game_id) is None


def test_get_db_from_settings(restore_logging: None) -> None:
    """The session generator builds its engine (and tables) from the settings."""
    session_gen = get_db(Settings(database_url="sqlite://"))
    session = next(session_gen)
    try:
        repo = SQLGameRepository(session)
        _, game_id = repo.create_game(mock_model())
        assert repo.get_game(game_id) == mock_model()
    finally:
        session_gen.close()
