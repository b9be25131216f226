"""Tests for the board registry."""
import pytest

from pitchside.errors import SessionNotFound
from pitchside.services.board_manager import BoardManager


@pytest.fixture
def manager(settings):
    return BoardManager(settings)


def test_create_and_get(manager, formation, roster, chemistry_inputs):
    board = manager.create_board(formation, roster, chemistry_inputs)
    assert manager.get_board(board.id) is board
    assert manager.list_boards()[0]["bound_players"] == 11


def test_get_unknown_board(manager):
    assert manager.get_board("missing") is None


def test_locked_yields_board(manager, formation, roster):
    board = manager.create_board(formation, roster)
    with manager.locked(board.id) as locked:
        assert locked is board


def test_locked_unknown_board_raises(manager):
    with pytest.raises(SessionNotFound):
        with manager.locked("missing"):
            pass


def test_remove_board(manager, formation, roster):
    board = manager.create_board(formation, roster)
    assert manager.remove_board(board.id)
    assert not manager.remove_board(board.id)
    assert manager.get_board(board.id) is None


def test_prune_expired(manager, formation, roster):
    stale = manager.create_board(formation, roster)
    fresh = manager.create_board(formation, roster)
    fresh.last_access = stale.last_access + 5

    expired = manager.prune_expired(now=stale.last_access + 11)
    assert expired == [stale.id]
    assert stale.id not in manager.boards
    assert fresh.id in manager.boards


def test_prune_respects_cleanup_interval(formation, roster, settings):
    manager = BoardManager(settings.model_copy(update={"board_cleanup_interval_seconds": 600}))
    board = manager.create_board(formation, roster)
    assert manager.prune_expired(now=board.last_access + 11) == []
    assert board.id in manager.boards
