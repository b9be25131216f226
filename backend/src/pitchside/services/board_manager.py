"""In-memory registry of active tactics boards."""

import logging
import threading
import time
from contextlib import contextmanager
from typing import Iterator, Optional

from pitchside.config import Settings, get_settings
from pitchside.errors import SessionNotFound
from pitchside.models.chemistry import ChemistryInputs
from pitchside.models.formation import Formation
from pitchside.models.player import Player
from pitchside.services.tactics_board import TacticsBoard

logger = logging.getLogger(__name__)


class BoardManager:
    """Keeps boards keyed by id and expires the ones left idle.

    Each board gets its own lock; the registry lock is only held while the
    dictionaries are touched.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.boards: dict[str, TacticsBoard] = {}
        self._boards_lock = threading.Lock()
        self._board_locks: dict[str, threading.Lock] = {}
        self._cleanup_lock = threading.Lock()
        self._last_cleanup = 0.0

    def create_board(
        self,
        formation: Formation,
        roster: list[Player],
        chemistry_inputs: Optional[ChemistryInputs] = None,
    ) -> TacticsBoard:
        """Create and register a new board.

        Args:
            formation: Starting formation (bindings may be empty)
            roster: Players available to this board
            chemistry_inputs: Relationship, mentoring and familiarity records

        Returns:
            The created TacticsBoard
        """
        self.prune_expired()
        board = TacticsBoard(formation, roster, chemistry_inputs, settings=self.settings)
        with self._boards_lock:
            self.boards[board.id] = board
            self._board_locks[board.id] = threading.Lock()
        logger.info(f"Board {board.id} created with formation {formation.name}")
        return board

    def get_board(self, board_id: str) -> Optional[TacticsBoard]:
        """Get a board by ID, refreshing its idle timer."""
        self.prune_expired()
        with self._boards_lock:
            board = self.boards.get(board_id)
        if board is not None:
            board.last_access = time.time()
        return board

    @contextmanager
    def locked(self, board_id: str) -> Iterator[TacticsBoard]:
        """Fetch a board and hold its lock for the duration of the block.

        Raises:
            SessionNotFound: unknown or expired board id
        """
        board = self.get_board(board_id)
        if board is None:
            raise SessionNotFound(board_id)
        with self._boards_lock:
            lock = self._board_locks.setdefault(board_id, threading.Lock())
        with lock:
            yield board

    def remove_board(self, board_id: str) -> bool:
        """Remove a board; returns False if it did not exist."""
        with self._boards_lock:
            self._board_locks.pop(board_id, None)
            removed = self.boards.pop(board_id, None) is not None
        if removed:
            logger.info(f"Board {board_id} removed")
        return removed

    def prune_expired(self, now: Optional[float] = None) -> list[str]:
        """Remove idle boards opportunistically; returns the removed ids."""
        now = now or time.time()
        if now - self._last_cleanup < self.settings.board_cleanup_interval_seconds:
            return []

        with self._cleanup_lock:
            if now - self._last_cleanup < self.settings.board_cleanup_interval_seconds:
                return []

            expired: list[str] = []
            with self._boards_lock:
                for board_id, board in self.boards.items():
                    lock = self._board_locks.get(board_id)
                    if lock and lock.locked():
                        continue
                    if now - board.last_access >= self.settings.board_ttl_seconds:
                        expired.append(board_id)
                for board_id in expired:
                    self.boards.pop(board_id, None)
                    self._board_locks.pop(board_id, None)

            self._last_cleanup = now

        if expired:
            logger.info(f"Expired {len(expired)} idle boards")
        return expired

    def list_boards(self) -> list[dict]:
        """List all active boards (for debugging)."""
        with self._boards_lock:
            boards = list(self.boards.values())
        return [
            {
                "id": b.id,
                "formation": b.formation.name,
                "bound_players": len(b.formation.bound_player_ids),
                "last_access": b.last_access,
            }
            for b in boards
        ]
