"""Title collection management with Steam shortcut synchronization."""
from __future__ import annotations

import logging
from typing import List, Optional

from .config import ConfigStore
from .errors import FaugusError
from .models import Game
from .shortcuts import ShortcutSynchronizer

_LOGGER = logging.getLogger(__name__)


class TitleLibrary:
    """Persist and mutate the configured titles.

    Every mutation rewrites games.json as a whole and then refreshes the
    Steam shortcuts. A failed sync is raised after the titles are saved.
    """

    def __init__(self, store: Optional[ConfigStore] = None, synchronizer: Optional[ShortcutSynchronizer] = None):
        self.store = store or ConfigStore()
        self.synchronizer = synchronizer
        self.settings = self.store.load_global()
        self._games = self.store.load_titles(legacy=self.settings.legacy_compat)

    # ----- Persistence -------------------------------------------------
    def reload(self) -> None:
        self.settings = self.store.load_global()
        self._games = self.store.load_titles(legacy=self.settings.legacy_compat)

    def _commit(self, games: List[Game]) -> None:
        """Write ``games`` and adopt them only once the document is on disk."""
        self.store.save_titles(games, legacy=self.settings.legacy_compat)
        self._games = games
        self.sync_shortcuts()

    def sync_shortcuts(self) -> bool:
        if self.synchronizer is None:
            return False
        try:
            return self.synchronizer.sync(self._games)
        except FaugusError as exc:
            _LOGGER.error("Steam shortcut sync failed: %s", exc)
            raise

    # ----- Game access -------------------------------------------------
    @property
    def games(self) -> List[Game]:
        return list(self._games)

    def visible(self) -> List[Game]:
        if self.settings.show_hidden:
            return self.games
        return [g for g in self._games if not g.hidden]

    def by_id(self, game_id: str) -> Optional[Game]:
        for game in self._games:
            if game.gameid == game_id:
                return game
        return None

    def add(self, game: Game) -> None:
        if self.by_id(game.gameid) is not None:
            raise ValueError(f"duplicate game id: {game.gameid}")
        self._commit(self._games + [game])

    def update(self, updated: Game) -> None:
        for idx, game in enumerate(self._games):
            if game.gameid == updated.gameid:
                games = list(self._games)
                games[idx] = updated
                self._commit(games)
                return
        raise KeyError(updated.gameid)

    def remove(self, game_id: str) -> None:
        remaining = [g for g in self._games if g.gameid != game_id]
        if len(remaining) == len(self._games):
            raise KeyError(game_id)
        self._commit(remaining)

    def duplicate(self, game_id: str) -> Game:
        original = self.by_id(game_id)
        if original is None:
            raise KeyError(game_id)
        copy = original.duplicate()
        self.add(copy)
        return copy

    def set_hidden(self, game_id: str, hidden: bool) -> None:
        game = self.by_id(game_id)
        if game is None:
            raise KeyError(game_id)
        self.update(game.clone(hidden=hidden))


__all__ = ["TitleLibrary"]
