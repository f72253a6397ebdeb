from typing import List

from flask import current_app

from gamestats import db
from gamestats.services.game_service import GameService
from gamestats.services.games.statistics import (
    PlayerStatistics,
    compute_player_statistics,
    compute_player_statistics_parallel,
)
from gamestats.services.player_service import PlayerService


class StatService:
    """Statistics are never stored; every call folds the full game history."""

    def __init__(self, session=None):
        session = session if session is not None else db.session
        self.players = PlayerService(session)
        self.games = GameService(session)

    def get_player_statistics(self, player_id) -> PlayerStatistics:
        player = self.players.get_player(player_id)
        return self._compute(player, self.games.get_all_games(skip_invalid=True))

    def get_all_player_statistics(self) -> List[PlayerStatistics]:
        games = self.games.get_all_games(skip_invalid=True)
        return [self._compute(player, games) for player in self.players.get_all_players(skip_invalid=True)]

    def _compute(self, player, games) -> PlayerStatistics:
        workers = int(current_app.config.get('STATS_WORKERS', 0))
        threshold = int(current_app.config.get('STATS_PARALLEL_THRESHOLD', 500))
        if workers > 1 and len(games) >= threshold:
            return compute_player_statistics_parallel(player, games, workers)
        return compute_player_statistics(player, games)
