"""Per-player statistics folded from the game history.

A game counts for a player if they storytold it or sat in it. Storytelling
takes precedence: when the player is among a game's storytellers, the game
adds to ``times_storyteller`` and ``total_games_played`` and nothing else,
even if the player also has a seat in that game.

The fold keeps no state across games, so partial results over any split of
the history can be merged in any order (``PlayerStatistics.merge``). That is
what ``compute_player_statistics_parallel`` does.
"""

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, Iterable, List, Optional

from .entities import Alignment, Character, CharacterType, Player, player_key
from .game import GameData


class PlayerStatistics:
    def __init__(self, player: Player):
        if player is None:
            raise ValueError('player may not be None')
        self.player = player
        self.total_games_played = 0
        self.total_wins = 0
        self.times_storyteller = 0
        self.times_dead_at_end = 0
        self.times_good = 0
        self.times_evil = 0
        self.character_type_counts: Counter = Counter()
        self.character_playing_counts: Counter = Counter()

    def add_game(self, game: GameData) -> None:
        if game.is_storyteller(self.player):
            self.times_storyteller += 1
            self.total_games_played += 1
            return

        participation = game.participation_of(self.player)
        if participation is None:
            return

        self.total_games_played += 1
        if game.is_winner(self.player):
            self.total_wins += 1
        if not participation.alive_at_end:
            self.times_dead_at_end += 1
        if participation.end_alignment == Alignment.GOOD:
            self.times_good += 1
        elif participation.end_alignment == Alignment.EVIL:
            self.times_evil += 1

        start = participation.initial_character
        end = participation.end_character
        if start is not None:
            self.character_playing_counts[start] += 1
            self.character_type_counts[start.character_type] += 1
        if end is not None and end != start:
            self.character_playing_counts[end] += 1
            self.character_type_counts[end.character_type] += 1

    def merge(self, other: 'PlayerStatistics') -> 'PlayerStatistics':
        """Combine two partial results for the same player into a new one."""
        if player_key(other.player) != player_key(self.player):
            raise ValueError('cannot merge statistics of different players')
        merged = PlayerStatistics(self.player)
        for counter in _COUNTERS:
            setattr(merged, counter, getattr(self, counter) + getattr(other, counter))
        merged.character_type_counts = self.character_type_counts + other.character_type_counts
        merged.character_playing_counts = self.character_playing_counts + other.character_playing_counts
        return merged

    def type_count(self, character_type: CharacterType) -> int:
        return self.character_type_counts.get(character_type, 0)

    def playing_count(self, character: Character) -> int:
        return self.character_playing_counts.get(character, 0)

    def to_dict(self) -> Dict:
        return {
            'player_id': self.player.id,
            'player_name': self.player.name,
            'total_games_played': self.total_games_played,
            'total_wins': self.total_wins,
            'times_storyteller': self.times_storyteller,
            'times_dead_at_end': self.times_dead_at_end,
            'times_good': self.times_good,
            'times_evil': self.times_evil,
            'character_type_counts': {t.value: n for t, n in sorted(
                self.character_type_counts.items(), key=lambda item: item[0].value)},
            'character_playing_counts': [
                {'character_id': c.id, 'name': c.name, 'count': n}
                for c, n in sorted(self.character_playing_counts.items(), key=lambda item: (item[0].name, item[0].id or 0))
            ],
        }

    def _counts(self):
        return (
            tuple(getattr(self, counter) for counter in _COUNTERS),
            dict(self.character_type_counts),
            dict(self.character_playing_counts),
        )

    def __eq__(self, other):
        if not isinstance(other, PlayerStatistics):
            return NotImplemented
        return player_key(self.player) == player_key(other.player) and self._counts() == other._counts()

    __hash__ = None

    def __repr__(self):
        return f'PlayerStatistics(player={self.player!r}, games={self.total_games_played}, wins={self.total_wins})'


_COUNTERS = (
    'total_games_played',
    'total_wins',
    'times_storyteller',
    'times_dead_at_end',
    'times_good',
    'times_evil',
)


def compute_player_statistics(player: Player, games: Iterable[GameData]) -> PlayerStatistics:
    statistics = PlayerStatistics(player)
    for game in games:
        statistics.add_game(game)
    return statistics


def compute_player_statistics_parallel(
    player: Player, games: Iterable[GameData], workers: int = 4, chunk_size: Optional[int] = None
) -> PlayerStatistics:
    """Same result as ``compute_player_statistics``, folded in chunks on a
    thread pool and merged afterwards."""
    history: List[GameData] = list(games)
    if workers <= 1 or len(history) < 2:
        return compute_player_statistics(player, history)

    size = chunk_size or max(1, -(-len(history) // workers))
    chunks = [history[i:i + size] for i in range(0, len(history), size)]
    with ThreadPoolExecutor(max_workers=workers) as pool:
        partials = list(pool.map(lambda chunk: compute_player_statistics(player, chunk), chunks))

    result = PlayerStatistics(player)
    for partial in partials:
        result = result.merge(partial)
    return result
