import json

import click

from gamestats import db
from gamestats.errors import GameStatsError
from gamestats.services.character_service import CharacterService
from gamestats.services.game_service import GameService
from gamestats.services.games.entities import (
    Alignment,
    CharacterCreationRequest,
    CharacterType,
    PlayerParticipation,
    ScriptCreationRequest,
)
from gamestats.services.games.game import GameCreationRequest
from gamestats.services.player_service import PlayerService
from gamestats.services.script_service import ScriptService
from gamestats.services.stat_service import StatService

SEED_CHARACTERS = [
    ('Washerwoman', CharacterType.TOWNSFOLK),
    ('Empath', CharacterType.TOWNSFOLK),
    ('Butler', CharacterType.OUTSIDER),
    ('Poisoner', CharacterType.MINION),
    ('Imp', CharacterType.DEMON),
]


def seed_database():
    """Store a small example history: five characters, one script, four
    players and one game."""
    characters = CharacterService().create_characters(
        [CharacterCreationRequest(name, character_type) for name, character_type in SEED_CHARACTERS]
    )
    script = ScriptService().create_script(ScriptCreationRequest('Trouble Brewing', frozenset(characters)))
    players = PlayerService()
    alice, bob, cara, dan = (players.create_player(name) for name in ('Alice', 'Bob', 'Cara', 'Dan'))
    washerwoman, empath, _butler, _poisoner, imp = characters
    GameService().create_game(GameCreationRequest(
        'Seed game',
        script,
        [
            PlayerParticipation.of(alice, washerwoman, alive_at_end=True),
            PlayerParticipation.of(bob, empath, alive_at_end=False),
            PlayerParticipation.of(cara, imp, alive_at_end=False),
        ],
        winning_alignment=Alignment.GOOD,
        storytellers=[dan],
    ))


def register_commands(flask_app):
    @flask_app.cli.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        db.drop_all()
        db.create_all()
        seed_database()
        click.echo('Database has been reset and seeded!')

    @flask_app.cli.command('player-stats')
    @click.option('--player-id', type=int, default=None, help='Only show this player.')
    def player_stats_command(player_id):
        """Prints player statistics as JSON."""
        stats = StatService()
        try:
            if player_id is None:
                payload = [s.to_dict() for s in stats.get_all_player_statistics()]
            else:
                payload = stats.get_player_statistics(player_id).to_dict()
        except GameStatsError as exc:
            flask_app.logger.warning(f"[player-stats] player={player_id} error={exc.error_code}")
            raise click.ClickException(exc.message)
        click.echo(json.dumps(payload, indent=2))
