from typing import List, Optional

from flask import current_app

from gamestats import db
from gamestats.errors import MissingRequiredField, ResourceNotFound, ValidationFailure
from gamestats.models import GameRecord, ParticipationRecord
from gamestats.services.character_service import resolve_character
from gamestats.services.games.game import Game, GameData, GameCreationRequest
from gamestats.services.games.locking import commit_or_rollback, optimistic_write
from gamestats.services.games.validation import MAX_DESCRIPTION_LENGTH, check_max_length
from gamestats.services.mapping import game_to_domain
from gamestats.services.player_service import resolve_player
from gamestats.services.script_service import resolve_script


class GameService:
    """Stores and loads games. Consistency is checked by the domain objects;
    this layer adds the checks that need the database: referenced scripts,
    characters and players must exist, and updates must be based on the
    stored version."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    @property
    def max_description_length(self) -> int:
        return int(current_app.config.get('MAX_DESCRIPTION_LENGTH', MAX_DESCRIPTION_LENGTH))

    def create_game(self, request: GameCreationRequest) -> Game:
        self._check_storable(request)
        record = GameRecord()
        self._fill_record(record, request)
        self.session.add(record)
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        current_app.logger.info(
            f"[game-create] game={record.id} participants={len(record.participants)} storytellers={len(record.storytellers)}"
        )
        return self._to_domain(record)

    def get_game(self, game_id) -> Optional[Game]:
        return self._to_domain(self.session.get(GameRecord, game_id))

    def get_all_games(self, skip_invalid: bool = False) -> List[Game]:
        """All stored games. With ``skip_invalid`` a record that no longer
        forms a consistent game is logged and left out instead of raising."""
        games = []
        for record in self.session.query(GameRecord).order_by(GameRecord.id).all():
            try:
                games.append(self._to_domain(record))
            except ValidationFailure as exc:
                if not skip_invalid:
                    raise
                current_app.logger.warning(f"[stats-skip] game={record.id} error={exc.error_code} field={exc.field}")
        return games

    def update_game(self, game: Game) -> Game:
        if game.id is None:
            raise ResourceNotFound('Game', None)
        self._check_storable(game)
        with optimistic_write(self.session, GameRecord, game.id, game.version) as record:
            self._fill_record(record, game)
        current_app.logger.info(f"[game-update] game={record.id} version={record.version}")
        return self._to_domain(record)

    def delete_game(self, game_id) -> None:
        """Delete a game. Deleting an unknown id does nothing."""
        record = self.session.get(GameRecord, game_id)
        if record is None:
            return
        self.session.delete(record)
        commit_or_rollback(self.session)
        current_app.logger.info(f"[game-delete] game={game_id}")

    def _check_storable(self, game: GameData) -> None:
        # Stored games need a script and must fit the configured description limit
        if game.script is None:
            raise MissingRequiredField('script')
        check_max_length('description', game.description, self.max_description_length)

    def _fill_record(self, record: GameRecord, game: GameData) -> None:
        # Resolve every reference before touching the record so a missing one
        # leaves it unchanged.
        script = resolve_script(self.session, game.script)
        participants = []
        for position, participation in enumerate(game.participants):
            participants.append(ParticipationRecord(
                position=position,
                player=resolve_player(self.session, participation.player) if participation.player else None,
                initial_character=resolve_character(self.session, participation.initial_character),
                initial_alignment=participation.initial_alignment,
                end_character=resolve_character(self.session, participation.end_character),
                end_alignment=participation.end_alignment,
                alive_at_end=participation.alive_at_end,
            ))
        storytellers = [resolve_player(self.session, p, 'Storyteller') for p in game.storytellers]
        winners = []
        if game.winning_alignment is None:
            winners = [resolve_player(self.session, p) for p in game.explicit_winners]

        record.name = game.name
        record.description = game.description
        record.script = script
        record.winning_alignment = game.winning_alignment
        record.winning_players = winners
        record.storytellers = storytellers
        record.participants = participants

    def _to_domain(self, record) -> Optional[Game]:
        return game_to_domain(record, self.max_description_length)
