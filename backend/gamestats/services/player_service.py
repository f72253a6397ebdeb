from typing import List, Optional, Union

from flask import current_app
from sqlalchemy.exc import IntegrityError

from gamestats import db
from gamestats.errors import (
    MissingRequiredField,
    RelatedResourceNotFound,
    ResourceNotFound,
    ValidationFailure,
)
from gamestats.models import (
    ParticipationRecord,
    PlayerRecord,
    UserRecord,
    game_storyteller,
    game_winning_player,
)
from gamestats.services.games.entities import Player, User
from gamestats.services.games.locking import commit_or_rollback
from gamestats.services.mapping import player_to_domain, user_to_domain


def resolve_player(session, player: Player, role: str = 'Player') -> PlayerRecord:
    record = session.get(PlayerRecord, player.id) if player.id is not None else None
    if record is None:
        raise RelatedResourceNotFound(
            f'{role} with id {player.id} does not exist', {'kind': role, 'id': player.id}
        )
    return record


class OwnerTaken(ValidationFailure):
    def __init__(self, user_id):
        super().__init__('owner', 'User already has a player', {'user_id': user_id})


class PlayerService:
    """Players take part in games. A player may be owned by a user account;
    a user owns at most one player."""

    def __init__(self, session=None):
        self.session = session if session is not None else db.session

    def create_user(self, name: str) -> User:
        if name is None or not name.strip():
            raise MissingRequiredField('name')
        record = UserRecord(username=name)
        self.session.add(record)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise ValidationFailure('name', f'User name "{name}" is already taken') from exc
        except Exception:
            self.session.rollback()
            raise
        return user_to_domain(record)

    def create_player(self, name: Optional[str] = None, owner: Union[User, int, None] = None) -> Player:
        """Create a player named ``name`` or owned by ``owner`` (a ``User`` or
        a user id)."""
        owner_record = self._owner_record(owner)
        # Validates the name rules before anything is written
        Player(None, name, user_to_domain(owner_record))
        if owner_record is not None and owner_record.player is not None:
            raise OwnerTaken(owner_record.id)
        record = PlayerRecord(name=name, owner=owner_record)
        self.session.add(record)
        self._commit(owner_record)
        current_app.logger.info(f"[player-create] player={record.id} owned={owner_record is not None}")
        return player_to_domain(record)

    def get_player(self, player_id) -> Player:
        record = self.session.get(PlayerRecord, player_id)
        if record is None:
            raise ResourceNotFound('Player', player_id)
        return player_to_domain(record)

    def player_exists(self, player_id) -> bool:
        return self.session.get(PlayerRecord, player_id) is not None

    def get_all_players(self, skip_invalid: bool = False) -> List[Player]:
        players = []
        for record in self.session.query(PlayerRecord).order_by(PlayerRecord.id).all():
            try:
                players.append(player_to_domain(record))
            except ValidationFailure as exc:
                if not skip_invalid:
                    raise
                current_app.logger.warning(f"[stats-skip] player={record.id} error={exc.error_code} field={exc.field}")
        return players

    def rename_player(self, player_id, name: str) -> Player:
        """Change the stored name. Owned players keep showing their owner's
        name."""
        record = self.session.get(PlayerRecord, player_id)
        if record is None:
            raise ResourceNotFound('Player', player_id)
        player = player_to_domain(record)
        player.name = name
        record.name = player.stored_name
        commit_or_rollback(self.session)
        return player_to_domain(record)

    def update_player(self, player: Player) -> Player:
        """Store the name and owner of ``player``."""
        record = self.session.get(PlayerRecord, player.id) if player.id is not None else None
        if record is None:
            raise ResourceNotFound('Player', player.id)
        if player.owner is None and (player.stored_name is None or not player.stored_name.strip()):
            raise MissingRequiredField('name')
        owner_record = self._owner_record(player.owner)
        if owner_record is not None and owner_record.player is not None and owner_record.player.id != record.id:
            raise OwnerTaken(owner_record.id)
        record.name = player.stored_name
        record.owner = owner_record
        self._commit(owner_record)
        current_app.logger.info(f"[player-update] player={record.id} owner={record.owner_id}")
        return player_to_domain(record)

    def delete_player(self, player_id) -> None:
        """Delete a player. Their seats stay in the recorded games without a
        player, and they are dropped from storytellers and explicit winners.
        Unknown ids are ignored."""
        record = self.session.get(PlayerRecord, player_id)
        if record is None:
            return
        try:
            self.session.query(ParticipationRecord).filter(ParticipationRecord.player_id == player_id).update(
                {ParticipationRecord.player_id: None}, synchronize_session='fetch'
            )
            for table in (game_storyteller, game_winning_player):
                self.session.execute(table.delete().where(table.c.player_id == player_id))
            record.owner = None
            self.session.delete(record)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        current_app.logger.info(f"[player-delete] player={player_id}")

    def _owner_record(self, owner) -> Optional[UserRecord]:
        if owner is None:
            return None
        owner_id = owner.id if isinstance(owner, User) else owner
        owner_record = self.session.get(UserRecord, owner_id)
        if owner_record is None:
            raise RelatedResourceNotFound(
                f'User with id {owner_id} does not exist', {'kind': 'User', 'id': owner_id}
            )
        return owner_record

    def _commit(self, owner_record) -> None:
        try:
            self.session.commit()
        except IntegrityError as exc:
            # owner_id is unique; a concurrent writer claimed the same user
            self.session.rollback()
            if owner_record is None:
                raise
            raise OwnerTaken(owner_record.id) from exc
        except Exception:
            self.session.rollback()
            raise
