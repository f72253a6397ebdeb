from datetime import datetime, timezone

from gamestats import db
from gamestats.services.games.entities import Alignment, CharacterType
from gamestats.services.games.validation import MAX_DESCRIPTION_LENGTH


def _now():
    return datetime.now(timezone.utc)


script_character = db.Table(
    'script_character',
    db.Column('script_id', db.Integer, db.ForeignKey('script.id', ondelete='CASCADE'), primary_key=True),
    db.Column('character_id', db.Integer, db.ForeignKey('character.id', ondelete='CASCADE'), primary_key=True),
)

game_winning_player = db.Table(
    'game_winning_player',
    db.Column('game_id', db.Integer, db.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
    db.Column('player_id', db.Integer, db.ForeignKey('player.id', ondelete='CASCADE'), primary_key=True),
)

game_storyteller = db.Table(
    'game_storyteller',
    db.Column('game_id', db.Integer, db.ForeignKey('game.id', ondelete='CASCADE'), primary_key=True),
    db.Column('player_id', db.Integer, db.ForeignKey('player.id', ondelete='CASCADE'), primary_key=True),
)


class UserRecord(db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    player = db.relationship('PlayerRecord', back_populates='owner', uselist=False)


class PlayerRecord(db.Model):
    __tablename__ = 'player'
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(64), nullable=True)
    owner_id = db.Column(db.Integer, db.ForeignKey('user.id', ondelete='SET NULL'), nullable=True, unique=True)
    owner = db.relationship('UserRecord', back_populates='player')


class CharacterRecord(db.Model):
    __tablename__ = 'character'
    id = db.Column(db.Integer, primary_key=True)
    version = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    script_tool_identifier = db.Column(db.String(128), nullable=True)
    name = db.Column(db.String(128), nullable=False)
    character_type = db.Column(db.Enum(CharacterType, name='character_type'), nullable=False)
    wiki_page = db.Column(db.String(512), nullable=True)
    image_url = db.Column(db.String(512), nullable=True)
    scripts = db.relationship('ScriptRecord', secondary=script_character, back_populates='characters')

    __mapper_args__ = {'version_id_col': version}


class ScriptRecord(db.Model):
    __tablename__ = 'script'
    id = db.Column(db.Integer, primary_key=True)
    version = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    name = db.Column(db.String(128), nullable=False)
    description = db.Column(db.Text, nullable=True)
    wiki_page = db.Column(db.String(512), nullable=True)
    characters = db.relationship('CharacterRecord', secondary=script_character, back_populates='scripts')

    __mapper_args__ = {'version_id_col': version}


class GameRecord(db.Model):
    __tablename__ = 'game'
    id = db.Column(db.Integer, primary_key=True)
    version = db.Column(db.Integer, nullable=False)
    updated_at = db.Column(db.DateTime(timezone=True), default=_now, nullable=False)
    name = db.Column(db.String(256), nullable=False)
    description = db.Column(db.String(MAX_DESCRIPTION_LENGTH), nullable=True)
    script_id = db.Column(db.Integer, db.ForeignKey('script.id', ondelete='SET NULL'), nullable=True)
    # Null when the winners were recorded as an explicit list
    winning_alignment = db.Column(db.Enum(Alignment, name='alignment'), nullable=True)
    script = db.relationship('ScriptRecord')
    participants = db.relationship(
        'ParticipationRecord',
        back_populates='game',
        order_by='ParticipationRecord.position',
        cascade='all, delete-orphan',
    )
    winning_players = db.relationship('PlayerRecord', secondary=game_winning_player)
    storytellers = db.relationship('PlayerRecord', secondary=game_storyteller)

    __mapper_args__ = {'version_id_col': version}


class ParticipationRecord(db.Model):
    __tablename__ = 'participation'
    id = db.Column(db.Integer, primary_key=True)
    game_id = db.Column(db.Integer, db.ForeignKey('game.id', ondelete='CASCADE'), nullable=False)
    position = db.Column(db.Integer, nullable=False, default=0)
    player_id = db.Column(db.Integer, db.ForeignKey('player.id', ondelete='SET NULL'), nullable=True)
    initial_character_id = db.Column(db.Integer, db.ForeignKey('character.id', ondelete='SET NULL'), nullable=True)
    initial_alignment = db.Column(db.Enum(Alignment, name='alignment'), nullable=True)
    end_character_id = db.Column(db.Integer, db.ForeignKey('character.id', ondelete='SET NULL'), nullable=True)
    end_alignment = db.Column(db.Enum(Alignment, name='alignment'), nullable=True)
    alive_at_end = db.Column(db.Boolean, default=True, nullable=False)
    game = db.relationship('GameRecord', back_populates='participants')
    player = db.relationship('PlayerRecord')
    initial_character = db.relationship('CharacterRecord', foreign_keys=[initial_character_id])
    end_character = db.relationship('CharacterRecord', foreign_keys=[end_character_id])
