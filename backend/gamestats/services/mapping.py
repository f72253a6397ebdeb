"""Conversion between database records and domain objects.

Record -> domain conversions validate (they go through the domain
constructors), so a record that was written inconsistently surfaces as a
``ValidationFailure`` here rather than later.
"""

from gamestats.services.games.entities import (
    Character,
    Player,
    PlayerParticipation,
    Script,
    User,
)
from gamestats.services.games.game import Game
from gamestats.services.games.validation import MAX_DESCRIPTION_LENGTH


def user_to_domain(record):
    if record is None:
        return None
    return User(record.id, record.username)


def player_to_domain(record):
    if record is None:
        return None
    return Player(record.id, record.name, user_to_domain(record.owner))


def character_to_domain(record):
    if record is None:
        return None
    return Character(
        id=record.id,
        version=record.version,
        name=record.name,
        character_type=record.character_type,
        script_tool_identifier=record.script_tool_identifier,
        wiki_page=record.wiki_page,
        image_url=record.image_url,
    )


def script_to_domain(record):
    if record is None:
        return None
    return Script(
        record.id,
        record.version,
        record.name,
        [character_to_domain(c) for c in record.characters],
        description=record.description,
        wiki_page=record.wiki_page,
    )


def participation_to_domain(record):
    return PlayerParticipation(
        player=player_to_domain(record.player),
        initial_character=character_to_domain(record.initial_character),
        initial_alignment=record.initial_alignment,
        end_character=character_to_domain(record.end_character),
        end_alignment=record.end_alignment,
        alive_at_end=bool(record.alive_at_end),
    )


def game_to_domain(record, max_description_length=MAX_DESCRIPTION_LENGTH):
    if record is None:
        return None
    return Game(
        record.id,
        record.version,
        record.name,
        script_to_domain(record.script),
        [participation_to_domain(p) for p in record.participants],
        winning_alignment=record.winning_alignment,
        winning_players=None if record.winning_alignment else [player_to_domain(p) for p in record.winning_players],
        description=record.description,
        storytellers=[player_to_domain(p) for p in record.storytellers],
        max_description_length=max_description_length,
    )
