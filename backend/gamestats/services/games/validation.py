"""Consistency rules for game records.

``validate_game_fields`` runs the rules in a fixed order and raises the first
violation, so the same bad input always yields the same error:

1. no player participates twice
2. a winner specification is present (an alignment beats an explicit list)
3. explicit winners are non-null, unique and took part in the game
4. storytellers are non-null and unique
5. the description fits the configured length
6. name and participant list are present

Collections that are ``None`` count as empty for rules 1-5 so that rule 6 is
the one reporting them.
"""

from typing import NamedTuple, Optional, Tuple, Union

from gamestats.errors import (
    DuplicateParticipant,
    DuplicateStoryteller,
    DuplicateWinner,
    FieldTooLong,
    MissingRequiredField,
    MissingWinnerSpecification,
    NullArgument,
    UnknownWinner,
    ValidationFailure,
)
from .entities import (
    Alignment,
    ByAlignment,
    ByExplicitList,
    Player,
    PlayerParticipation,
    player_key,
)

MAX_DESCRIPTION_LENGTH = 5000

WinnerSpec = Union[ByAlignment, ByExplicitList]


class GameFields(NamedTuple):
    participants: Tuple[PlayerParticipation, ...]
    winner: WinnerSpec
    storytellers: Tuple[Player, ...]


def require_field(field: str, value) -> None:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingRequiredField(field)


def check_max_length(field: str, value: Optional[str], max_length: int) -> None:
    if value is not None and len(value) > max_length:
        raise FieldTooLong(field, max_length)


def check_participants(participants) -> Tuple[PlayerParticipation, ...]:
    copied = tuple(participants) if participants is not None else ()
    if any(p is None for p in copied):
        raise NullArgument('participants')
    seen = set()
    for participation in copied:
        if participation.player is None:
            continue
        key = player_key(participation.player)
        if key in seen:
            raise DuplicateParticipant(participation.player.id)
        seen.add(key)
    return copied


def participant_keys(participants) -> set:
    return {player_key(p.player) for p in participants if p.player is not None}


def check_winner(participants, winning_alignment: Optional[Alignment], winning_players) -> WinnerSpec:
    if winning_alignment is not None:
        try:
            return ByAlignment(Alignment(winning_alignment))
        except ValueError:
            raise ValidationFailure(
                'winning_alignment', f'Unknown alignment {winning_alignment!r}'
            ) from None
    if winning_players is None:
        raise MissingWinnerSpecification()

    winners = tuple(winning_players)
    if any(w is None for w in winners):
        raise NullArgument('winning_players')
    seen = set()
    for winner in winners:
        key = player_key(winner)
        if key in seen:
            raise DuplicateWinner(winner.id)
        seen.add(key)
    known = participant_keys(participants)
    for winner in winners:
        if player_key(winner) not in known:
            raise UnknownWinner(winner.id)
    return ByExplicitList(winners)


def check_storytellers(storytellers) -> Tuple[Player, ...]:
    copied = tuple(storytellers) if storytellers is not None else ()
    if any(s is None for s in copied):
        raise NullArgument('storytellers')
    seen = set()
    for storyteller in copied:
        key = player_key(storyteller)
        if key in seen:
            raise DuplicateStoryteller(storyteller.id)
        seen.add(key)
    return copied


def validate_game_fields(
    name,
    participants,
    winning_alignment=None,
    winning_players=None,
    storytellers=None,
    description=None,
    max_description_length: int = MAX_DESCRIPTION_LENGTH,
) -> GameFields:
    checked_participants = check_participants(participants)
    winner = check_winner(checked_participants, winning_alignment, winning_players)
    checked_storytellers = check_storytellers(storytellers)
    check_max_length('description', description, max_description_length)
    require_field('name', name)
    require_field('participants', participants)
    return GameFields(checked_participants, winner, checked_storytellers)
