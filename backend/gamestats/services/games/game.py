"""The game record and the request used to create one.

Both validate on construction (see ``validation.validate_game_fields``) and
keep private copies of every collection they are given. A ``Game`` can be
edited afterwards; every edit re-validates the whole record and is applied
only if the result is consistent.
"""

from typing import List, Optional

from .entities import (
    Alignment,
    ByAlignment,
    ByExplicitList,
    Player,
    PlayerParticipation,
    Script,
    player_key,
)
from .validation import MAX_DESCRIPTION_LENGTH, validate_game_fields


class GameData:
    def __init__(
        self,
        name,
        script,
        participants,
        winning_alignment=None,
        winning_players=None,
        description=None,
        storytellers=None,
        max_description_length: int = MAX_DESCRIPTION_LENGTH,
    ):
        fields = validate_game_fields(
            name,
            participants,
            winning_alignment=winning_alignment,
            winning_players=winning_players,
            storytellers=storytellers,
            description=description,
            max_description_length=max_description_length,
        )
        self._name = name
        self._script = script
        self._description = description
        self._participants = fields.participants
        self._winner = fields.winner
        self._storytellers = fields.storytellers
        self._max_description_length = max_description_length

    @property
    def name(self) -> str:
        return self._name

    @property
    def script(self) -> Optional[Script]:
        return self._script

    @property
    def description(self) -> Optional[str]:
        return self._description

    @property
    def participants(self) -> List[PlayerParticipation]:
        return list(self._participants)

    @property
    def storytellers(self) -> List[Player]:
        return list(self._storytellers)

    @property
    def winner(self):
        """``ByAlignment`` or ``ByExplicitList``; never both, never neither."""
        return self._winner

    @property
    def winning_alignment(self) -> Optional[Alignment]:
        if isinstance(self._winner, ByAlignment):
            return self._winner.alignment
        return None

    @property
    def explicit_winners(self) -> Optional[List[Player]]:
        if isinstance(self._winner, ByExplicitList):
            return list(self._winner.players)
        return None

    @property
    def winning_players(self) -> List[Player]:
        """The winners, derived from the end alignments when the game was won
        by an alignment."""
        if isinstance(self._winner, ByAlignment):
            return [
                p.player
                for p in self._participants
                if p.player is not None and p.end_alignment == self._winner.alignment
            ]
        return list(self._winner.players)

    def participation_of(self, player: Player) -> Optional[PlayerParticipation]:
        key = player_key(player)
        for participation in self._participants:
            if participation.player is not None and player_key(participation.player) == key:
                return participation
        return None

    def is_storyteller(self, player: Player) -> bool:
        key = player_key(player)
        return any(player_key(s) == key for s in self._storytellers)

    def is_winner(self, player: Player) -> bool:
        key = player_key(player)
        return any(player_key(w) == key for w in self.winning_players)

    def _state(self) -> dict:
        return {
            'name': self._name,
            'participants': self._participants,
            'winning_alignment': self.winning_alignment,
            'winning_players': self.explicit_winners,
            'storytellers': self._storytellers,
            'description': self._description,
        }

    def __eq__(self, other):
        if type(other) is not type(self):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self):
        return hash(self._identity()[:3])

    def _identity(self):
        return (
            getattr(self, 'id', None),
            getattr(self, 'version', None),
            self._name,
            self._script,
            self._description,
            self._participants,
            self._winner,
            self._storytellers,
        )


class GameCreationRequest(GameData):
    """Everything needed to record a new game."""


class Game(GameData):
    def __init__(
        self,
        id,
        version,
        name,
        script,
        participants,
        winning_alignment=None,
        winning_players=None,
        description=None,
        storytellers=None,
        max_description_length: int = MAX_DESCRIPTION_LENGTH,
    ):
        super().__init__(
            name,
            script,
            participants,
            winning_alignment=winning_alignment,
            winning_players=winning_players,
            description=description,
            storytellers=storytellers,
            max_description_length=max_description_length,
        )
        self.id = id
        self.version = version

    @classmethod
    def from_request(cls, request: GameCreationRequest, id=None, version=None):
        return cls(
            id,
            version,
            request.name,
            request.script,
            request.participants,
            winning_alignment=request.winning_alignment,
            winning_players=request.explicit_winners,
            description=request.description,
            storytellers=request.storytellers,
            max_description_length=request._max_description_length,
        )

    def _apply(self, **changes) -> None:
        state = self._state()
        state.update(changes)
        fields = validate_game_fields(max_description_length=self._max_description_length, **state)
        self._name = state['name']
        self._description = state['description']
        self._participants = fields.participants
        self._winner = fields.winner
        self._storytellers = fields.storytellers

    @GameData.name.setter
    def name(self, value):
        self._apply(name=value)

    @GameData.script.setter
    def script(self, value):
        self._script = value

    @GameData.description.setter
    def description(self, value):
        self._apply(description=value)

    @GameData.participants.setter
    def participants(self, value):
        self._apply(participants=value)

    @GameData.storytellers.setter
    def storytellers(self, value):
        self._apply(storytellers=value)

    @GameData.winning_alignment.setter
    def winning_alignment(self, value):
        self._apply(winning_alignment=value, winning_players=None)

    @GameData.winning_players.setter
    def winning_players(self, value):
        self._apply(winning_alignment=None, winning_players=value)

    def __repr__(self):
        return f'Game(id={self.id!r}, version={self.version!r}, name={self._name!r})'
