"""Domain value types: alignments, characters, scripts, players and the
per-game participation record.

These are plain in-memory objects. They know nothing about the database;
``gamestats.services`` maps them to and from ``gamestats.models`` records.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from gamestats.errors import MissingRequiredField, NullArgument


class Alignment(Enum):
    GOOD = 'GOOD'
    EVIL = 'EVIL'


class CharacterType(Enum):
    """Characters are grouped into types. Townsfolk and outsiders are usually
    good, minions and demons usually evil. Travellers join late or leave early
    and can be on either team; they start out good unless told otherwise."""

    TOWNSFOLK = 'TOWNSFOLK'
    OUTSIDER = 'OUTSIDER'
    MINION = 'MINION'
    DEMON = 'DEMON'
    TRAVELLER = 'TRAVELLER'

    @property
    def default_alignment(self) -> Alignment:
        return _DEFAULT_ALIGNMENTS[self]


_DEFAULT_ALIGNMENTS = {
    CharacterType.TOWNSFOLK: Alignment.GOOD,
    CharacterType.OUTSIDER: Alignment.GOOD,
    CharacterType.MINION: Alignment.EVIL,
    CharacterType.DEMON: Alignment.EVIL,
    CharacterType.TRAVELLER: Alignment.GOOD,
}


def _is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


@dataclass(frozen=True)
class Character:
    id: Optional[int]
    version: Optional[int]
    name: str
    character_type: CharacterType
    script_tool_identifier: Optional[str] = None
    wiki_page: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self):
        if _is_blank(self.name):
            raise MissingRequiredField('name')
        if self.character_type is None:
            raise MissingRequiredField('character_type')

    @property
    def default_alignment(self) -> Alignment:
        return self.character_type.default_alignment


@dataclass(frozen=True)
class CharacterCreationRequest:
    name: str
    character_type: CharacterType
    script_tool_identifier: Optional[str] = None
    wiki_page: Optional[str] = None
    image_url: Optional[str] = None

    def __post_init__(self):
        if _is_blank(self.name):
            raise MissingRequiredField('name')
        if self.character_type is None:
            raise MissingRequiredField('character_type')


def _character_set(characters) -> FrozenSet[Character]:
    if characters is None:
        raise MissingRequiredField('characters')
    copied = list(characters)
    if any(c is None for c in copied):
        raise NullArgument('characters')
    if not copied:
        raise MissingRequiredField('characters')
    return frozenset(copied)


class Script:
    """A named collection of characters that may appear in a game.

    The character set can only be replaced as a whole, and it can never be
    empty.
    """

    def __init__(self, id, version, name, characters, description=None, wiki_page=None):
        if _is_blank(name):
            raise MissingRequiredField('name')
        self.id = id
        self.version = version
        self.name = name
        self.description = description
        self.wiki_page = wiki_page
        self._characters = _character_set(characters)

    @property
    def characters(self) -> FrozenSet[Character]:
        return self._characters

    @characters.setter
    def characters(self, characters):
        self._characters = _character_set(characters)

    def __eq__(self, other):
        if not isinstance(other, Script):
            return NotImplemented
        return (
            self.id == other.id
            and self.version == other.version
            and self.name == other.name
            and self.description == other.description
            and self.wiki_page == other.wiki_page
            and self._characters == other._characters
        )

    def __hash__(self):
        return hash((self.id, self.version, self.name))

    def __repr__(self):
        return f'Script(id={self.id!r}, version={self.version!r}, name={self.name!r}, characters={len(self._characters)})'


@dataclass(frozen=True)
class ScriptCreationRequest:
    name: str
    characters: FrozenSet[Character]
    description: Optional[str] = None
    wiki_page: Optional[str] = None

    def __post_init__(self):
        if _is_blank(self.name):
            raise MissingRequiredField('name')
        object.__setattr__(self, 'characters', _character_set(self.characters))


@dataclass(frozen=True)
class User:
    id: Optional[int]
    name: str


class Player:
    """A person recorded in games. Players without an account are fine; a
    player owned by a user shows the user's name instead of its own."""

    def __init__(self, id=None, name=None, owner: Optional[User] = None):
        if owner is None and _is_blank(name):
            raise MissingRequiredField('name')
        self.id = id
        self._name = name
        self.owner = owner

    @property
    def name(self):
        if self.owner is not None:
            return self.owner.name
        return self._name

    @name.setter
    def name(self, value):
        if _is_blank(value):
            raise MissingRequiredField('name')
        self._name = value

    @property
    def stored_name(self):
        return self._name

    def __eq__(self, other):
        if not isinstance(other, Player):
            return NotImplemented
        own = self.owner.id if self.owner is not None else None
        their = other.owner.id if other.owner is not None else None
        return self.id == other.id and self.name == other.name and own == their

    def __hash__(self):
        # The name can be edited, the id cannot
        return hash(self.id)

    def __repr__(self):
        return f'Player(id={self.id!r}, name={self.name!r})'


def player_key(player: Player):
    """Identity used for duplicate and membership checks. Stored players are
    compared by id; players not yet stored only equal themselves."""
    if player.id is not None:
        return player.id
    return ('unsaved', id(player))


@dataclass(frozen=True)
class PlayerParticipation:
    """One seat in one game.

    Missing values are filled in once, here: the end character defaults to
    the initial character, and each alignment defaults to the default
    alignment of the matching character.
    """

    player: Optional[Player] = None
    initial_character: Optional[Character] = None
    initial_alignment: Optional[Alignment] = None
    end_character: Optional[Character] = None
    end_alignment: Optional[Alignment] = None
    alive_at_end: bool = True

    def __post_init__(self):
        if self.end_character is None and self.initial_character is not None:
            object.__setattr__(self, 'end_character', self.initial_character)
        if self.initial_alignment is None and self.initial_character is not None:
            object.__setattr__(self, 'initial_alignment', self.initial_character.default_alignment)
        if self.end_alignment is None and self.end_character is not None:
            object.__setattr__(self, 'end_alignment', self.end_character.default_alignment)

    @classmethod
    def of(cls, player: Optional[Player], character: Optional[Character], alive_at_end: bool = True):
        """Shorthand for a seat whose character and alignment never changed."""
        return cls(player=player, initial_character=character, alive_at_end=alive_at_end)


@dataclass(frozen=True)
class ByAlignment:
    alignment: Alignment


@dataclass(frozen=True)
class ByExplicitList:
    players: Tuple[Player, ...] = field(default_factory=tuple)

    @property
    def player_keys(self):
        return {player_key(p) for p in self.players}
