import os
import sys
from types import SimpleNamespace

import pytest

# Ensure the backend root (containing the `gamestats` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
BACKEND_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if BACKEND_ROOT not in sys.path:
    sys.path.insert(0, BACKEND_ROOT)

from gamestats import create_app, db
from gamestats.services.character_service import CharacterService
from gamestats.services.games.entities import (
    Character,
    CharacterCreationRequest,
    CharacterType,
    Player,
    Script,
    ScriptCreationRequest,
)
from gamestats.services.player_service import PlayerService
from gamestats.services.script_service import ScriptService


class TestConfig:
    TESTING = True
    SECRET_KEY = os.environ.get('SECRET_KEY', 'test-secret')
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    MAX_DESCRIPTION_LENGTH = 5000
    STATS_WORKERS = 0
    STATS_PARALLEL_THRESHOLD = 500


@pytest.fixture()
def flask_app():
    application = create_app(TestConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def file_app(tmp_path):
    """App backed by a sqlite file, so separate sessions use separate
    connections."""

    class FileConfig(TestConfig):
        SQLALCHEMY_DATABASE_URI = f"sqlite:///{tmp_path / 'gamestats-test.db'}"

    application = create_app(FileConfig)
    with application.app_context():
        db.create_all()
        yield application
        db.session.remove()
        db.drop_all()
        db.engine.dispose()


def _seed_catalog():
    characters = CharacterService().create_characters([
        CharacterCreationRequest('Washerwoman', CharacterType.TOWNSFOLK),
        CharacterCreationRequest('Butler', CharacterType.OUTSIDER),
        CharacterCreationRequest('Poisoner', CharacterType.MINION),
        CharacterCreationRequest('Imp', CharacterType.DEMON),
    ])
    script = ScriptService().create_script(ScriptCreationRequest('Trouble Brewing', frozenset(characters)))
    players = PlayerService()
    washerwoman, butler, poisoner, imp = characters
    return SimpleNamespace(
        washerwoman=washerwoman,
        butler=butler,
        poisoner=poisoner,
        imp=imp,
        script=script,
        alice=players.create_player('Alice'),
        bob=players.create_player('Bob'),
        cara=players.create_player('Cara'),
        dan=players.create_player('Dan'),
    )


@pytest.fixture()
def catalog(flask_app):
    """Four stored characters, one script containing them and four players."""
    return _seed_catalog()


@pytest.fixture()
def file_catalog(file_app):
    return _seed_catalog()


@pytest.fixture()
def domain():
    """Unstored domain objects for tests that need no database."""
    townsfolk = Character(1, 1, 'Character1', CharacterType.TOWNSFOLK)
    minion = Character(2, 1, 'Character2', CharacterType.MINION)
    other_townsfolk = Character(3, 1, 'Character3', CharacterType.TOWNSFOLK)
    demon = Character(4, 1, 'Character4', CharacterType.DEMON)
    return SimpleNamespace(
        townsfolk=townsfolk,
        minion=minion,
        other_townsfolk=other_townsfolk,
        demon=demon,
        script=Script(1, 1, 'Test Script', [townsfolk, minion, other_townsfolk, demon], description='Test'),
        p1=Player(1, 'Player1'),
        p2=Player(2, 'Player2'),
        p3=Player(3, 'Player3'),
        p4=Player(4, 'Player4'),
    )
