import pytest

from gamestats.errors import (
    DuplicateParticipant,
    DuplicateStoryteller,
    DuplicateWinner,
    FieldTooLong,
    MissingRequiredField,
    MissingWinnerSpecification,
    NullArgument,
    UnknownWinner,
)
from gamestats.services.games.entities import (
    Alignment,
    ByAlignment,
    ByExplicitList,
    Player,
    PlayerParticipation,
)
from gamestats.services.games.game import Game, GameCreationRequest


def _seat(player, character, alive=True):
    return PlayerParticipation.of(player, character, alive_at_end=alive)


def _game(domain, **overrides):
    fields = dict(
        name='Test',
        script=domain.script,
        participants=[_seat(domain.p1, domain.townsfolk), _seat(domain.p2, domain.minion)],
        winning_alignment=Alignment.GOOD,
    )
    fields.update(overrides)
    return Game(1, 1, **fields)


def test_same_player_twice_is_rejected(domain):
    with pytest.raises(DuplicateParticipant) as exc:
        _game(domain, participants=[
            _seat(domain.p1, domain.townsfolk),
            _seat(Player(1, 'Player1 again'), domain.minion),
        ])
    assert exc.value.details['player_id'] == 1


def test_seats_without_player_may_repeat(domain):
    game = _game(domain, participants=[
        _seat(None, domain.townsfolk),
        _seat(None, domain.minion),
        _seat(domain.p1, domain.demon),
    ])
    assert len(game.participants) == 3


def test_explicit_winner_must_have_played(domain):
    with pytest.raises(UnknownWinner) as exc:
        _game(domain, winning_alignment=None, winning_players=[domain.p1, domain.p3])
    assert exc.value.details['player_id'] == 3


def test_a_winner_must_be_given(domain):
    with pytest.raises(MissingWinnerSpecification):
        _game(domain, winning_alignment=None, winning_players=None)


def test_empty_explicit_winner_list_is_a_valid_winner(domain):
    game = _game(domain, winning_alignment=None, winning_players=[])
    assert game.winner == ByExplicitList(())
    assert game.winning_players == []


def test_alignment_wins_over_explicit_list(domain):
    game = _game(domain, winning_alignment=Alignment.EVIL, winning_players=[domain.p1])
    assert game.winner == ByAlignment(Alignment.EVIL)
    assert game.explicit_winners is None
    assert game.winning_players == [domain.p2]


def test_duplicate_and_null_winners_are_rejected(domain):
    with pytest.raises(DuplicateWinner):
        _game(domain, winning_alignment=None, winning_players=[domain.p1, domain.p1])
    with pytest.raises(NullArgument):
        _game(domain, winning_alignment=None, winning_players=[None])


def test_storytellers_must_be_unique(domain):
    with pytest.raises(DuplicateStoryteller) as exc:
        _game(domain, storytellers=[domain.p3, Player(3, 'Player3')])
    assert exc.value.details['player_id'] == 3


def test_storyteller_may_also_have_a_seat(domain):
    game = _game(domain, storytellers=[domain.p1])
    assert game.is_storyteller(domain.p1)
    assert game.participation_of(domain.p1) is not None


def test_description_length_is_limited(domain):
    with pytest.raises(FieldTooLong) as exc:
        _game(domain, description='x' * 5001)
    assert exc.value.details['max_length'] == 5000
    assert _game(domain, description='x' * 5000).description == 'x' * 5000


def test_description_limit_follows_configuration(domain):
    with pytest.raises(FieldTooLong):
        _game(domain, description='x' * 11, max_description_length=10)


def test_name_and_participants_are_required(domain):
    with pytest.raises(MissingRequiredField) as exc:
        _game(domain, name=' ')
    assert exc.value.field == 'name'
    with pytest.raises(MissingRequiredField) as exc:
        _game(domain, participants=None)
    assert exc.value.field == 'participants'


def test_an_empty_participant_list_is_allowed(domain):
    game = _game(domain, participants=[])
    assert game.participants == []
    assert game.winning_players == []


def test_rules_are_checked_in_a_fixed_order(domain):
    duplicate_seats = [_seat(domain.p1, domain.townsfolk), _seat(domain.p1, domain.minion)]

    # duplicate participant is reported before anything else
    with pytest.raises(DuplicateParticipant):
        _game(
            domain,
            name=None,
            participants=duplicate_seats,
            winning_alignment=None,
            storytellers=[domain.p3, domain.p3],
            description='x' * 6000,
        )
    # then the missing winner
    with pytest.raises(MissingWinnerSpecification):
        _game(domain, name=None, winning_alignment=None, storytellers=[domain.p3, domain.p3])
    # then unknown winners, before duplicate storytellers
    with pytest.raises(UnknownWinner):
        _game(domain, winning_alignment=None, winning_players=[domain.p4], storytellers=[domain.p3, domain.p3])
    # then storytellers, before the description
    with pytest.raises(DuplicateStoryteller):
        _game(domain, storytellers=[domain.p3, domain.p3], description='x' * 6000)
    # then the description, before the name
    with pytest.raises(FieldTooLong):
        _game(domain, name=None, description='x' * 6000)
    # a missing participant list counts as empty until the last check
    with pytest.raises(MissingRequiredField) as exc:
        _game(domain, name=None, participants=None)
    assert exc.value.field == 'name'


def test_game_copies_collections_on_the_way_in_and_out(domain):
    seats = [_seat(domain.p1, domain.townsfolk), _seat(domain.p2, domain.minion)]
    storytellers = [domain.p3]
    game = _game(domain, participants=seats, storytellers=storytellers)

    seats.append(_seat(domain.p4, domain.demon))
    storytellers.clear()
    assert len(game.participants) == 2
    assert game.storytellers == [domain.p3]

    returned = game.participants
    returned.clear()
    assert len(game.participants) == 2


def test_edits_are_validated_and_rejected_edits_change_nothing(domain):
    game = _game(domain)

    with pytest.raises(DuplicateParticipant):
        game.participants = [_seat(domain.p1, domain.townsfolk), _seat(domain.p1, domain.demon)]
    assert [p.player for p in game.participants] == [domain.p1, domain.p2]

    with pytest.raises(FieldTooLong):
        game.description = 'x' * 6000
    assert game.description is None

    game.name = 'Renamed'
    assert game.name == 'Renamed'


def test_switching_winner_kind_clears_the_other(domain):
    game = _game(domain)
    game.winning_players = [domain.p2]
    assert game.winning_alignment is None
    assert game.explicit_winners == [domain.p2]

    game.winning_alignment = Alignment.GOOD
    assert game.explicit_winners is None
    assert game.winning_players == [domain.p1]


def test_removing_an_explicit_winner_from_the_seats_is_rejected(domain):
    game = _game(domain, winning_alignment=None, winning_players=[domain.p2])
    with pytest.raises(UnknownWinner):
        game.participants = [_seat(domain.p1, domain.townsfolk)]
    assert game.explicit_winners == [domain.p2]


def test_alignment_winners_follow_the_seats(domain):
    game = _game(domain)
    assert game.winning_players == [domain.p1]

    game.participants = [_seat(domain.p2, domain.minion), _seat(domain.p3, domain.other_townsfolk)]
    assert game.winning_alignment == Alignment.GOOD
    assert game.winning_players == [domain.p3]

    game.winning_alignment = Alignment.EVIL
    assert game.winning_players == [domain.p2]


def test_game_rebuilt_from_request_is_equal(domain):
    request = GameCreationRequest(
        'Test',
        domain.script,
        [_seat(domain.p1, domain.townsfolk), _seat(domain.p2, domain.minion, alive=False)],
        winning_players=[domain.p2],
        description='A close one',
        storytellers=[domain.p3],
    )
    first = Game.from_request(request, id=5, version=1)
    second = Game.from_request(request, id=5, version=1)
    assert first == second
    assert hash(first) == hash(second)
    assert first.explicit_winners == [domain.p2]
    assert first.storytellers == [domain.p3]
    assert first != Game.from_request(request, id=5, version=2)


def test_unsaved_players_only_match_themselves(domain):
    newcomer = Player(None, 'Newcomer')
    lookalike = Player(None, 'Newcomer')
    game = _game(domain, participants=[_seat(newcomer, domain.townsfolk), _seat(lookalike, domain.minion)])
    assert game.participation_of(newcomer).initial_character == domain.townsfolk
    assert game.participation_of(lookalike).initial_character == domain.minion
