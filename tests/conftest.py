import itertools

import pytest

from tourneypairing.models import TournamentConfig
from tourneypairing.tournament import Tournament


@pytest.fixture
def id_generator():
    """Deterministic ids: 0000000000000001, 0000000000000002, ..."""
    counter = itertools.count(1)

    def generate(length):
        return f"{next(counter):0{length}d}"

    return generate


@pytest.fixture
def identity_shuffle():
    def shuffle(sequence):
        return None

    return shuffle


@pytest.fixture
def make_tournament(id_generator, identity_shuffle):
    """Build a tournament whose player ids are their aliases."""

    def factory(format="swiss", aliases=(), seeds=None, **options):
        config = TournamentConfig(format=format, **options)
        tournament = Tournament(
            config, id_generator=id_generator, shuffle=identity_shuffle
        )
        for index, alias in enumerate(aliases):
            seed = seeds[index] if seeds is not None else None
            tournament.create_player(alias, player_id=alias, seed=seed)
        return tournament

    return factory


def _play_round(tournament, winner_slot=1):
    """Start a round and let the player in ``winner_slot`` win every match 1-0."""
    result = tournament.start_round()
    for match in result.matches:
        if match.active and match.is_ready:
            if winner_slot == 1:
                tournament.submit_result(match.id, 1, 0)
            else:
                tournament.submit_result(match.id, 0, 1)
    return result


def _play_out(tournament, winner_slot=1):
    """Play rounds until the event is complete."""
    rounds = []
    while not tournament.is_complete:
        rounds.append(_play_round(tournament, winner_slot))
    return rounds


@pytest.fixture
def play_round():
    return _play_round


@pytest.fixture
def play_out():
    return _play_out
