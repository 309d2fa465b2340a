import pytest

from tourneypairing.constants import SORT_ASCENDING, SWISS_ADJACENT, SWISS_FOLD
from tourneypairing.exceptions import PairingImpossible
from tourneypairing.pairing import PairingSearch
from tourneypairing.pairing.swiss import assign_sides, default_round_count
from tourneypairing.player import Player


def _by_players(result):
    return {frozenset(pair) for pair in result.pairing_ids}


def test_four_player_scenario(make_tournament):
    tournament = make_tournament(
        "swiss", "ABCD", seeds=[1, 2, 3, 4], num_rounds=2, sorting=SORT_ASCENDING
    )

    first = tournament.start_round()
    assert first.pairing_ids == [("A", "B"), ("C", "D")]
    ab, cd = first.matches
    tournament.submit_result(ab.id, 2, 0)
    tournament.submit_result(cd.id, 1, 1)

    second = tournament.start_round()
    assert second.pairing_ids == [("A", "C"), ("D", "B")]
    assert second.warnings == []
    ac, db = second.matches
    tournament.submit_result(ac.id, 1, 0)
    tournament.submit_result(db.id, 0, 0, 1)

    points = {p.id: p.match_points for p in tournament.players.values()}
    assert points == {"A": 2.0, "B": 0.5, "C": 0.5, "D": 1.0}
    assert tournament.players["A"].game_points == 3.0
    assert tournament.players["D"].game_points == 1.5
    assert tournament.is_complete
    assert tournament.tournament_over
    assert [p.id for p in tournament.standings()][:2] == ["A", "D"]


def test_unseeded_first_round_uses_shuffle(make_tournament):
    tournament = make_tournament("swiss", "ABCD")
    tournament.shuffle = lambda sequence: sequence.reverse()

    assert tournament.start_round().pairing_ids == [("D", "C"), ("B", "A")]


def test_round_count_defaults_to_log2(make_tournament):
    tournament = make_tournament("swiss", "ABCDE")
    tournament.start_round()
    assert tournament.config.num_rounds == 3
    assert default_round_count(2) == 1
    assert default_round_count(16) == 4
    assert default_round_count(17) == 5


def test_no_repeats_when_avoidable(make_tournament, play_out):
    tournament = make_tournament("swiss", "ABCDEFGH", num_rounds=3)
    rounds = play_out(tournament)

    seen = set()
    for result in rounds:
        assert result.warnings == []
        for pair in _by_players(result):
            assert pair not in seen
            seen.add(pair)
    assert len(seen) == 12


def test_forced_repeat_is_reported(make_tournament, play_round):
    tournament = make_tournament("swiss", "AB", num_rounds=2)
    play_round(tournament)

    second = tournament.start_round()
    assert _by_players(second) == {frozenset("AB")}
    assert len(second.warnings) == 1
    assert "repeat pairing" in second.warnings[0]


def test_repeats_can_be_forbidden(make_tournament, play_round):
    tournament = make_tournament(
        "swiss", "AB", num_rounds=2, allow_repeat_pairings=False
    )
    play_round(tournament)
    matches_before = len(tournament.matches)

    with pytest.raises(PairingImpossible):
        tournament.start_round()
    assert tournament.current_round == 1
    assert len(tournament.matches) == matches_before


def test_odd_field_bye_rotates(make_tournament):
    tournament = make_tournament("swiss", "ABC", num_rounds=2)

    first = tournament.start_round()
    assert first.pairing_ids == [("A", "B")]
    assert first.byes == ["C"]
    assert tournament.players["C"].match_points == 1.0
    tournament.submit_result(first.matches[0].id, 1, 0)

    second = tournament.start_round()
    assert second.pairing_ids == [("A", "C")]
    assert second.byes == ["B"]
    assert second.warnings == []
    assert all(p.byes <= 1 for p in tournament.players.values())


def test_bye_game_wins_follow_best_of(make_tournament):
    tournament = make_tournament("swiss", "ABC", best_of=3)
    tournament.start_round()
    assert tournament.players["C"].game_points == 2.0


def test_initial_byes_sit_out(make_tournament):
    tournament = make_tournament("swiss", "ABC", num_rounds=2)
    tournament.create_player("D", player_id="D", initial_byes=1)

    first = tournament.start_round()
    assert first.pairing_ids == [("A", "B")]
    assert set(first.byes) == {"C", "D"}

    for match in first.matches:
        if match.active:
            tournament.submit_result(match.id, 1, 0)
    second = tournament.start_round()
    assert "D" in {pid for pair in second.pairing_ids for pid in pair}


def test_dropped_players_are_not_paired(make_tournament, play_round):
    tournament = make_tournament("swiss", "ABCD", num_rounds=2)
    play_round(tournament)
    tournament.drop_player("D")

    second = tournament.start_round()
    assert "D" not in {pid for pair in second.pairing_ids for pid in pair}
    assert len(second.byes) == 1


def test_late_entry_is_paired(make_tournament, play_round):
    tournament = make_tournament("swiss", "ABC", num_rounds=2)
    play_round(tournament)
    tournament.create_player("E", player_id="E")

    second = tournament.start_round()
    assert second.byes == []
    assert "E" in {pid for pair in second.pairing_ids for pid in pair}


def test_search_modes():
    players = [Player(alias, alias) for alias in "ABCDEFGH"]

    adjacent = PairingSearch(SWISS_ADJACENT, 1000).run(players)
    assert [(a.id, b.id) for a, b in adjacent] == [
        ("A", "B"),
        ("C", "D"),
        ("E", "F"),
        ("G", "H"),
    ]

    fold = PairingSearch(SWISS_FOLD, 1000).run(players)
    assert [(a.id, b.id) for a, b in fold] == [
        ("A", "E"),
        ("B", "F"),
        ("C", "G"),
        ("D", "H"),
    ]


def test_search_backtracks_around_rematches():
    a, b, c, d = (Player(alias, alias) for alias in "ABCD")
    # A v B would strand C and D, who already met
    for me, them in ((c, d), (d, c)):
        me.apply_result("m1", 1, them.id, 1, 1, 0, 1.0, 0.0, 0.5)

    pairs = PairingSearch(SWISS_ADJACENT, 1000).run([a, b, c, d])
    assert [(x.id, y.id) for x, y in pairs] == [("A", "C"), ("B", "D")]


def test_search_limit_is_shared():
    players = [Player(alias, alias) for alias in "ABCD"]
    search = PairingSearch(SWISS_ADJACENT, 1)
    assert search.run(players) is None
    assert search.exhausted


def test_sides_balance_when_tracked():
    higher, lower = Player("A", "A"), Player("B", "B")
    assert assign_sides(higher, lower) == (higher, lower)

    higher.apply_result("m1", 1, "X", 1, 0, 0, 1.0, 0.0, 0.5, side="one")
    assert assign_sides(higher, lower) == (lower, higher)
