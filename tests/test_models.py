"""Tests for Match totals, winner and the coffee top-up."""

from qeid.models import Match, MatchState
from qeid.rules import Mode, MultiplierOption, Team
from qeid.scoring import RoundInputs, build_round


def _hand(us: int, them: int, mode: Mode = Mode.SUN):
    return build_round(RoundInputs(mode=mode, base_us=us, base_them=them))


def _coffee(winner: Team, mode: Mode = Mode.SUN):
    return build_round(RoundInputs(mode=mode, multiplier=MultiplierOption.COFFEE, instant_winner=winner))


def test_empty_match():
    m = Match()
    assert m.total_us == 0
    assert m.total_them == 0
    assert m.winner is None
    assert m.state is MatchState.EMPTY


def test_winner_below_and_above_target():
    m = Match(target_score=50)
    m.rounds.append(_hand(20, 6))
    assert m.winner is None
    assert m.state is MatchState.IN_PROGRESS
    m.rounds.append(_hand(30, 22))
    assert m.total_us == 50
    assert m.winner is Team.US
    assert m.state is MatchState.WON


def test_both_over_target_higher_total_wins():
    m = Match(target_score=40)
    m.rounds.extend([_hand(20, 32), _hand(30, 22)])
    assert m.total_us == 50
    assert m.total_them == 54
    assert m.winner is Team.THEM


def test_exact_tie_over_target_favours_us():
    m = Match(target_score=40)
    m.rounds.extend([_hand(26, 26), _hand(26, 26)])
    assert m.winner is Team.US


def test_apply_instant_win_tops_up_to_target():
    m = Match()
    m.rounds.append(_hand(20, 6))
    m.rounds.append(_coffee(Team.THEM))
    m.apply_instant_win(Team.THEM)
    raw_them = 6 + 130
    assert m.top_up_them == 152 - raw_them
    assert m.top_up_us == 0
    assert m.total_them == 152
    assert m.winner is Team.THEM


def test_instant_win_overrides_higher_opponent():
    m = Match(target_score=100)
    m.rounds.append(_hand(130, 0))
    m.rounds.append(_coffee(Team.THEM, mode=Mode.HOKOM))
    m.apply_instant_win(Team.THEM)
    assert m.top_up_them == 20
    assert m.total_us > m.total_them
    assert m.winner is Team.THEM


def test_recalculate_instant_state_clears_without_coffee():
    m = Match()
    m.rounds.append(_coffee(Team.US))
    m.apply_instant_win(Team.US)
    m.rounds.pop()
    m.recalculate_instant_state()
    assert m.instant_winner is None
    assert m.top_up_us == 0
    assert m.winner is None


def test_recalculate_uses_last_coffee_and_rounds_up_to_it():
    m = Match()
    m.rounds.append(_coffee(Team.US))
    m.rounds.append(_hand(10, 16))
    m.rounds.append(_coffee(Team.THEM))
    m.rounds.append(_hand(20, 6))
    m.recalculate_instant_state()
    assert m.instant_winner is Team.THEM
    assert m.top_up_them == 152 - (16 + 130)
    assert m.top_up_us == 0


def test_reindex():
    m = Match()
    m.rounds.extend([_hand(13, 13), _hand(13, 13), _hand(13, 13)])
    del m.rounds[1]
    m.reindex()
    assert [r.sequence_index for r in m.rounds] == [1, 2]


def test_share_text():
    m = Match()
    m.rounds.append(_hand(20, 6))
    assert m.share_text() == "Us 20 - Them 6"


def test_winning_round():
    m = Match(target_score=100)
    assert m.winning_round() is None
    m.rounds = [_hand(52, 0), _hand(52, 0), _hand(52, 0)]
    assert m.winning_round() is m.rounds[1]

    coffee = _coffee(Team.THEM)
    m.rounds.append(coffee)
    m.recalculate_instant_state()
    assert m.winning_round() is coffee
