"""
Unit tests for the tournament session.
"""
import pytest
import random
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from engine.session import TournamentSession
from engine.errors import (
    BracketInProgress, InsufficientParticipants, InvalidParticipantIndex, MatchAlreadyDecided,
    NoActiveBracket, ScoreTrackingDisabled
)
from settings import get_default_settings


@pytest.fixture
def session():
    return TournamentSession(get_default_settings())


@pytest.fixture
def ordered_session(keep_order):
    """A session with A..D generated in order."""
    s = TournamentSession({'default_participants': ['A', 'B', 'C', 'D']})
    s.generate(rng=keep_order)
    return s


class TestParticipants:
    """Tests for editing the participant list."""

    def test_defaults_from_settings(self, session):
        assert session.participants == ['Team 1', 'Team 2', 'Team 3', 'Team 4']
        assert session.tournament_name == 'My Tournament'
        assert session.score_tracking is False
        assert session.bracket is None

    def test_empty_settings(self):
        s = TournamentSession()
        assert s.participants == []
        assert s.view == 'round'

    def test_add_strips_name(self, session):
        assert session.add_participant('  Eagles ')
        assert session.participants[-1] == 'Eagles'

    def test_add_blank_ignored(self, session):
        assert not session.add_participant('   ')
        assert not session.add_participant(None)
        assert len(session.participants) == 4

    def test_duplicates_allowed(self, session):
        session.add_participant('Team 1')
        assert session.participants.count('Team 1') == 2

    def test_edit(self, session):
        assert session.edit_participant(1, ' Hawks ')
        assert session.participants[1] == 'Hawks'

    def test_edit_blank_keeps_name(self, session):
        assert not session.edit_participant(0, '')
        assert session.participants[0] == 'Team 1'

    def test_remove(self, session):
        assert session.remove_participant(0) == 'Team 1'
        assert session.participants == ['Team 2', 'Team 3', 'Team 4']

    @pytest.mark.parametrize("index", [-1, 4, '1', None])
    def test_bad_index(self, session, index):
        with pytest.raises(InvalidParticipantIndex):
            session.edit_participant(index, 'X')
        with pytest.raises(InvalidParticipantIndex):
            session.remove_participant(index)

    def test_locked_while_bracket_exists(self, ordered_session):
        with pytest.raises(BracketInProgress):
            ordered_session.add_participant('E')
        with pytest.raises(BracketInProgress):
            ordered_session.edit_participant(0, 'E')
        with pytest.raises(BracketInProgress):
            ordered_session.remove_participant(0)

    def test_rename(self, session):
        assert session.rename(' Spring Cup ') == 'Spring Cup'
        assert session.rename('  ') == 'Spring Cup'


class TestLifecycle:
    """Tests for generate, reset and advancement through the session."""

    def test_generate(self, session):
        bracket = session.generate(rng=random.Random(1))
        assert session.bracket is bracket
        assert bracket.participant_count == 4

    def test_generate_needs_two(self):
        s = TournamentSession({'default_participants': ['Only']})
        with pytest.raises(InsufficientParticipants):
            s.generate()
        assert s.bracket is None

    def test_generate_uses_snapshot(self, session):
        """A bracket keeps the participant list it was generated from."""
        bracket = session.generate(rng=random.Random(1))
        session.reset()
        session.add_participant('Late')
        assert bracket.participant_count == 4

    def test_reset(self, ordered_session):
        ordered_session.next_round()
        ordered_session.reset()
        assert ordered_session.bracket is None
        assert ordered_session.current_round == 0

    def test_play_to_champion(self, ordered_session):
        ordered_session.select_winner(0, 0, 'A')
        ordered_session.select_winner(0, 1, 'C')
        assert not ordered_session.is_complete
        ordered_session.select_winner(1, 0, 'C')
        assert ordered_session.champion == 'C'
        assert ordered_session.is_complete

    def test_rejected_selection_keeps_bracket(self, ordered_session):
        ordered_session.select_winner(0, 0, 'A')
        before = ordered_session.bracket
        with pytest.raises(MatchAlreadyDecided):
            ordered_session.select_winner(0, 0, 'B')
        assert ordered_session.bracket is before

    def test_prior_snapshot_kept(self, ordered_session):
        before = ordered_session.bracket
        ordered_session.select_winner(0, 0, 'A')
        assert before.rounds[0][0].winner is None
        assert ordered_session.bracket.rounds[0][0].winner == 'A'

    def test_no_bracket(self, session):
        with pytest.raises(NoActiveBracket):
            session.select_winner(0, 0, 'Team 1')
        with pytest.raises(NoActiveBracket):
            session.next_round()
        with pytest.raises(NoActiveBracket):
            session.layout()

    def test_score_requires_tracking(self, ordered_session):
        with pytest.raises(ScoreTrackingDisabled):
            ordered_session.update_score(0, 0, 'A', '3')

    def test_score_with_tracking(self, ordered_session):
        ordered_session.set_score_tracking(True)
        ordered_session.update_score(0, 0, 'B', 'x')
        ordered_session.update_score(0, 0, 'A', '11')
        match = ordered_session.bracket.rounds[0][0]
        assert (match.score_a, match.score_b) == (11, 0)


class TestNavigation:
    """Tests for the round cursor and view."""

    def test_cursor_clamps(self, ordered_session):
        assert ordered_session.previous_round() == 0
        assert ordered_session.next_round() == 1
        assert ordered_session.next_round() == 1
        assert ordered_session.go_to_round(-5) == 0
        assert ordered_session.go_to_round(9) == 1

    def test_generate_resets_cursor(self, ordered_session, keep_order):
        ordered_session.next_round()
        ordered_session.reset()
        ordered_session.generate(rng=keep_order)
        assert ordered_session.current_round == 0

    def test_toggle_view(self, session):
        assert session.toggle_view() == 'tree'
        assert session.toggle_view() == 'round'


class TestSnapshot:
    """Tests for the serialized session state."""

    def test_before_generate(self, session):
        data = session.to_dict()
        assert data['bracket'] is None
        assert data['champion'] is None
        assert data['participants'] == session.participants

    def test_after_generate(self, ordered_session):
        ordered_session.next_round()
        data = ordered_session.to_dict()
        assert data['bracket']['total_rounds'] == 2
        assert data['current_round_name'] == 'Final'

    def test_layout_uses_settings(self, keep_order):
        s = TournamentSession({'default_participants': ['A', 'B', 'C', 'D'],
                               'match_height': 40, 'match_gap': 10})
        s.generate(rng=keep_order)
        assert s.layout()[0]['matches'][1]['top'] == 50
