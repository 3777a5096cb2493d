import logging

from engine.advancement import select_winner, update_score, champion_of, is_complete
from engine.elimination import generate_bracket, get_bracket_display, get_round_name
from engine.errors import (
    NoActiveBracket, BracketInProgress, ScoreTrackingDisabled, InvalidParticipantIndex
)
from engine.layout import tree_layout

logger = logging.getLogger(__name__)

VIEWS = ('round', 'tree')


class TournamentSession:
    """
    Owns the participant list and the single active bracket of one tournament.

    The bracket is never edited in place: engine operations return a new
    Bracket and the session swaps it in, so a failed operation leaves the
    previous bracket as it was.
    """

    def __init__(self, settings=None):
        settings = settings or {}
        self.tournament_name = settings.get('tournament_name', 'My Tournament')
        self.participants = list(settings.get('default_participants', []))
        self.score_tracking = bool(settings.get('score_tracking', False))
        self.match_height = settings.get('match_height', 100)
        self.match_gap = settings.get('match_gap', 20)
        self.bracket = None
        self.current_round = 0
        self.view = 'round'

    def __repr__(self):
        return (f"TournamentSession(name={self.tournament_name}, participants={len(self.participants)}, "
                f"generated={self.bracket is not None})")

    def _require_bracket(self):
        if self.bracket is None:
            raise NoActiveBracket()
        return self.bracket

    def _require_editable(self):
        if self.bracket is not None:
            raise BracketInProgress()

    def _check_index(self, index):
        if not isinstance(index, int) or not 0 <= index < len(self.participants):
            raise InvalidParticipantIndex(index)

    # Participants and settings

    def add_participant(self, name):
        """Append a participant. Blank names are ignored; returns whether one was added."""
        self._require_editable()
        name = (name or '').strip()
        if not name:
            return False
        self.participants.append(name)
        return True

    def edit_participant(self, index, name):
        """Rename a participant. A blank name keeps the old one."""
        self._require_editable()
        self._check_index(index)
        name = (name or '').strip()
        if not name:
            return False
        self.participants[index] = name
        return True

    def remove_participant(self, index):
        self._require_editable()
        self._check_index(index)
        return self.participants.pop(index)

    def rename(self, name):
        name = (name or '').strip()
        if name:
            self.tournament_name = name
        return self.tournament_name

    def set_score_tracking(self, enabled):
        self.score_tracking = bool(enabled)

    # Bracket lifecycle

    def generate(self, rng=None):
        """Build a new bracket from a snapshot of the current participants."""
        self.bracket = generate_bracket(list(self.participants), rng=rng)
        self.current_round = 0
        logger.info("Generated bracket for %d participants (%d rounds)",
                    self.bracket.participant_count, self.bracket.total_rounds)
        return self.bracket

    def reset(self):
        self.bracket = None
        self.current_round = 0

    def select_winner(self, round_index, match_index, participant):
        self.bracket = select_winner(self._require_bracket(), round_index, match_index, participant)
        if self.is_complete:
            logger.info("Tournament %r won by %r", self.tournament_name, self.champion)
        return self.bracket

    def update_score(self, round_index, match_index, participant, raw_score):
        if not self.score_tracking:
            raise ScoreTrackingDisabled()
        self.bracket = update_score(self._require_bracket(), round_index, match_index, participant, raw_score)
        return self.bracket

    @property
    def champion(self):
        return champion_of(self.bracket)

    @property
    def is_complete(self):
        return is_complete(self.bracket)

    # Navigation

    def go_to_round(self, round_index):
        """Move the round cursor, clamped to the rounds that exist."""
        bracket = self._require_bracket()
        self.current_round = max(0, min(round_index, bracket.total_rounds - 1))
        return self.current_round

    def next_round(self):
        return self.go_to_round(self.current_round + 1)

    def previous_round(self):
        return self.go_to_round(self.current_round - 1)

    def toggle_view(self):
        self.view = 'tree' if self.view == 'round' else 'round'
        return self.view

    # Snapshots

    def layout(self):
        return tree_layout(self._require_bracket(), self.match_height, self.match_gap)

    def to_dict(self):
        data = {
            'tournament_name': self.tournament_name,
            'participants': list(self.participants),
            'score_tracking': self.score_tracking,
            'view': self.view,
            'current_round': self.current_round,
            'bracket': None,
            'champion': self.champion,
            'is_complete': self.is_complete,
        }
        if self.bracket is not None:
            data['bracket'] = get_bracket_display(self.bracket)
            data['current_round_name'] = get_round_name(self.current_round, self.bracket.total_rounds)
        return data
