class Match:
    def __init__(self, slot_a=None, slot_b=None, winner=None, score_a=0, score_b=0):
        self.slot_a = slot_a
        self.slot_b = slot_b
        self.winner = winner
        self.score_a = score_a
        self.score_b = score_b

    @property
    def participants(self):
        return [p for p in (self.slot_a, self.slot_b) if p is not None]

    @property
    def is_bye(self):
        return len(self.participants) == 1

    @property
    def is_decided(self):
        return self.winner is not None

    @property
    def is_playable(self):
        return len(self.participants) == 2 and not self.is_decided

    def to_dict(self):
        return {
            'slot_a': self.slot_a,
            'slot_b': self.slot_b,
            'winner': self.winner,
            'score_a': self.score_a,
            'score_b': self.score_b,
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            slot_a=data.get('slot_a'),
            slot_b=data.get('slot_b'),
            winner=data.get('winner'),
            score_a=data.get('score_a', 0),
            score_b=data.get('score_b', 0),
        )

    def __eq__(self, other):
        if not isinstance(other, Match):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return (f"Match(slot_a={self.slot_a}, slot_b={self.slot_b}, winner={self.winner}, "
                f"score_a={self.score_a}, score_b={self.score_b})")


class Bracket:
    def __init__(self, rounds, participant_count=0):
        self.rounds = rounds  # list of rounds, each a list of Match
        self.participant_count = participant_count

    @property
    def capacity(self):
        return len(self.rounds[0]) * 2 if self.rounds else 0

    @property
    def total_rounds(self):
        return len(self.rounds)

    @property
    def final(self):
        return self.rounds[-1][0] if self.rounds else None

    def match_at(self, round_index, match_index):
        """Return the match at a position, or None if the position does not exist."""
        if not isinstance(round_index, int) or not isinstance(match_index, int):
            return None
        if not 0 <= round_index < len(self.rounds):
            return None
        round_matches = self.rounds[round_index]
        if not 0 <= match_index < len(round_matches):
            return None
        return round_matches[match_index]

    def to_dict(self):
        return {
            'participant_count': self.participant_count,
            'capacity': self.capacity,
            'rounds': [[match.to_dict() for match in round_matches] for round_matches in self.rounds],
        }

    @classmethod
    def from_dict(cls, data):
        rounds = [[Match.from_dict(m) for m in round_matches] for round_matches in data.get('rounds', [])]
        return cls(rounds, participant_count=data.get('participant_count', 0))

    def __eq__(self, other):
        if not isinstance(other, Bracket):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Bracket(participants={self.participant_count}, capacity={self.capacity}, rounds={self.total_rounds})"
