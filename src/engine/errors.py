"""
Exceptions raised by the bracket engine and the tournament session.

Every error is recoverable: the caller keeps its previous bracket.
"""


class BracketError(Exception):
    """Base class for all bracket errors."""


class InsufficientParticipants(BracketError):
    def __init__(self, count: int):
        self.count = count
        super().__init__(f"At least 2 participants are required (got {count}).")


class InvalidMatchPosition(BracketError):
    def __init__(self, round_index, match_index):
        self.round_index = round_index
        self.match_index = match_index
        super().__init__(f"No match at round {round_index}, match {match_index}.")


class InvalidParticipantForMatch(BracketError):
    def __init__(self, participant, round_index: int, match_index: int):
        self.participant = participant
        self.round_index = round_index
        self.match_index = match_index
        super().__init__(
            f"{participant!r} is not playing in round {round_index}, match {match_index}."
        )


class MatchAlreadyDecided(BracketError):
    def __init__(self, winner, round_index: int, match_index: int):
        self.winner = winner
        self.round_index = round_index
        self.match_index = match_index
        super().__init__(
            f"Round {round_index}, match {match_index} was already won by {winner!r}."
        )


class NoActiveBracket(BracketError):
    def __init__(self):
        super().__init__("No bracket has been generated yet.")


class BracketInProgress(BracketError):
    def __init__(self):
        super().__init__("Participants cannot change while a bracket is in progress. Start over first.")


class ScoreTrackingDisabled(BracketError):
    def __init__(self):
        super().__init__("Score tracking is not enabled for this tournament.")


class InvalidParticipantIndex(BracketError):
    def __init__(self, index):
        self.index = index
        super().__init__(f"No participant at position {index}.")
