"""
Winner selection and score recording for a generated bracket.

Every operation returns a new Bracket built from a deep copy, so snapshots
held by callers never change underneath them.
"""
import copy
import logging
import math
import re
from typing import Optional

from engine.errors import InvalidMatchPosition, InvalidParticipantForMatch, MatchAlreadyDecided
from engine.models import Bracket, Match

logger = logging.getLogger(__name__)

_LEADING_INT = re.compile(r'\s*([+-]?\d+)', re.ASCII)


def _locate(bracket: Bracket, round_index: int, match_index: int) -> Match:
    match = bracket.match_at(round_index, match_index)
    if match is None:
        raise InvalidMatchPosition(round_index, match_index)
    return match


def parse_score(raw_score) -> int:
    """
    Parse a score entered by the user.

    Integers pass through. Strings are read up to the first non-digit, so
    "12abc" is 12 and "3.7" is 3. Anything without a leading integer,
    booleans and digit runs too long to convert count as 0.
    """
    if isinstance(raw_score, bool):
        logger.debug("Boolean score %r, using 0", raw_score)
        return 0
    if isinstance(raw_score, int):
        return int(raw_score)
    if isinstance(raw_score, float) and math.isfinite(raw_score):
        return int(raw_score)

    found = _LEADING_INT.match(raw_score) if isinstance(raw_score, str) else None
    if not found:
        logger.debug("Unparsable score %r, using 0", raw_score)
        return 0
    try:
        return int(found.group(1))
    except ValueError:
        logger.debug("Score of %d characters is too long to convert, using 0", len(found.group(1)))
        return 0


def select_winner(bracket: Bracket, round_index: int, match_index: int, participant: str) -> Bracket:
    """
    Record the winner of a match and advance them to the next round.

    The winner of match m moves into match m // 2 of the next round,
    taking slot_a when m is even and slot_b when m is odd. The final has
    no next round.

    Raises:
        InvalidMatchPosition: the indices do not address a match
        MatchAlreadyDecided: the match already has a winner
        InvalidParticipantForMatch: participant is in neither slot
    """
    current = _locate(bracket, round_index, match_index)
    if current.is_decided:
        raise MatchAlreadyDecided(current.winner, round_index, match_index)
    if participant is None or participant not in (current.slot_a, current.slot_b):
        raise InvalidParticipantForMatch(participant, round_index, match_index)

    updated = copy.deepcopy(bracket)
    updated.rounds[round_index][match_index].winner = participant

    if round_index < updated.total_rounds - 1:
        next_match = updated.rounds[round_index + 1][match_index // 2]
        if match_index % 2 == 0:
            next_match.slot_a = participant
        else:
            next_match.slot_b = participant

    logger.debug("Round %d match %d won by %r", round_index, match_index, participant)
    return updated


def update_score(bracket: Bracket, round_index: int, match_index: int, participant: str, raw_score) -> Bracket:
    """
    Record a participant's score for a match.

    Scores never decide the match on their own; winner selection stays a
    separate step.
    """
    current = _locate(bracket, round_index, match_index)
    score = parse_score(raw_score)

    updated = copy.deepcopy(bracket)
    target = updated.rounds[round_index][match_index]
    if participant == current.slot_a:
        target.score_a = score
    else:
        target.score_b = score

    return updated


def _can_still_fill(bracket: Bracket, round_index: int, match_index: int) -> bool:
    """True if this match may yet send a participant into the next round."""
    match = bracket.rounds[round_index][match_index]
    if match.is_decided:
        return False
    if match.participants:
        return True
    if round_index == 0:
        return False
    return (_can_still_fill(bracket, round_index - 1, 2 * match_index)
            or _can_still_fill(bracket, round_index - 1, 2 * match_index + 1))


def awaiting_opponent(bracket: Bracket, round_index: int, match_index: int) -> bool:
    """
    A lone participant whose empty slot is still fed by an unfinished match.

    select_winner accepts such a participant; the page only offers the Win
    button once the opponent can no longer arrive.
    """
    match = _locate(bracket, round_index, match_index)
    if round_index == 0 or match.is_decided or len(match.participants) != 1:
        return False
    feeder = 2 * match_index if match.slot_a is None else 2 * match_index + 1
    return _can_still_fill(bracket, round_index - 1, feeder)


def champion_of(bracket: Optional[Bracket]) -> Optional[str]:
    """Return the winner of the final, or None while it is undecided."""
    if bracket is None or bracket.final is None:
        return None
    return bracket.final.winner


def is_complete(bracket: Optional[Bracket]) -> bool:
    """A tournament is complete once its final has a winner."""
    return champion_of(bracket) is not None
