"""
Single elimination bracket generation.
"""
import math
import random
from typing import List, Dict, Optional, Sequence

from engine.advancement import awaiting_opponent
from engine.errors import InsufficientParticipants
from engine.models import Match, Bracket


def get_round_name(round_index: int, total_rounds: int) -> str:
    """Get the display name of a round from its index."""
    if round_index == total_rounds - 1:
        return "Final"
    return f"Round {round_index + 1}"


def calculate_bracket_size(num_participants: int) -> int:
    """Calculate the bracket size (next power of 2)."""
    if num_participants <= 0:
        return 0
    return 2 ** math.ceil(math.log2(num_participants))


def calculate_byes(num_participants: int) -> int:
    """Calculate number of byes needed."""
    bracket_size = calculate_bracket_size(num_participants)
    return bracket_size - num_participants


def shuffle_participants(participants: Sequence[str], rng: Optional[random.Random] = None) -> List[str]:
    """
    Return a uniformly shuffled copy of the participants.

    random.Random.shuffle is a Fisher-Yates shuffle, so every seeding order
    is equally likely. The input sequence is left untouched.
    """
    rng = rng or random.Random()
    shuffled = list(participants)
    rng.shuffle(shuffled)
    return shuffled


def create_first_round(shuffled: List[str], bracket_size: int) -> List[Match]:
    """
    Pair consecutive shuffled entries into the opening round.

    Match i takes positions 2i and 2i+1. Positions past the end of the list
    are empty slots, and a match left with a single participant is a bye
    whose winner is set immediately.
    """
    matches = []
    for i in range(0, bracket_size, 2):
        slot_a = shuffled[i] if i < len(shuffled) else None
        slot_b = shuffled[i + 1] if i + 1 < len(shuffled) else None

        match = Match(slot_a=slot_a, slot_b=slot_b)
        if match.is_bye:
            match.winner = slot_a if slot_a is not None else slot_b
        matches.append(match)

    return matches


def generate_bracket(participants: Sequence[str], rng: Optional[random.Random] = None) -> Bracket:
    """
    Generate a complete single elimination bracket.

    All rounds are allocated up front. Later rounds stay empty until
    winners are selected, except for the second-round slots of bye
    winners. Byes are resolved in the opening round only: a second-round
    match is never decided here, even if it has a single participant.

    Args:
        participants: Participant display names (duplicates allowed)
        rng: Optional random generator, for reproducible seeding

    Raises:
        InsufficientParticipants: fewer than 2 participants were given
    """
    num_participants = len(participants)
    if num_participants < 2:
        raise InsufficientParticipants(num_participants)

    bracket_size = calculate_bracket_size(num_participants)
    shuffled = shuffle_participants(participants, rng)

    rounds = [create_first_round(shuffled, bracket_size)]
    while len(rounds[-1]) > 1:
        rounds.append([Match() for _ in range(len(rounds[-1]) // 2)])

    # Bye winners take their place in the second round straight away; a
    # decided match cannot be selected again, so nothing else would move them.
    if len(rounds) > 1:
        for match_index, match in enumerate(rounds[0]):
            if match.is_bye:
                next_match = rounds[1][match_index // 2]
                if match_index % 2 == 0:
                    next_match.slot_a = match.winner
                else:
                    next_match.slot_b = match.winner

    return Bracket(rounds, participant_count=num_participants)


def get_bracket_display(bracket: Bracket) -> Dict:
    """
    Get bracket data formatted for UI display.
    """
    rounds = []
    matches_per_round = {}
    decided_matches = 0

    for round_index, round_matches in enumerate(bracket.rounds):
        round_name = get_round_name(round_index, bracket.total_rounds)
        playable = [m for m in round_matches if len(m.participants) == 2]
        matches_per_round[round_name] = len(playable)
        decided_matches += sum(1 for m in playable if m.is_decided)
        rounds.append({
            'index': round_index,
            'name': round_name,
            'matches': [dict(m.to_dict(), awaiting_opponent=awaiting_opponent(bracket, round_index, i))
                        for i, m in enumerate(round_matches)],
        })

    first_round_byes = sum(1 for m in bracket.rounds[0] if m.is_bye) if bracket.rounds else 0
    final = bracket.final

    return {
        'rounds': rounds,
        'bracket_size': bracket.capacity,
        'total_rounds': bracket.total_rounds,
        'total_participants': bracket.participant_count,
        'byes': first_round_byes,
        'matches_per_round': matches_per_round,
        'decided_matches': decided_matches,
        'champion': final.winner if final else None,
    }
