"""
Tree view geometry.

Each match in round r+1 sits exactly halfway between the two round r
matches that feed it, so connector lines line up without measuring the
rendered page.
"""
from typing import Dict, List

from engine.elimination import get_round_name
from engine.models import Bracket

MATCH_HEIGHT = 100
MATCH_GAP = 20


def offset_of(round_index: int, match_index: int, match_height: int = MATCH_HEIGHT,
              match_gap: int = MATCH_GAP) -> float:
    """Vertical pixel offset of a match box in the tree view."""
    unit = match_height + match_gap
    multiplier = 2 ** round_index
    return match_index * multiplier * unit + (multiplier - 1) * unit / 2


def column_height(round_index: int, match_count: int, match_height: int = MATCH_HEIGHT,
                  match_gap: int = MATCH_GAP) -> int:
    """Height reserved for a round's column, so absolutely positioned boxes fit."""
    return match_count * (2 ** round_index) * (match_height + match_gap)


def tree_layout(bracket: Bracket, match_height: int = MATCH_HEIGHT, match_gap: int = MATCH_GAP) -> List[Dict]:
    """
    Position every match of a bracket for the tree view.

    Returns one entry per round with its name, column height and matches,
    each match carrying its index, offset and current state.
    """
    columns = []
    for round_index, round_matches in enumerate(bracket.rounds):
        matches = []
        for match_index, match in enumerate(round_matches):
            entry = match.to_dict()
            entry['index'] = match_index
            entry['top'] = offset_of(round_index, match_index, match_height, match_gap)
            matches.append(entry)

        columns.append({
            'index': round_index,
            'name': get_round_name(round_index, bracket.total_rounds),
            'height': column_height(round_index, len(round_matches), match_height, match_gap),
            'matches': matches,
        })
    return columns
