# Command line entry point: generate a bracket from a participant file and print it

import argparse
import random
import sys
import yaml
from engine.elimination import generate_bracket, get_round_name, calculate_byes
from engine.errors import BracketError
from settings import load_settings


def load_participants(file_path):
    """Read participants from YAML: either a list of names or a mapping with a 'participants' list."""
    with open(file_path, mode='r', encoding='utf-8') as file:
        data = yaml.safe_load(file)
    if isinstance(data, dict):
        data = data.get('participants', [])
    if not data:
        return []
    return [str(name).strip() for name in data if str(name).strip()]


def format_bracket(bracket, tournament_name):
    lines = [f"# {tournament_name}",
             f"{bracket.participant_count} participants, bracket of {bracket.capacity}, "
             f"{calculate_byes(bracket.participant_count)} byes"]
    for round_index, round_matches in enumerate(bracket.rounds):
        lines.append("")
        lines.append(f"## {get_round_name(round_index, bracket.total_rounds)}")
        for match_index, match in enumerate(round_matches):
            slot_a = match.slot_a or 'TBD'
            slot_b = match.slot_b or 'TBD'
            if match.is_bye:
                lines.append(f"Match {match_index + 1}: {match.winner} (bye)")
            else:
                lines.append(f"Match {match_index + 1}: {slot_a} vs {slot_b}")
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description='Generate a single elimination bracket.')
    parser.add_argument('participants_file', help='YAML file listing the participants')
    parser.add_argument('--seed', type=int, help='Random seed for a reproducible draw')
    parser.add_argument('--settings', help='Settings YAML file (defaults to $BRACKET_SETTINGS_FILE)')
    args = parser.parse_args(argv)

    settings = load_settings(args.settings)
    participants = load_participants(args.participants_file)
    rng = random.Random(args.seed) if args.seed is not None else None

    try:
        bracket = generate_bracket(participants, rng=rng)
    except BracketError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(format_bracket(bracket, settings['tournament_name']))
    return 0


if __name__ == '__main__':
    sys.exit(main())
