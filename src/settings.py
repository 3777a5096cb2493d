"""
Application settings: built-in defaults merged with an optional YAML file.
"""
import os
import logging
import yaml

logger = logging.getLogger(__name__)

SETTINGS_ENV_VAR = 'BRACKET_SETTINGS_FILE'


def get_default_settings():
    """Return default settings."""
    return {
        'tournament_name': 'My Tournament',
        'default_participants': ['Team 1', 'Team 2', 'Team 3', 'Team 4'],
        'score_tracking': False,
        'match_height': 100,
        'match_gap': 20,
        'max_sessions': 1000,
    }


def load_settings(path=None):
    """
    Load settings from YAML file, merging with defaults.

    The path defaults to the BRACKET_SETTINGS_FILE environment variable.
    A missing or empty file yields the defaults; a file that is not valid
    YAML, or not a mapping, is logged and ignored.
    """
    defaults = get_default_settings()
    path = path or os.environ.get(SETTINGS_ENV_VAR)
    if not path or not os.path.exists(path):
        return defaults
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.warning(f'Failed to parse {path}: {e}')
        return defaults
    if not data:
        return defaults
    if not isinstance(data, dict):
        logger.warning(f'Ignoring {path}: expected a mapping, got {type(data).__name__}')
        return defaults
    # Merge with defaults to ensure all keys exist
    for key, value in defaults.items():
        if key not in data:
            data[key] = value
    return data
