"""
Flask web application for the knockout bracket manager.
"""
import os
import re
import uuid
import logging
import threading
from collections import OrderedDict
import yaml
from flask import Flask, render_template, request, jsonify, redirect, url_for, Response, session
from engine.errors import BracketError
from engine.session import TournamentSession
from settings import load_settings

app = Flask(__name__)


def _get_secret_key() -> bytes:
    """Get SECRET_KEY from env, or generate one for this process."""
    env_key = os.environ.get('SECRET_KEY')
    if env_key:
        return env_key.encode()
    return os.urandom(24)


app.secret_key = _get_secret_key()

if os.environ.get('BRACKET_LOG_LEVEL'):
    app.logger.setLevel(os.environ['BRACKET_LOG_LEVEL'].upper())
    logging.getLogger('engine').setLevel(os.environ['BRACKET_LOG_LEVEL'].upper())

# One TournamentSession per browser session, held in memory only and capped
# at MAX_SESSIONS; the least recently used session is dropped first.
# Structure: {session_id: TournamentSession}
_sessions = OrderedDict()
_sessions_lock = threading.Lock()

SESSION_KEY = 'bracket_session'

app.config.setdefault('MAX_SESSIONS', load_settings()['max_sessions'])

_INT_PATTERN = re.compile(r'\s*-?\d+\s*', re.ASCII)


def get_tournament() -> TournamentSession:
    """Return the tournament owned by the current browser session, creating it on first use."""
    session_id = session.get(SESSION_KEY)
    with _sessions_lock:
        if session_id and session_id in _sessions:
            _sessions.move_to_end(session_id)
            return _sessions[session_id]
        session_id = uuid.uuid4().hex
        session[SESSION_KEY] = session_id
        tournament = TournamentSession(load_settings())
        _sessions[session_id] = tournament
        app.logger.info(f'Created tournament session {session_id}')
        while len(_sessions) > max(1, app.config['MAX_SESSIONS']):
            evicted, _ = _sessions.popitem(last=False)
            app.logger.info(f'Evicted tournament session {evicted}')
        return tournament


def clear_sessions():
    """Drop every in-memory tournament."""
    with _sessions_lock:
        _sessions.clear()


def _int_field(data: dict, key: str):
    """Return data[key] as an int, or None if it is missing or not an integer."""
    value = data.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _state():
    return jsonify({'success': True, 'state': get_tournament().to_dict()})


@app.errorhandler(BracketError)
def handle_bracket_error(e):
    app.logger.warning(f'Rejected {request.path}: {e}')
    return jsonify({'error': str(e), 'type': type(e).__name__}), 400


@app.context_processor
def inject_tournament_context():
    """Make the tournament name available to all templates."""
    return {'tournament_name': get_tournament().tournament_name}


@app.route('/')
def index():
    """Show the participant editor, or the bracket once generated."""
    tournament = get_tournament()
    state = tournament.to_dict()
    layout = tournament.layout() if tournament.bracket is not None and tournament.view == 'tree' else None
    return render_template('index.html', state=state, layout=layout,
                           match_height=tournament.match_height)


@app.route('/api/state', methods=['GET'])
def api_state():
    return _state()


@app.route('/api/participants', methods=['POST'])
def api_add_participant():
    """Add a participant to the list."""
    data = request.get_json(silent=True) or {}
    name = data.get('name')
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Missing participant name'}), 400
    get_tournament().add_participant(name)
    return _state()


@app.route('/api/participants/edit', methods=['POST'])
def api_edit_participant():
    """Rename a participant."""
    data = request.get_json(silent=True) or {}
    index = _int_field(data, 'index')
    name = data.get('name')
    if index is None:
        return jsonify({'error': 'Missing participant index'}), 400
    if not isinstance(name, str) or not name.strip():
        return jsonify({'error': 'Missing participant name'}), 400
    get_tournament().edit_participant(index, name)
    return _state()


@app.route('/api/participants/delete', methods=['POST'])
def api_delete_participant():
    """Remove a participant."""
    data = request.get_json(silent=True) or {}
    index = _int_field(data, 'index')
    if index is None:
        return jsonify({'error': 'Missing participant index'}), 400
    get_tournament().remove_participant(index)
    return _state()


@app.route('/api/settings', methods=['POST'])
def api_update_settings():
    """Update the tournament name and/or score tracking."""
    data = request.get_json(silent=True) or {}
    tournament = get_tournament()
    if 'tournament_name' in data:
        if not isinstance(data['tournament_name'], str):
            return jsonify({'error': 'Tournament name must be text'}), 400
        tournament.rename(data['tournament_name'])
    if 'score_tracking' in data:
        tournament.set_score_tracking(data['score_tracking'])
    return _state()


@app.route('/api/generate', methods=['POST'])
def api_generate():
    """Generate a bracket from the current participants."""
    get_tournament().generate()
    return _state()


@app.route('/api/reset', methods=['POST'])
def api_reset():
    """Discard the bracket and go back to participant entry."""
    get_tournament().reset()
    return _state()


@app.route('/api/select-winner', methods=['POST'])
def api_select_winner():
    """Record the winner of a match and advance them."""
    data = request.get_json(silent=True) or {}
    round_index = _int_field(data, 'round')
    match_index = _int_field(data, 'match')
    participant = data.get('participant')
    if round_index is None or match_index is None:
        return jsonify({'error': 'Missing round or match'}), 400
    if not participant:
        return jsonify({'error': 'Missing participant'}), 400

    tournament = get_tournament()
    tournament.select_winner(round_index, match_index, participant)
    return jsonify({
        'success': True,
        'winner': participant,
        'champion': tournament.champion,
        'state': tournament.to_dict()
    })


@app.route('/api/score', methods=['POST'])
def api_update_score():
    """Record a participant's score. Unparsable scores count as 0."""
    data = request.get_json(silent=True) or {}
    round_index = _int_field(data, 'round')
    match_index = _int_field(data, 'match')
    if round_index is None or match_index is None:
        return jsonify({'error': 'Missing round or match'}), 400
    if not data.get('participant'):
        return jsonify({'error': 'Missing participant'}), 400

    get_tournament().update_score(round_index, match_index, data['participant'], data.get('score'))
    return _state()


@app.route('/api/round', methods=['POST'])
def api_change_round():
    """Move the round view to the next, previous or a given round."""
    data = request.get_json(silent=True) or {}
    tournament = get_tournament()
    direction = data.get('direction')
    if direction == 'next':
        tournament.next_round()
    elif direction == 'previous':
        tournament.previous_round()
    elif _int_field(data, 'round') is not None:
        tournament.go_to_round(_int_field(data, 'round'))
    else:
        return jsonify({'error': 'Expected direction "next"/"previous" or a round index'}), 400
    return _state()


@app.route('/api/view', methods=['POST'])
def api_toggle_view():
    """Switch between round view and tree view."""
    get_tournament().toggle_view()
    return _state()


@app.route('/api/layout', methods=['GET'])
def api_layout():
    """Tree view positions for every match."""
    tournament = get_tournament()
    return jsonify({
        'match_height': tournament.match_height,
        'match_gap': tournament.match_gap,
        'rounds': tournament.layout()
    })


@app.route('/api/export', methods=['GET'])
def api_export():
    """Download the current bracket as YAML."""
    tournament = get_tournament()
    if tournament.bracket is None:
        return jsonify({'error': 'No bracket to export'}), 404
    snapshot = {
        'tournament_name': tournament.tournament_name,
        'score_tracking': tournament.score_tracking,
        'champion': tournament.champion,
        'bracket': tournament.bracket.to_dict(),
    }
    return Response(
        yaml.safe_dump(snapshot, default_flow_style=False, sort_keys=False, allow_unicode=True),
        mimetype='application/x-yaml',
        headers={'Content-Disposition': 'attachment; filename=bracket.yaml'},
    )


# Plain form posts from the page, for browsers without JavaScript

@app.route('/generate', methods=['POST'])
def generate_page():
    try:
        get_tournament().generate()
    except BracketError as e:
        app.logger.warning(f'Generate rejected: {e}')
    return redirect(url_for('index'))


@app.route('/reset', methods=['POST'])
def reset_page():
    get_tournament().reset()
    return redirect(url_for('index'))


if __name__ == '__main__':
    app.run(debug=True, port=5000)
