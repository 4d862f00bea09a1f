from flask import Blueprint, current_app, jsonify, request

from typefight.errors import SessionNotFound

sessions = Blueprint('sessions', __name__)


def _controller():
    return current_app.extensions['typefight']


@sessions.route('/create', methods=['POST'])
def create_session():
    data = request.get_json(silent=True) or {}
    try:
        session = _controller().create_session(data.get('gameName') or None)
    except Exception:
        current_app.logger.exception('[session-create] failed')
        return jsonify({'success': False, 'error': 'Failed to create session'}), 500
    return jsonify({
        'success': True,
        'joinCode': session.join_code,
        'gameName': session.game_name,
    }), 201


@sessions.route('/<string:join_code>', methods=['GET'])
def get_session(join_code):
    try:
        session = _controller().get_session(join_code)
    except SessionNotFound as exc:
        return jsonify(exc.to_dict()), 404
    return jsonify({'success': True, 'session': session.to_dict()})
